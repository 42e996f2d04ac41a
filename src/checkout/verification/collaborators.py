"""Collaborators of the verification pass.

Each one is passed to ``DiscountVerification`` explicitly, so a check can run
in process, over HTTP, or against test doubles.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from checkout.api.responses import mutation_errors, place_order_payload
from checkout.order.placement import PlaceOrder
from checkout.quote.quote import Quote
from checkout.verification.errors import CartNotFound, RequestFailed


class DomainPlacementClient:
    """Places orders by processing ``PlaceOrder`` in the active domain."""

    def place_order(self, cart_id: str) -> dict:
        try:
            order_number = current_domain.process(PlaceOrder(cart_id=cart_id), asynchronous=False)
        except (ValidationError, ObjectNotFoundError) as exc:
            return mutation_errors(exc)
        return place_order_payload(order_number)


class HttpPlacementClient:
    """Places orders through the ``/graphql/placeOrder`` endpoint.

    ``session`` is anything with a requests-style ``post`` (a ``requests.Session``
    or FastAPI's ``TestClient``).
    """

    def __init__(self, session, base_url: str = ""):
        self.session = session
        self.base_url = base_url.rstrip("/")

    def place_order(self, cart_id: str) -> dict:
        response = self.session.post(
            f"{self.base_url}/graphql/placeOrder",
            json={"input": {"cart_id": cart_id}},
        )
        if not 200 <= response.status_code < 300:
            raise RequestFailed(
                f"placeOrder: HTTP {response.status_code}: {response.text}",
                field="status_code",
                expected=200,
                actual=response.status_code,
            )
        return response.json()


class QuoteRowReader:
    """Row access to a cart's ``quote_item``, ``quote_address`` and ``quote_address_item`` records.

    Rows are plain dicts of the stored columns, filtered by exact column match.
    """

    TABLES = {
        "quote_item": "items",
        "quote_address": "addresses",
        "quote_address_item": "address_items",
    }

    def fetch_rows(self, table: str, reserved_order_id: str, **filters) -> list[dict]:
        if table not in self.TABLES:
            raise ValueError(f"Unknown table `{table}`")

        quote = current_domain.repository_for(Quote).find_by_reserved_order_id(reserved_order_id)
        if quote is None:
            raise CartNotFound(
                f"Cart not found for reserved order id {reserved_order_id!r}",
                field="reserved_order_id",
                expected=reserved_order_id,
            )

        rows = [record.to_dict() for record in getattr(quote, self.TABLES[table])]
        return [row for row in rows if all(row.get(column) == value for column, value in filters.items())]

    def fetch_row(self, table: str, reserved_order_id: str, **filters) -> dict | None:
        rows = self.fetch_rows(table, reserved_order_id, **filters)
        return rows[0] if rows else None
