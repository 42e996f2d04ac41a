"""Masked cart ids — opaque public references to quotes.

Clients never see a quote's internal id. Every cart is created together with
a ``QuoteIdMask`` and all cart commands address the cart by its masked id.
"""

from uuid import uuid4

from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.quote.quote import Quote


@checkout.aggregate
class QuoteIdMask:
    masked_id = String(required=True, max_length=32)
    quote_id = Identifier(required=True)

    @classmethod
    def for_quote(cls, quote_id):
        return cls(masked_id=uuid4().hex, quote_id=str(quote_id))


@checkout.repository(part_of=QuoteIdMask)
class QuoteIdMaskRepository:
    def find_by_masked_id(self, masked_id: str) -> QuoteIdMask | None:
        results = self._dao.query.filter(masked_id=masked_id).all().items
        return results[0] if results else None

    def find_by_quote_id(self, quote_id: str) -> QuoteIdMask | None:
        results = self._dao.query.filter(quote_id=str(quote_id)).all().items
        return results[0] if results else None


def resolve_quote(masked_id: str) -> Quote:
    """Load the quote behind a masked cart id."""
    mask = current_domain.repository_for(QuoteIdMask).find_by_masked_id(masked_id)
    if mask is None:
        raise ObjectNotFoundError(f'Could not find a cart with ID "{masked_id}"')
    return current_domain.repository_for(Quote).get(mask.quote_id)


class GetMaskedQuoteIdByReservedOrderId:
    def execute(self, reserved_order_id: str) -> str:
        quote = current_domain.repository_for(Quote).find_by_reserved_order_id(reserved_order_id)
        if quote is None:
            raise ObjectNotFoundError(f'Could not find a cart with reserved order ID "{reserved_order_id}"')

        mask = current_domain.repository_for(QuoteIdMask).find_by_quote_id(str(quote.id))
        if mask is None:
            raise ObjectNotFoundError(f'Cart "{reserved_order_id}" has no masked ID')
        return mask.masked_id
