"""Discount verification pass.

Places a cart and checks that the discount records written during placement
encode exactly the expected rule application:

    1. The placement call returns the cart's reserved order id, without errors
    2. The first quote item carries a record for the rule, for the expected amount
    3. The first address item on the requested address carries the same record
    4. An address row of the requested type exists

Collaborators are injected:

    placement_client  ``place_order(cart_id) -> dict`` response envelope
    row_reader        ``fetch_rows(table, reserved_order_id, **filters) -> list[dict]``
    rule_lookup       ``get_rule_by_name(name)`` returning ``rule_id`` and ``label``
"""

from dataclasses import dataclass

from checkout.domain import logger
from checkout.quote.discounts import DiscountRecord
from checkout.verification.errors import MissingDiscount, RequestFailed
from checkout.verification.validator import (
    validate_address_discount_presence,
    validate_item_discount,
    validate_uniform_amounts,
)


@dataclass(frozen=True)
class VerificationReport:
    order_number: str
    rule_id: int
    item_discount: DiscountRecord
    address_item_discount: DiscountRecord
    address_row: dict


class DiscountVerification:
    def __init__(self, placement_client, row_reader, rule_lookup):
        self.placement_client = placement_client
        self.row_reader = row_reader
        self.rule_lookup = rule_lookup

    def verify(
        self,
        cart_id,
        reserved_order_id,
        rule_name,
        expected_amount,
        address_type="shipping",
        expect_uniform_amounts=True,
    ) -> VerificationReport:
        order_number = self._place(cart_id, reserved_order_id)
        rule = self.rule_lookup.get_rule_by_name(rule_name)

        item_rows = self.row_reader.fetch_rows("quote_item", reserved_order_id)
        if not item_rows:
            raise MissingDiscount("quote_item: the cart has no items", field="quote_item")
        item_discount = validate_item_discount(item_rows[0].get("discounts"), rule.label, rule.rule_id, expected_amount)

        address_rows = self.row_reader.fetch_rows("quote_address", reserved_order_id)
        address_row = validate_address_discount_presence(address_rows, address_type)

        address_item_rows = self.row_reader.fetch_rows(
            "quote_address_item",
            reserved_order_id,
            quote_address_id=address_row["id"],
        )
        if not address_item_rows:
            raise MissingDiscount(
                f"quote_address_item: no items on the {address_type} address",
                field="quote_address_item",
            )
        address_item_discount = validate_item_discount(
            address_item_rows[0].get("discounts"), rule.label, rule.rule_id, expected_amount
        )

        if expect_uniform_amounts:
            validate_uniform_amounts(item_discount)
            validate_uniform_amounts(address_item_discount)

        logger.info(
            "discounts_verified",
            order_number=order_number,
            rule_id=rule.rule_id,
            amount=str(item_discount.discount.amount),
        )
        return VerificationReport(
            order_number=order_number,
            rule_id=rule.rule_id,
            item_discount=item_discount,
            address_item_discount=address_item_discount,
            address_row=address_row,
        )

    def _place(self, cart_id, reserved_order_id) -> str:
        response = self.placement_client.place_order(cart_id)

        if response.get("errors"):
            messages = [error.get("message") for error in response["errors"]]
            raise RequestFailed(
                f"placeOrder: returned errors {messages!r}",
                field="errors",
                expected=None,
                actual=messages,
            )

        try:
            order_number = response["data"]["placeOrder"]["order"]["order_number"]
        except (KeyError, TypeError):
            raise RequestFailed(
                f"placeOrder: response has no order number: {response!r}",
                field="order_number",
                actual=response,
            ) from None

        if order_number != reserved_order_id:
            raise RequestFailed.mismatch("order_number", reserved_order_id, order_number)
        return order_number
