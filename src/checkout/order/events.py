"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from checkout.domain import checkout


@checkout.event(part_of="Order")
class OrderPlaced:
    """A cart was placed as an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    quote_id = Identifier(required=True)
    customer_email = String(required=True)
    items = Text(required=True)  # JSON: list of {sku, quantity, price, discount_amount, applied_rule_ids}
    discount_amount = Float(required=True)
    grand_total = Float(required=True)
    currency = String(max_length=3, required=True)
    applied_rule_ids = String()
    placed_at = DateTime(required=True)
