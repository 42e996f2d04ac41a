"""Order aggregate (CQRS) — the result of placing a cart.

Everything on an order is a snapshot of the cart at placement time:
line items with their discounts, both addresses, and the pricing totals.
The order number is the cart's reserved order id.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from checkout.domain import checkout
from checkout.order.events import OrderPlaced


class OrderStatus(Enum):
    PENDING = "Pending"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@checkout.value_object(part_of="Order")
class OrderAddress:
    """A shipping or billing address as it was when the order was placed."""

    firstname = String(required=True, max_length=255)
    lastname = String(required=True, max_length=255)
    company = String(max_length=255)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    region = String(max_length=100)
    postcode = String(required=True, max_length=20)
    country_code = String(required=True, max_length=2)
    telephone = String(max_length=50)


@checkout.value_object(part_of="Order")
class OrderPricing:
    """Financial summary of an order, locked at placement."""

    subtotal = Float(default=0.0)
    shipping_amount = Float(default=0.0)
    discount_amount = Float(default=0.0)
    grand_total = Float(default=0.0)
    base_grand_total = Float(default=0.0)
    currency = String(max_length=3, default="USD")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@checkout.entity(part_of="Order")
class OrderItem:
    quote_item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    sku = String(required=True, max_length=64)
    name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    row_total = Float(default=0.0)
    discount_amount = Float(default=0.0)
    applied_rule_ids = String(max_length=255)
    discounts = Text()  # JSON: discount records copied from the quote item


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@checkout.aggregate
class Order:
    order_number = String(required=True, max_length=64)
    quote_id = Identifier(required=True)
    customer_email = String(required=True, max_length=255)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(OrderAddress)
    billing_address = ValueObject(OrderAddress)
    pricing = ValueObject(OrderPricing)
    shipping_method = String(max_length=100)
    payment_method = String(max_length=50)
    applied_rule_ids = String(max_length=255)
    created_at = DateTime()

    @classmethod
    def place(cls, quote):
        """Create an order from a cart whose discounts and totals have been collected."""
        now = datetime.now(UTC)
        shipping = quote.shipping_address
        billing = quote.billing_address

        order = cls(
            order_number=quote.reserved_order_id,
            quote_id=str(quote.id),
            customer_email=quote.customer_email,
            status=OrderStatus.PENDING.value,
            shipping_address=OrderAddress(**shipping.snapshot()),
            billing_address=OrderAddress(**billing.snapshot()),
            pricing=OrderPricing(
                subtotal=quote.subtotal,
                shipping_amount=shipping.shipping_amount,
                discount_amount=quote.discount_amount,
                grand_total=quote.grand_total,
                base_grand_total=quote.base_grand_total,
                currency=quote.quote_currency_code,
            ),
            shipping_method=shipping.shipping_method,
            payment_method=quote.payment_method,
            applied_rule_ids=quote.applied_rule_ids,
            created_at=now,
        )

        for item in quote.items:
            order.add_items(
                OrderItem(
                    quote_item_id=str(item.id),
                    product_id=str(item.product_id),
                    sku=item.sku,
                    name=item.name,
                    quantity=item.quantity,
                    price=item.price,
                    row_total=item.row_total,
                    discount_amount=item.discount_amount,
                    applied_rule_ids=item.applied_rule_ids,
                    discounts=item.discounts,
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                quote_id=str(quote.id),
                customer_email=order.customer_email,
                items=json.dumps(
                    [
                        {
                            "sku": item.sku,
                            "quantity": item.quantity,
                            "price": item.price,
                            "discount_amount": item.discount_amount,
                            "applied_rule_ids": item.applied_rule_ids,
                        }
                        for item in order.items
                    ]
                ),
                discount_amount=order.pricing.discount_amount,
                grand_total=order.pricing.grand_total,
                currency=order.pricing.currency,
                applied_rule_ids=order.applied_rule_ids,
                placed_at=now,
            )
        )
        return order


@checkout.repository(part_of=Order)
class OrderRepository:
    def find_by_order_number(self, order_number: str) -> Order | None:
        results = self._dao.query.filter(order_number=order_number).all().items
        return results[0] if results else None
