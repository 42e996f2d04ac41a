"""Order placement — command and handler.

Placing a cart:
    1. Resolve the cart from its masked id and check it is ready
    2. Run the active sales rules through the promotion engine
    3. Write discount records to items, shipping address items and the shipping address
    4. Collect totals, create the order and deactivate the cart
"""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from checkout.catalogue.product import Product
from checkout.domain import checkout, logger
from checkout.order.order import Order
from checkout.quote.masking import resolve_quote
from checkout.quote.quote import Quote
from checkout.salesrule.engine import PromotionEngine
from checkout.salesrule.rule import SalesRule
from checkout.utils.logging import bind_cart_context


@checkout.command(part_of="Order")
class PlaceOrder:
    """Place the cart as an order. Returns the order number."""

    cart_id = String(required=True, max_length=32)


@checkout.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        bind_cart_context(command.cart_id)
        quote = resolve_quote(command.cart_id)
        quote.assert_ready_for_placement()

        rules = current_domain.repository_for(SalesRule).active_rules()
        applications = PromotionEngine(rules).apply(quote.items, _categories_by_product(quote))

        quote.apply_discounts(applications)
        quote.collect_totals()
        quote.reserve_order_id()

        order = Order.place(quote)
        quote.submit()

        current_domain.repository_for(Quote).add(quote)
        current_domain.repository_for(Order).add(order)
        bind_cart_context(command.cart_id, order_number=order.order_number)

        logger.info(
            "order_placed",
            order_number=order.order_number,
            quote_id=str(quote.id),
            applied_rule_ids=order.applied_rule_ids,
            discount_amount=order.pricing.discount_amount,
        )
        return order.order_number


def _categories_by_product(quote):
    repo = current_domain.repository_for(Product)
    return {str(item.product_id): repo.get(item.product_id).categories() for item in quote.items}
