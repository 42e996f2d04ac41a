"""Cart item management — command and handler."""

from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from checkout.catalogue.product import Product
from checkout.domain import checkout
from checkout.quote.masking import resolve_quote
from checkout.quote.quote import Quote


@checkout.command(part_of="Quote")
class AddProductToCart:
    cart_id = String(required=True, max_length=32)
    sku = String(required=True, max_length=64)
    quantity = Integer(required=True, min_value=1)


@checkout.command_handler(part_of=Quote)
class ManageCartItemsHandler:
    @handle(AddProductToCart)
    def add_product_to_cart(self, command):
        quote = resolve_quote(command.cart_id)
        product = current_domain.repository_for(Product).get_by_sku(command.sku)

        quote.add_product(
            product_id=str(product.id),
            sku=product.sku,
            name=product.name,
            price=product.price,
            quantity=command.quantity,
        )
        current_domain.repository_for(Quote).add(quote)
