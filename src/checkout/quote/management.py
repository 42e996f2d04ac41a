"""Cart management — commands and handler.

Handles guest cart creation and the guest email.
"""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from checkout.domain import checkout, logger
from checkout.quote.masking import QuoteIdMask, resolve_quote
from checkout.quote.quote import Quote


@checkout.command(part_of="Quote")
class CreateEmptyCart:
    """Create an empty guest cart. Returns the cart's masked id."""

    reserved_order_id = String(max_length=64)


@checkout.command(part_of="Quote")
class SetGuestEmail:
    cart_id = String(required=True, max_length=32)
    email = String(required=True, max_length=255)


@checkout.command_handler(part_of=Quote)
class ManageCartHandler:
    @handle(CreateEmptyCart)
    def create_empty_cart(self, command):
        quote = Quote.create(reserved_order_id=command.reserved_order_id)
        mask = QuoteIdMask.for_quote(quote.id)

        current_domain.repository_for(Quote).add(quote)
        current_domain.repository_for(QuoteIdMask).add(mask)

        logger.info("cart_created", quote_id=str(quote.id), reserved_order_id=command.reserved_order_id)
        return mask.masked_id

    @handle(SetGuestEmail)
    def set_guest_email(self, command):
        quote = resolve_quote(command.cart_id)
        quote.set_guest_email(command.email)
        current_domain.repository_for(Quote).add(quote)
