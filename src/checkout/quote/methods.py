"""Cart shipping and payment methods — commands and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.quote.masking import resolve_quote
from checkout.quote.quote import Quote


@checkout.command(part_of="Quote")
class SetShippingMethod:
    cart_id = String(required=True, max_length=32)
    carrier_code = String(required=True, max_length=50)
    method_code = String(required=True, max_length=50)


@checkout.command(part_of="Quote")
class SetPaymentMethod:
    cart_id = String(required=True, max_length=32)
    code = String(required=True, max_length=50)


@checkout.command_handler(part_of=Quote)
class ManageCartMethodsHandler:
    @handle(SetShippingMethod)
    def set_shipping_method(self, command):
        quote = resolve_quote(command.cart_id)
        quote.set_shipping_method(command.carrier_code, command.method_code)
        current_domain.repository_for(Quote).add(quote)

    @handle(SetPaymentMethod)
    def set_payment_method(self, command):
        quote = resolve_quote(command.cart_id)
        quote.set_payment_method(command.code)
        current_domain.repository_for(Quote).add(quote)
