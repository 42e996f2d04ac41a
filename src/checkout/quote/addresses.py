"""Cart addresses — commands and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, String, Text
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.quote.masking import resolve_quote
from checkout.quote.quote import AddressType, Quote


@checkout.command(part_of="Quote")
class SetShippingAddress:
    cart_id = String(required=True, max_length=32)
    address = Text(required=True)  # JSON: address dict


@checkout.command(part_of="Quote")
class SetBillingAddress:
    cart_id = String(required=True, max_length=32)
    address = Text()  # JSON: address dict
    same_as_shipping = Boolean(default=False)


@checkout.command_handler(part_of=Quote)
class ManageCartAddressesHandler:
    @handle(SetShippingAddress)
    def set_shipping_address(self, command):
        quote = resolve_quote(command.cart_id)
        quote.set_address(AddressType.SHIPPING, json.loads(command.address))
        current_domain.repository_for(Quote).add(quote)

    @handle(SetBillingAddress)
    def set_billing_address(self, command):
        quote = resolve_quote(command.cart_id)

        if command.same_as_shipping:
            shipping = quote.shipping_address
            if shipping is None:
                raise ValidationError({"billing_address": ["The cart has no shipping address to copy"]})
            data = shipping.snapshot()
        elif command.address:
            data = json.loads(command.address)
        else:
            raise ValidationError({"billing_address": ["Provide an address or use the shipping address"]})

        quote.set_address(AddressType.BILLING, data)
        current_domain.repository_for(Quote).add(quote)
