"""Domain events for the Quote aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from checkout.domain import checkout


@checkout.event(part_of="Quote")
class QuoteCreated:
    """An empty guest cart was created."""

    __version__ = 1

    quote_id = Identifier(required=True)
    reserved_order_id = String()
    currency = String(max_length=3)


@checkout.event(part_of="Quote")
class QuoteItemAdded:
    """A product was added to the cart."""

    __version__ = 1

    quote_id = Identifier(required=True)
    item_id = Identifier(required=True)
    sku = String(required=True)
    quantity = Integer(required=True)
    price = Float(required=True)


@checkout.event(part_of="Quote")
class GuestEmailSet:
    __version__ = 1

    quote_id = Identifier(required=True)
    email = String(required=True)


@checkout.event(part_of="Quote")
class QuoteAddressSet:
    """A shipping or billing address was set on the cart."""

    __version__ = 1

    quote_id = Identifier(required=True)
    address_id = Identifier(required=True)
    address_type = String(required=True)


@checkout.event(part_of="Quote")
class QuoteShippingMethodSet:
    __version__ = 1

    quote_id = Identifier(required=True)
    shipping_method = String(required=True)
    shipping_amount = Float(required=True)


@checkout.event(part_of="Quote")
class QuotePaymentMethodSet:
    __version__ = 1

    quote_id = Identifier(required=True)
    payment_method = String(required=True)


@checkout.event(part_of="Quote")
class QuoteDiscountsApplied:
    """Sales rules were applied and discount records written to the cart rows."""

    __version__ = 1

    quote_id = Identifier(required=True)
    applied_rule_ids = String()
    discount_amount = Float(required=True)
    discounts = Text()  # JSON: address-level discount records


@checkout.event(part_of="Quote")
class QuoteSubmitted:
    """The cart was turned into an order and is no longer active."""

    __version__ = 1

    quote_id = Identifier(required=True)
    reserved_order_id = String(required=True)
    submitted_at = DateTime(required=True)
