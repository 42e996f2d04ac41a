"""Quote aggregate (CQRS) — the guest cart that is placed as an order.

A quote owns its line items, its shipping and billing addresses, and the
address items that tie line items to the shipping address. When the order
is placed, the discount records computed by the promotion engine are written
to all three kinds of rows:

    quote_item          one record per rule that discounted the item
    quote_address_item  the same records, for the item on the shipping address
    quote_address       per-rule totals for the shipping address
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from checkout import settings
from checkout.domain import checkout
from checkout.quote.discounts import (
    decode_discounts,
    encode_discounts,
    merge_by_rule,
    total_amount,
    total_base_amount,
)
from checkout.quote.events import (
    GuestEmailSet,
    QuoteAddressSet,
    QuoteCreated,
    QuoteDiscountsApplied,
    QuoteItemAdded,
    QuotePaymentMethodSet,
    QuoteShippingMethodSet,
    QuoteSubmitted,
)
from checkout.shared.amounts import ZERO, quantize, to_decimal, to_float


class AddressType(Enum):
    SHIPPING = "shipping"
    BILLING = "billing"


_POSTAL_FIELDS = (
    "firstname",
    "lastname",
    "company",
    "street",
    "city",
    "region",
    "postcode",
    "country_code",
    "telephone",
)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@checkout.entity(part_of="Quote")
class QuoteItem:
    product_id = Identifier(required=True)
    sku = String(required=True, max_length=64)
    name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    row_total = Float(default=0.0)
    discount_amount = Float(default=0.0)
    base_discount_amount = Float(default=0.0)
    applied_rule_ids = String(max_length=255)
    discounts = Text()  # JSON: ordered list of discount records

    @property
    def discount_records(self):
        return decode_discounts(self.discounts)


@checkout.entity(part_of="Quote")
class QuoteAddress:
    address_type = String(required=True, choices=AddressType)
    firstname = String(required=True, max_length=255)
    lastname = String(required=True, max_length=255)
    company = String(max_length=255)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    region = String(max_length=100)
    postcode = String(required=True, max_length=20)
    country_code = String(required=True, max_length=2)
    telephone = String(max_length=50)
    shipping_method = String(max_length=100)
    shipping_description = String(max_length=255)
    shipping_amount = Float(default=0.0)
    subtotal = Float(default=0.0)
    discount_amount = Float(default=0.0)
    base_discount_amount = Float(default=0.0)
    discount_description = String(max_length=255)
    applied_rule_ids = String(max_length=255)
    discounts = Text()  # JSON: per-rule discount totals for this address

    @property
    def discount_records(self):
        return decode_discounts(self.discounts)

    def snapshot(self) -> dict:
        return {name: getattr(self, name) for name in _POSTAL_FIELDS}


@checkout.entity(part_of="Quote")
class QuoteAddressItem:
    """A quote item as allocated to one of the quote's addresses."""

    quote_address_id = Identifier(required=True)
    quote_item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    discount_amount = Float(default=0.0)
    base_discount_amount = Float(default=0.0)
    applied_rule_ids = String(max_length=255)
    discounts = Text()  # JSON: ordered list of discount records

    @property
    def discount_records(self):
        return decode_discounts(self.discounts)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@checkout.aggregate
class Quote:
    reserved_order_id = String(max_length=64)
    customer_email = String(max_length=255)
    customer_is_guest = Boolean(default=True)
    is_active = Boolean(default=True)
    quote_currency_code = String(max_length=3, default="USD")
    base_currency_code = String(max_length=3, default="USD")
    items = HasMany(QuoteItem)
    addresses = HasMany(QuoteAddress)
    address_items = HasMany(QuoteAddressItem)
    payment_method = String(max_length=50)
    items_qty = Integer(default=0)
    subtotal = Float(default=0.0)
    base_subtotal = Float(default=0.0)
    discount_amount = Float(default=0.0)
    subtotal_with_discount = Float(default=0.0)
    grand_total = Float(default=0.0)
    base_grand_total = Float(default=0.0)
    applied_rule_ids = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, reserved_order_id=None, currency=None):
        now = datetime.now(UTC)
        currency = currency or settings.store_currency()
        quote = cls(
            reserved_order_id=reserved_order_id,
            customer_is_guest=True,
            is_active=True,
            quote_currency_code=currency,
            base_currency_code=currency,
            created_at=now,
            updated_at=now,
        )
        quote.raise_(
            QuoteCreated(
                quote_id=str(quote.id),
                reserved_order_id=reserved_order_id,
                currency=currency,
            )
        )
        return quote

    def _assert_active(self, action):
        if not self.is_active:
            raise ValidationError({"cart": [f"Cannot {action} on an inactive cart"]})

    def _touch(self):
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------
    def add_product(self, product_id, sku, name, price, quantity):
        """Add a product to the cart, or increase its quantity if already present."""
        self._assert_active("add products")

        existing = next((i for i in self.items if i.sku == sku), None)
        if existing:
            existing.quantity += quantity
            existing.row_total = to_float(to_decimal(existing.price) * existing.quantity)
            item = existing
        else:
            item = QuoteItem(
                product_id=product_id,
                sku=sku,
                name=name,
                quantity=quantity,
                price=price,
                row_total=to_float(to_decimal(price) * quantity),
            )
            self.add_items(item)

        self.items_qty = sum(i.quantity for i in self.items)
        self._touch()

        self.raise_(
            QuoteItemAdded(
                quote_id=str(self.id),
                item_id=str(item.id),
                sku=sku,
                quantity=quantity,
                price=price,
            )
        )
        return item

    # -------------------------------------------------------------------
    # Customer, addresses and methods
    # -------------------------------------------------------------------
    def set_guest_email(self, email):
        self._assert_active("set the email")
        if not email or "@" not in email:
            raise ValidationError({"email": [f"`{email}` is not a valid email address"]})

        self.customer_email = email
        self.customer_is_guest = True
        self._touch()
        self.raise_(GuestEmailSet(quote_id=str(self.id), email=email))

    def address_of_type(self, address_type):
        value = AddressType(address_type).value
        return next((a for a in self.addresses if a.address_type == value), None)

    @property
    def shipping_address(self):
        return self.address_of_type(AddressType.SHIPPING)

    @property
    def billing_address(self):
        return self.address_of_type(AddressType.BILLING)

    def set_address(self, address_type, data):
        """Set the shipping or billing address, replacing any previous one of that type."""
        self._assert_active("set an address")
        address_type = AddressType(address_type)

        previous = self.address_of_type(address_type)
        shipping_method = {}
        if previous is not None:
            if address_type == AddressType.SHIPPING:
                shipping_method = {
                    "shipping_method": previous.shipping_method,
                    "shipping_description": previous.shipping_description,
                    "shipping_amount": previous.shipping_amount,
                }
            for address_item in [ai for ai in self.address_items if str(ai.quote_address_id) == str(previous.id)]:
                self.remove_address_items(address_item)
            self.remove_addresses(previous)

        address = QuoteAddress(
            address_type=address_type.value,
            **{name: data.get(name) for name in _POSTAL_FIELDS},
            **shipping_method,
        )
        self.add_addresses(address)
        self._touch()

        self.raise_(
            QuoteAddressSet(
                quote_id=str(self.id),
                address_id=str(address.id),
                address_type=address_type.value,
            )
        )
        return address

    def set_shipping_method(self, carrier_code, method_code):
        self._assert_active("set the shipping method")

        description = settings.SHIPPING_METHODS.get((carrier_code, method_code))
        if description is None:
            raise ValidationError({"shipping_method": [f"Carrier `{carrier_code}_{method_code}` is not available"]})

        address = self.shipping_address
        if address is None:
            raise ValidationError({"shipping_address": ["Set a shipping address before the shipping method"]})

        address.shipping_method = f"{carrier_code}_{method_code}"
        address.shipping_description = description
        address.shipping_amount = to_float(self._shipping_amount_for(address.shipping_method))
        self._touch()

        self.raise_(
            QuoteShippingMethodSet(
                quote_id=str(self.id),
                shipping_method=address.shipping_method,
                shipping_amount=address.shipping_amount,
            )
        )

    def _shipping_amount_for(self, shipping_method):
        if shipping_method == "flatrate_flatrate":
            return quantize(settings.flatrate_price() * sum(i.quantity for i in self.items))
        return ZERO

    def set_payment_method(self, code):
        self._assert_active("set the payment method")
        if code not in settings.PAYMENT_METHODS:
            raise ValidationError({"payment_method": [f"Payment method `{code}` is not available"]})

        self.payment_method = code
        self._touch()
        self.raise_(QuotePaymentMethodSet(quote_id=str(self.id), payment_method=code))

    # -------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------
    def assert_ready_for_placement(self):
        """Raise a ValidationError listing everything that keeps the cart from being placed."""
        errors = {}
        if not self.is_active:
            errors["cart"] = ["The cart is no longer active"]
        if not self.items:
            errors["items"] = ["Unable to place order: the cart has no items"]
        if not self.customer_email:
            errors["email"] = ["Guest email for cart is missing"]

        shipping = self.shipping_address
        if shipping is None:
            errors["shipping_address"] = ["Unable to place order: please check the shipping address"]
        elif not shipping.shipping_method:
            errors["shipping_method"] = ["Unable to place order: the shipping method is missing"]

        if self.billing_address is None:
            errors["billing_address"] = ["Unable to place order: please check the billing address"]
        if not self.payment_method:
            errors["payment_method"] = ["Unable to place order: the payment method is missing"]

        if errors:
            raise ValidationError(errors)

    def reserve_order_id(self):
        if not self.reserved_order_id:
            self.reserved_order_id = uuid4().hex[:12].upper()
        return self.reserved_order_id

    def apply_discounts(self, applications):
        """Write discount records to items, shipping address items and the shipping address.

        Args:
            applications: Item id to the ordered discount records for that item,
                as returned by the promotion engine.
        """
        self._assert_active("apply discounts")
        shipping = self.shipping_address
        if shipping is None:
            raise ValidationError({"shipping_address": ["Discounts are allocated to the shipping address"]})

        all_records = []
        for item in self.items:
            records = applications.get(str(item.id), [])
            _write_discounts(item, records)
            all_records.extend(records)

        for address_item in list(self.address_items):
            self.remove_address_items(address_item)

        for item in self.items:
            records = item.discount_records
            address_item = QuoteAddressItem(
                quote_address_id=str(shipping.id),
                quote_item_id=str(item.id),
                quantity=item.quantity,
            )
            _write_discounts(address_item, records)
            self.add_address_items(address_item)

        address_records = merge_by_rule(all_records)
        _write_discounts(shipping, address_records)
        shipping.discount_description = ", ".join(record.rule_label for record in address_records) or None

        self.applied_rule_ids = shipping.applied_rule_ids
        self._touch()

        self.raise_(
            QuoteDiscountsApplied(
                quote_id=str(self.id),
                applied_rule_ids=self.applied_rule_ids,
                discount_amount=shipping.discount_amount,
                discounts=shipping.discounts,
            )
        )

    def collect_totals(self):
        """Recompute row, address and cart totals from items and their discounts."""
        subtotal = ZERO
        discount = ZERO
        base_discount = ZERO
        for item in self.items:
            row_total = quantize(to_decimal(item.price) * item.quantity)
            item.row_total = to_float(row_total)
            subtotal += row_total
            discount += to_decimal(item.discount_amount)
            base_discount += to_decimal(item.base_discount_amount)

        shipping_amount = ZERO
        shipping = self.shipping_address
        if shipping is not None:
            if shipping.shipping_method:
                shipping_amount = self._shipping_amount_for(shipping.shipping_method)
                shipping.shipping_amount = to_float(shipping_amount)
            shipping.subtotal = to_float(subtotal)

        self.items_qty = sum(i.quantity for i in self.items)
        self.subtotal = to_float(subtotal)
        self.base_subtotal = to_float(subtotal)
        self.discount_amount = to_float(discount)
        self.subtotal_with_discount = to_float(subtotal - discount)
        self.grand_total = to_float(subtotal - discount + shipping_amount)
        self.base_grand_total = to_float(subtotal - base_discount + shipping_amount)
        self._touch()

    def submit(self):
        """Deactivate the cart once its order has been created."""
        self._assert_active("submit")
        self.is_active = False
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            QuoteSubmitted(
                quote_id=str(self.id),
                reserved_order_id=self.reserved_order_id,
                submitted_at=now,
            )
        )


def _write_discounts(row, records):
    row.discounts = encode_discounts(records)
    row.discount_amount = to_float(total_amount(records))
    row.base_discount_amount = to_float(total_base_amount(records))
    row.applied_rule_ids = ",".join(str(record.rule_id) for record in records) or None


@checkout.repository(part_of=Quote)
class QuoteRepository:
    def find_by_reserved_order_id(self, reserved_order_id: str) -> Quote | None:
        results = self._dao.query.filter(reserved_order_id=reserved_order_id).all().items
        return results[0] if results else None
