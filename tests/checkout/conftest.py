import json

import pytest
from checkout.utils.logging import clear_context
from protean.integrations.pytest import DomainFixture

CATEGORY_ID = 56
RESERVED_ORDER_ID = "test_quote"
RULE_NAME = "50% Off on Large Orders"
RULE_LABEL = "TestRule_Label"
SKU = "simple_product"

SHIPPING_ADDRESS = {
    "firstname": "John",
    "lastname": "Smith",
    "company": "Test Company",
    "street": "test street 1",
    "city": "Los Angeles",
    "region": "CA",
    "postcode": "887766",
    "country_code": "US",
    "telephone": "88776655",
}


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout

    bed = DomainFixture(checkout)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed):
    with checkout_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        clear_context()


# ---------------------------------------------------------------------------
# Scenario builders
# ---------------------------------------------------------------------------
def _create_product(sku=SKU, name="Simple Product", price=20.0, category_ids=None):
    from checkout.catalogue.management import CreateProduct
    from protean import current_domain

    return current_domain.process(
        CreateProduct(sku=sku, name=name, price=price, category_ids=json.dumps(category_ids or [])),
        asynchronous=False,
    )


def _create_rule(name=RULE_NAME, label=RULE_LABEL, discount_amount=50.0, category_ids=(CATEGORY_ID,), **kwargs):
    from checkout.salesrule.management import CreateSalesRule
    from protean import current_domain

    return current_domain.process(
        CreateSalesRule(
            name=name,
            label=label,
            discount_amount=discount_amount,
            category_ids=json.dumps(list(category_ids)),
            **kwargs,
        ),
        asynchronous=False,
    )


def _create_ready_cart(reserved_order_id=RESERVED_ORDER_ID, sku=SKU, quantity=1, shipping_address=True):
    """Create a guest cart with one product, email, addresses, flat rate and check/money order.

    Returns the masked cart id.
    """
    from checkout.quote.addresses import SetBillingAddress, SetShippingAddress
    from checkout.quote.items import AddProductToCart
    from checkout.quote.management import CreateEmptyCart, SetGuestEmail
    from checkout.quote.methods import SetPaymentMethod, SetShippingMethod
    from protean import current_domain

    def process(command):
        return current_domain.process(command, asynchronous=False)

    cart_id = process(CreateEmptyCart(reserved_order_id=reserved_order_id))
    process(AddProductToCart(cart_id=cart_id, sku=sku, quantity=quantity))
    process(SetGuestEmail(cart_id=cart_id, email="guest@example.com"))
    if shipping_address:
        process(SetShippingAddress(cart_id=cart_id, address=json.dumps(SHIPPING_ADDRESS)))
        process(SetShippingMethod(cart_id=cart_id, carrier_code="flatrate", method_code="flatrate"))
    process(SetBillingAddress(cart_id=cart_id, address=json.dumps(SHIPPING_ADDRESS)))
    process(SetPaymentMethod(cart_id=cart_id, code="checkmo"))
    return cart_id


@pytest.fixture()
def make_product():
    return _create_product


@pytest.fixture()
def make_rule():
    return _create_rule


@pytest.fixture()
def make_cart():
    return _create_ready_cart


@pytest.fixture()
def promoted_cart(make_product, make_rule, make_cart):
    """The product in category 56, the 50% rule on that category, and a ready cart. Returns the masked cart id."""
    make_product(category_ids=[CATEGORY_ID])
    make_rule()
    return make_cart()
