"""BDD tests for placing an order with cart promotions."""

from decimal import Decimal

from checkout.order.order import Order
from checkout.quote.discounts import decode_discounts
from checkout.quote.quote import Quote
from checkout.salesrule.lookup import RuleLookup
from checkout.verification.collaborators import DomainPlacementClient, QuoteRowReader
from checkout.verification.errors import AmountMismatch, VerificationError
from checkout.verification.verifier import DiscountVerification
from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/place_order_with_promotions.feature")


def _quote(reserved_order_id="test_quote"):
    return current_domain.repository_for(Quote).find_by_reserved_order_id(reserved_order_id)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the cart is placed as an order")
def place_cart(cart_id, outcome):
    outcome["result"] = DomainPlacementClient().place_order(cart_id)


@when(parsers.cfparse('the cart is verified for a {amount:d} discount from "{rule_name}"'))
def verify_cart(cart_id, amount, rule_name, outcome):
    verification = DiscountVerification(DomainPlacementClient(), QuoteRowReader(), RuleLookup())
    try:
        outcome["result"] = verification.verify(cart_id, "test_quote", rule_name, amount)
    except VerificationError as exc:
        outcome["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order "{order_number}" is placed'))
def order_is_placed(order_number, outcome):
    assert outcome["result"] == {"data": {"placeOrder": {"order": {"order_number": order_number}}}}
    assert current_domain.repository_for(Order).find_by_order_number(order_number) is not None


@then(parsers.cfparse('the first cart item carries a {amount:f} discount from "{rule_name}"'))
def item_discount(amount, rule_name):
    rule = RuleLookup().get_rule_by_name(rule_name)
    [record] = decode_discounts(_quote().items[0].discounts)

    assert record.rule_label == rule.label
    assert record.rule_id == rule.rule_id
    assert record.discount.amount == Decimal(str(amount))
    assert record.discount.is_uniform


@then("the shipping address item carries the same discount")
def address_item_discount():
    quote = _quote()
    shipping = quote.shipping_address
    [address_item] = [row for row in quote.address_items if str(row.quote_address_id) == str(shipping.id)]

    assert decode_discounts(address_item.discounts) == decode_discounts(quote.items[0].discounts)


@then(parsers.cfparse('the cart has a "{address_type}" address row'))
def address_row(address_type):
    rows = QuoteRowReader().fetch_rows("quote_address", "test_quote", address_type=address_type)
    assert len(rows) == 1


@then("the first cart item carries no discount")
def no_item_discount():
    assert decode_discounts(_quote().items[0].discounts) == []


@then(parsers.cfparse("the order grand total is {total:f}"))
def order_total(total):
    order = current_domain.repository_for(Order).find_by_order_number("test_quote")
    assert order.pricing.grand_total == total


@then(parsers.cfparse('the verification reports order "{order_number}"'))
def verification_passed(order_number, outcome):
    assert outcome["exc"] is None
    assert outcome["result"].order_number == order_number


@then("the verification fails with an amount mismatch")
def verification_failed(outcome):
    assert isinstance(outcome["exc"], AmountMismatch)
    assert outcome["exc"].expected == Decimal("12")
