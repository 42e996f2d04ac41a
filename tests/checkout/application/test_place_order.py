"""Application tests for placing a cart with store promotions."""

import json
from decimal import Decimal

import pytest
import structlog
from checkout.catalogue.category_links import CategoryLinkManagement
from checkout.order.order import Order
from checkout.order.placement import PlaceOrder
from checkout.quote.masking import GetMaskedQuoteIdByReservedOrderId
from checkout.quote.quote import Quote
from checkout.salesrule.lookup import RuleLookup
from checkout.verification.collaborators import DomainPlacementClient, QuoteRowReader
from protean import current_domain
from protean.exceptions import ValidationError


@pytest.fixture()
def cart(make_product, make_rule, make_cart):
    make_product()
    make_rule()
    make_cart()
    return GetMaskedQuoteIdByReservedOrderId().execute("test_quote")


def _quote():
    return current_domain.repository_for(Quote).find_by_reserved_order_id("test_quote")


class TestPlaceOrderWithCartPromotion:
    def test_discounts_are_written_to_quote_item_and_quote_address(self, cart):
        rule = RuleLookup().get_rule_by_name("50% Off on Large Orders")
        CategoryLinkManagement().assign_product_to_categories("simple_product", [56])

        response = DomainPlacementClient().place_order(cart)
        assert "errors" not in response
        assert "data" in response
        assert response["data"]["placeOrder"]["order"]["order_number"] == "test_quote"

        quote_item = QuoteRowReader().fetch_row("quote_item", "test_quote")
        discounts = json.loads(quote_item["discounts"])
        assert Decimal(discounts[0]["discount"]["amount"]) == 10
        assert discounts[0]["rule"] == "TestRule_Label"
        assert discounts[0]["ruleID"] == rule.rule_id

        address_item = _quote().address_items[0]
        discount = address_item.discount_records[0].discount
        assert discount.amount == 10
        assert discount.base_amount == 10
        assert discount.original_amount == 10
        assert discount.base_original_amount == 10
        assert address_item.discount_records[0].rule_label == "TestRule_Label"

        quote_address = QuoteRowReader().fetch_row("quote_address", "test_quote", address_type="shipping")
        assert quote_address, "No record found in quote_address table"

    def test_product_outside_rule_category_gets_no_discount(self, cart):
        current_domain.process(PlaceOrder(cart_id=cart), asynchronous=False)

        quote = _quote()
        assert quote.items[0].discount_records == []
        assert quote.shipping_address.discount_records == []
        assert quote.grand_total == 25.0

    def test_order_snapshot(self, cart):
        CategoryLinkManagement().assign_product_to_categories("simple_product", [56])
        order_number = current_domain.process(PlaceOrder(cart_id=cart), asynchronous=False)

        order = current_domain.repository_for(Order).find_by_order_number(order_number)
        assert order.customer_email == "guest@example.com"
        assert order.items[0].discount_amount == 10.0
        assert order.items[0].applied_rule_ids == str(RuleLookup().get_rule_by_name("50% Off on Large Orders").rule_id)
        assert order.pricing.subtotal == 20.0
        assert order.pricing.discount_amount == 10.0
        assert order.pricing.shipping_amount == 5.0
        assert order.pricing.grand_total == 15.0
        assert order.shipping_address.city == "Los Angeles"

    def test_cart_is_deactivated(self, cart):
        current_domain.process(PlaceOrder(cart_id=cart), asynchronous=False)
        assert _quote().is_active is False

        with pytest.raises(ValidationError):
            current_domain.process(PlaceOrder(cart_id=cart), asynchronous=False)

    def test_stacked_rules_keep_application_order(self, cart, make_rule):
        second = make_rule(name="Extra 10%", label="Extra", discount_amount=10.0, sort_order=5)
        CategoryLinkManagement().assign_product_to_categories("simple_product", [56])
        current_domain.process(PlaceOrder(cart_id=cart), asynchronous=False)

        records = _quote().items[0].discount_records
        assert [r.rule_label for r in records] == ["TestRule_Label", "Extra"]
        assert records[1].rule_id == second
        assert records[1].discount.amount == Decimal("2.00")

    def test_cart_and_order_are_bound_to_the_log_context(self, cart):
        current_domain.process(PlaceOrder(cart_id=cart), asynchronous=False)

        context = structlog.contextvars.get_contextvars()
        assert context["cart_id"] == cart
        assert context["order_number"] == "test_quote"


class TestPlaceOrderPreconditions:
    def test_incomplete_cart_is_reported(self, make_product, make_cart):
        make_product()
        cart_id = make_cart(shipping_address=False)

        response = DomainPlacementClient().place_order(cart_id)
        assert "data" not in response
        fields = {error["extensions"]["field"] for error in response["errors"]}
        assert fields == {"shipping_address"}

    def test_unknown_cart_is_reported(self):
        response = DomainPlacementClient().place_order("0" * 32)
        assert response["errors"][0]["extensions"]["category"] == "graphql-no-such-entity"
