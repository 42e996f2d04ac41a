"""Shared BDD fixtures and step definitions for checkout scenarios."""

import json

import pytest
from checkout.catalogue.category_links import CategoryLinkManagement
from checkout.catalogue.management import CreateProduct
from checkout.salesrule.management import CreateSalesRule
from protean import current_domain
from pytest_bdd import given, parsers

@pytest.fixture()
def outcome():
    """Container for the result or error of a When step."""
    return {"result": None, "exc": None}


@given(parsers.cfparse('a product "{sku}" priced {price:f}'))
def create_product(sku, price):
    current_domain.process(
        CreateProduct(sku=sku, name=sku.replace("_", " ").title(), price=price, category_ids=json.dumps([])),
        asynchronous=False,
    )


@given(
    parsers.cfparse('a sales rule "{name}" labelled "{label}" giving {percent:d} percent off category {category:d}'),
    target_fixture="rule_id",
)
def create_rule(name, label, percent, category):
    return current_domain.process(
        CreateSalesRule(name=name, label=label, discount_amount=percent, category_ids=json.dumps([category])),
        asynchronous=False,
    )


@given(parsers.cfparse('a ready guest cart "{reserved_order_id}" with {quantity:d} "{sku}"'), target_fixture="cart_id")
def create_cart(make_cart, reserved_order_id, quantity, sku):
    return make_cart(reserved_order_id=reserved_order_id, sku=sku, quantity=quantity)


@given(parsers.cfparse('the product "{sku}" is assigned to category {category:d}'))
def assign_category(sku, category):
    CategoryLinkManagement().assign_product_to_categories(sku, [category])
