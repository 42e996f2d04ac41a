"""Catalogue management — commands and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, String, Text
from protean.utils.globals import current_domain

from checkout.catalogue.product import Product
from checkout.domain import checkout, logger


@checkout.command(part_of="Product")
class CreateProduct:
    sku = String(required=True, max_length=64)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    category_ids = Text()  # JSON array of category ids


@checkout.command(part_of="Product")
class AssignProductToCategories:
    """Link a product to categories, replacing its current links."""

    sku = String(required=True, max_length=64)
    category_ids = Text(required=True)  # JSON array of category ids


@checkout.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        if repo.find_by_sku(command.sku) is not None:
            raise ValidationError({"sku": [f"Product with sku `{command.sku}` already exists"]})

        category_ids = json.loads(command.category_ids) if command.category_ids else []
        product = Product.create(
            sku=command.sku,
            name=command.name,
            price=command.price,
            category_ids=category_ids,
        )
        repo.add(product)
        return str(product.id)

    @handle(AssignProductToCategories)
    def assign_product_to_categories(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_by_sku(command.sku)
        product.assign_to_categories(json.loads(command.category_ids))
        repo.add(product)

        logger.info(
            "product_categories_assigned",
            sku=command.sku,
            category_ids=product.categories(),
        )
