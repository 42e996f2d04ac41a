"""Product aggregate — the catalogue data that sales rules match on.

Only what the checkout needs is kept here: a unique sku, the display name,
the unit price and the categories the product is linked to.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, String, Text

from checkout.catalogue.events import ProductCategoriesAssigned, ProductCreated
from checkout.domain import checkout


@checkout.aggregate
class Product:
    sku = String(required=True, max_length=64)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    category_ids = Text()  # JSON array of category ids
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def category_ids_must_be_a_list_of_integers(self):
        if not self.category_ids:
            return

        try:
            ids = json.loads(self.category_ids)
        except (json.JSONDecodeError, TypeError):
            raise ValidationError({"category_ids": ["Category ids must be valid JSON"]}) from None

        if not isinstance(ids, list) or not all(isinstance(i, int) for i in ids):
            raise ValidationError({"category_ids": ["Category ids must be a list of integers"]})

    @classmethod
    def create(cls, sku, name, price, category_ids=None):
        now = datetime.now(UTC)
        product = cls(
            sku=sku,
            name=name,
            price=price,
            category_ids=json.dumps(list(category_ids or [])),
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                sku=sku,
                price=price,
            )
        )
        return product

    def categories(self) -> list[int]:
        return json.loads(self.category_ids) if self.category_ids else []

    def assign_to_categories(self, category_ids):
        """Replace the product's category links."""
        ids = [int(category_id) for category_id in category_ids]
        self.category_ids = json.dumps(ids)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductCategoriesAssigned(
                product_id=str(self.id),
                sku=self.sku,
                category_ids=self.category_ids,
            )
        )


@checkout.repository(part_of=Product)
class ProductRepository:
    def find_by_sku(self, sku: str) -> Product | None:
        results = self._dao.query.filter(sku=sku).all().items
        return results[0] if results else None

    def get_by_sku(self, sku: str) -> Product:
        product = self.find_by_sku(sku)
        if product is None:
            raise ObjectNotFoundError(f"Product with sku `{sku}` does not exist")
        return product
