"""Category link management facade."""

import json

from protean.utils.globals import current_domain

from checkout.catalogue.management import AssignProductToCategories


class CategoryLinkManagement:
    def assign_product_to_categories(self, sku, category_ids):
        current_domain.process(
            AssignProductToCategories(sku=sku, category_ids=json.dumps(list(category_ids))),
            asynchronous=False,
        )
