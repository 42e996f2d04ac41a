"""Domain events for the Product aggregate."""

from protean.fields import Float, Identifier, String, Text

from checkout.domain import checkout


@checkout.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    sku = String(required=True)
    price = Float(required=True)


@checkout.event(part_of="Product")
class ProductCategoriesAssigned:
    """A product's category links were replaced."""

    __version__ = 1

    product_id = Identifier(required=True)
    sku = String(required=True)
    category_ids = Text(required=True)  # JSON array of category ids
