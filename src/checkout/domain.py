"""Checkout bounded context — carts, sales rules and order placement.

Handles guest carts (quotes), the catalogue data that promotions match on,
cart-level sales rules, and the placement flow that turns a cart into an
order while recording the discounts each rule produced.
"""

import structlog
from protean.domain import Domain

checkout = Domain(name="checkout")

logger = structlog.get_logger(__name__)
