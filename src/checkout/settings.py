"""Store settings read from the environment.

``PROTEAN_ENV`` selects the environment overlay; the values below cover
store-level knobs that the placement flow needs.
"""

import os
from decimal import Decimal

DEFAULT_CURRENCY = "USD"
DEFAULT_FLATRATE_PRICE = "5.00"

SHIPPING_METHODS = {
    ("flatrate", "flatrate"): "Flat Rate - Fixed",
}

PAYMENT_METHODS = {
    "checkmo": "Check / Money order",
    "free": "No Payment Information Required",
}


def environment() -> str:
    return (os.getenv("PROTEAN_ENV") or "development").lower()


def store_currency() -> str:
    """Base and quote currency of the store. Carts never convert between currencies."""
    return os.getenv("STORE_CURRENCY", DEFAULT_CURRENCY).upper()


def flatrate_price() -> Decimal:
    """Per-item price of the flat rate shipping method."""
    return Decimal(os.getenv("FLATRATE_PRICE", DEFAULT_FLATRATE_PRICE))
