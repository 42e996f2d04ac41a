"""Mutation-style response envelopes.

Order placement answers the way a GraphQL mutation does: either a ``data``
payload or an ``errors`` collection, never both.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


def place_order_payload(order_number: str) -> dict:
    return {"data": {"placeOrder": {"order": {"order_number": order_number}}}}


def mutation_errors(exc: Exception) -> dict:
    """Translate a domain exception into an ``errors`` collection."""
    if isinstance(exc, ValidationError):
        errors = [
            {"message": message, "extensions": {"category": "graphql-input", "field": field}}
            for field, messages in exc.messages.items()
            for message in messages
        ]
    elif isinstance(exc, ObjectNotFoundError):
        message = str(exc.args[0]) if exc.args else str(exc)
        errors = [{"message": message, "extensions": {"category": "graphql-no-such-entity"}}]
    else:
        raise exc
    return {"errors": errors}
