"""Discount record validation.

Stateless checks run once after a cart has been placed. They read serialized
discount columns and address rows; they never write.
"""

from checkout.quote.discounts import decode_discounts
from checkout.shared.amounts import to_decimal
from checkout.verification.errors import (
    AddressNotFound,
    AmountMismatch,
    MissingDiscount,
    RuleMismatch,
)


def validate_item_discount(serialized_payload, expected_rule_label, expected_rule_id, expected_amount):
    """Check that the first discount record was produced by the expected rule for the expected amount.

    Amounts compare as exact decimals: ``10`` equals ``"10.00"``, ``9.999`` does not.

    Returns:
        The first discount record.

    Raises:
        MissingDiscount: The payload holds no discount records, or cannot be read.
        RuleMismatch: The record's rule label or rule id differ from the expected ones.
        AmountMismatch: The record's amount differs from ``expected_amount``.
    """
    try:
        records = decode_discounts(serialized_payload)
    except ValueError as exc:
        raise MissingDiscount(
            f"discounts: could not read {serialized_payload!r} ({exc})",
            field="discounts",
            actual=serialized_payload,
        ) from exc

    if not records:
        raise MissingDiscount(
            "discounts: expected at least one discount record, got none",
            field="discounts",
            expected=expected_rule_label,
            actual=serialized_payload,
        )

    record = records[0]
    if record.rule_label != expected_rule_label:
        raise RuleMismatch.mismatch("rule_label", expected_rule_label, record.rule_label)
    if record.rule_id != int(expected_rule_id):
        raise RuleMismatch.mismatch("rule_id", int(expected_rule_id), record.rule_id)

    expected = to_decimal(expected_amount)
    if record.discount.amount != expected:
        raise AmountMismatch.mismatch("discount.amount", expected, record.discount.amount)

    return record


def validate_uniform_amounts(record):
    """Check that amount, base, original and base original amounts agree.

    Holds for a single rule on a single-currency cart.
    """
    discount = record.discount
    for field in ("base_amount", "original_amount", "base_original_amount"):
        actual = getattr(discount, field)
        if actual != discount.amount:
            raise AmountMismatch.mismatch(f"discount.{field}", discount.amount, actual)
    return record


def validate_address_discount_presence(address_rows, address_type):
    """Return the first address row of ``address_type``.

    Raises:
        AddressNotFound: No row has that address type.
    """
    for row in address_rows:
        if row.get("address_type") == address_type:
            return row

    raise AddressNotFound(
        f"quote_address: no record found for address_type {address_type!r}",
        field="address_type",
        expected=address_type,
        actual=[row.get("address_type") for row in address_rows],
    )
