"""Discount records — the monetary effect of one sales rule on a cart row.

Records are attached to quote items, quote address items and quote addresses.
They are kept as an ordered list (application order, since rules stack) and
serialized as JSON into the ``discounts`` column of the owning row:

    [
        {
            "rule": "TestRule_Label",
            "ruleID": 1,
            "discount": {
                "amount": "10.00",
                "base_amount": "10.00",
                "original_amount": "10.00",
                "base_original_amount": "10.00"
            }
        }
    ]

Amounts are written as strings so that ``decode_discounts(encode_discounts(x))``
returns records equal to ``x``.
"""

import json
from dataclasses import dataclass
from decimal import Decimal

from checkout.shared.amounts import ZERO, to_decimal

_AMOUNT_FIELDS = ("amount", "base_amount", "original_amount", "base_original_amount")


@dataclass(frozen=True)
class DiscountData:
    """Amounts of a single discount, in quote and base currency."""

    amount: Decimal = ZERO
    base_amount: Decimal = ZERO
    original_amount: Decimal = ZERO
    base_original_amount: Decimal = ZERO

    def __post_init__(self):
        for name in _AMOUNT_FIELDS:
            object.__setattr__(self, name, to_decimal(getattr(self, name)))

    @classmethod
    def single_currency(cls, amount, original_amount=None):
        """Build amounts for a cart whose quote and base currency are the same."""
        original = amount if original_amount is None else original_amount
        return cls(
            amount=amount,
            base_amount=amount,
            original_amount=original,
            base_original_amount=original,
        )

    @property
    def is_uniform(self) -> bool:
        return len({getattr(self, name) for name in _AMOUNT_FIELDS}) == 1

    def __add__(self, other):
        if not isinstance(other, DiscountData):
            return NotImplemented
        return DiscountData(**{name: getattr(self, name) + getattr(other, name) for name in _AMOUNT_FIELDS})

    def to_dict(self) -> dict:
        return {name: str(getattr(self, name)) for name in _AMOUNT_FIELDS}

    @classmethod
    def from_dict(cls, data):
        # Older writers stored the amounts as a nested JSON string
        if isinstance(data, str):
            data = json.loads(data)
        if not isinstance(data, dict):
            raise ValueError(f"Discount amounts must be an object, got {type(data).__name__}")
        return cls(**{name: data.get(name, "0") for name in _AMOUNT_FIELDS})


@dataclass(frozen=True)
class DiscountRecord:
    """One rule's discount on a quote item, address item or address."""

    rule_label: str
    rule_id: int
    discount: DiscountData

    def to_dict(self) -> dict:
        return {
            "rule": self.rule_label,
            "ruleID": self.rule_id,
            "discount": self.discount.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict):
        if not isinstance(data, dict):
            raise ValueError(f"Discount record must be an object, got {type(data).__name__}")
        try:
            return cls(
                rule_label=data["rule"],
                rule_id=int(data["ruleID"]),
                discount=DiscountData.from_dict(data["discount"]),
            )
        except KeyError as exc:
            raise ValueError(f"Discount record is missing `{exc.args[0]}`") from None
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Discount record is malformed: {exc}") from exc


def encode_discounts(records) -> str:
    """Serialize an ordered sequence of discount records."""
    return json.dumps([record.to_dict() for record in records])


def decode_discounts(payload) -> list[DiscountRecord]:
    """Deserialize the ``discounts`` column. An empty column means no discounts.

    Raises ``ValueError`` when the payload is not a list of discount records.
    """
    if not payload:
        return []

    data = json.loads(payload) if isinstance(payload, str) else payload
    if not isinstance(data, list):
        raise ValueError("Discounts must be serialized as a list")

    return [DiscountRecord.from_dict(entry) for entry in data]


def merge_by_rule(records) -> list[DiscountRecord]:
    """Sum records that share a rule, keeping the order in which rules first appear."""
    merged = {}
    for record in records:
        existing = merged.get(record.rule_id)
        if existing is None:
            merged[record.rule_id] = record
        else:
            merged[record.rule_id] = DiscountRecord(
                rule_label=existing.rule_label,
                rule_id=existing.rule_id,
                discount=existing.discount + record.discount,
            )
    return list(merged.values())


def total_amount(records):
    return sum((record.discount.amount for record in records), ZERO)


def total_base_amount(records):
    return sum((record.discount.base_amount for record in records), ZERO)
