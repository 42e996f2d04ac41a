"""Tests for discount record serialization."""

import json
from decimal import Decimal

import pytest
from checkout.quote.discounts import (
    DiscountData,
    DiscountRecord,
    decode_discounts,
    encode_discounts,
    merge_by_rule,
    total_amount,
)


def _record(rule_id=1, label="TestRule_Label", amount="10.00"):
    return DiscountRecord(rule_label=label, rule_id=rule_id, discount=DiscountData.single_currency(amount))


class TestDiscountData:
    def test_amounts_are_decimals(self):
        data = DiscountData(amount=10, base_amount="10.00", original_amount=10.0)
        assert data.amount == Decimal("10")
        assert isinstance(data.base_amount, Decimal)
        assert data.original_amount == Decimal("10.0")
        assert data.base_original_amount == Decimal("0")

    def test_single_currency_amounts_are_uniform(self):
        data = DiscountData.single_currency("10.00")
        assert data.is_uniform
        assert data.base_original_amount == Decimal("10.00")

    def test_original_amount_can_differ(self):
        data = DiscountData.single_currency("5.00", original_amount="7.50")
        assert not data.is_uniform
        assert data.base_amount == Decimal("5.00")
        assert data.base_original_amount == Decimal("7.50")

    def test_addition_sums_every_amount(self):
        total = DiscountData.single_currency("1.25") + DiscountData.single_currency("2.50")
        assert total == DiscountData.single_currency("3.75")

    def test_reads_nested_json_string(self):
        data = DiscountData.from_dict(json.dumps({"amount": 10, "base_amount": 10}))
        assert data.amount == Decimal("10")
        assert data.original_amount == Decimal("0")


class TestEncoding:
    def test_wire_format(self):
        payload = json.loads(encode_discounts([_record()]))
        assert payload == [
            {
                "rule": "TestRule_Label",
                "ruleID": 1,
                "discount": {
                    "amount": "10.00",
                    "base_amount": "10.00",
                    "original_amount": "10.00",
                    "base_original_amount": "10.00",
                },
            }
        ]

    def test_decode_inverts_encode(self):
        records = [_record(1, "First", "10.00"), _record(2, "Second", "0.33")]
        assert decode_discounts(encode_discounts(records)) == records

    def test_order_is_preserved(self):
        records = [_record(3, "Later"), _record(1, "Earlier")]
        decoded = decode_discounts(encode_discounts(records))
        assert [r.rule_id for r in decoded] == [3, 1]

    @pytest.mark.parametrize("payload", [None, "", "[]"])
    def test_empty_payload_means_no_discounts(self, payload):
        assert decode_discounts(payload) == []

    def test_mapping_payload_is_rejected(self):
        with pytest.raises(ValueError):
            decode_discounts(json.dumps({"1": {"rule": "x"}}))

    def test_record_without_rule_id_is_rejected(self):
        with pytest.raises(ValueError):
            decode_discounts(json.dumps([{"rule": "x", "discount": {}}]))

    def test_rule_id_is_read_as_integer(self):
        payload = json.dumps([{"rule": "x", "ruleID": "7", "discount": {"amount": "1"}}])
        assert decode_discounts(payload)[0].rule_id == 7

    def test_null_rule_id_is_rejected(self):
        with pytest.raises(ValueError):
            decode_discounts(json.dumps([{"rule": "x", "ruleID": None, "discount": {}}]))

    def test_non_numeric_amount_is_rejected(self):
        with pytest.raises(ValueError, match="Not an amount"):
            decode_discounts(json.dumps([{"rule": "x", "ruleID": 1, "discount": {"amount": "abc"}}]))


class TestMergeByRule:
    def test_sums_records_of_the_same_rule(self):
        merged = merge_by_rule([_record(1, amount="10.00"), _record(2, "B", "1.00"), _record(1, amount="5.00")])
        assert [r.rule_id for r in merged] == [1, 2]
        assert merged[0].discount.amount == Decimal("15.00")
        assert merged[0].discount.base_original_amount == Decimal("15.00")

    def test_total_amount(self):
        assert total_amount([_record(amount="10.00"), _record(2, amount="0.50")]) == Decimal("10.50")
        assert total_amount([]) == Decimal("0")
