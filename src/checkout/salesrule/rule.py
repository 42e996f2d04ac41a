"""SalesRule aggregate — a named cart-level promotion.

A rule is looked up by its unique ``name`` and identified towards customers
and discount records by its integer ``rule_id`` and store ``label``.
Rules are only read during order placement.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from checkout.domain import checkout
from checkout.salesrule.events import SalesRuleActivated, SalesRuleCreated, SalesRuleDeactivated


class RuleAction(Enum):
    BY_PERCENT = "by_percent"  # percent of each matching item's row total
    BY_FIXED = "by_fixed"  # fixed amount per matching unit
    CART_FIXED = "cart_fixed"  # fixed amount spread over all matching items


@checkout.aggregate
class SalesRule:
    rule_id = Integer(required=True, min_value=1)
    name = String(required=True, max_length=255)
    label = String(max_length=255)
    description = Text()
    is_active = Boolean(default=True)
    simple_action = String(choices=RuleAction, default=RuleAction.BY_PERCENT.value)
    discount_amount = Float(required=True, min_value=0.0)
    discount_qty = Integer(min_value=0)  # Max units discounted per item; empty means all
    category_ids = Text()  # JSON array; empty means every product matches
    sort_order = Integer(default=0)
    stop_rules_processing = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def percent_discount_cannot_exceed_hundred(self):
        if self.simple_action == RuleAction.BY_PERCENT.value and self.discount_amount > 100:
            raise ValidationError({"discount_amount": ["Percent discounts cannot exceed 100"]})

    @classmethod
    def create(
        cls,
        rule_id,
        name,
        discount_amount,
        label=None,
        description=None,
        simple_action=RuleAction.BY_PERCENT.value,
        discount_qty=None,
        category_ids=None,
        sort_order=0,
        stop_rules_processing=False,
        is_active=True,
    ):
        now = datetime.now(UTC)
        rule = cls(
            rule_id=rule_id,
            name=name,
            label=label,
            description=description,
            is_active=is_active,
            simple_action=simple_action,
            discount_amount=discount_amount,
            discount_qty=discount_qty,
            category_ids=json.dumps(list(category_ids or [])),
            sort_order=sort_order,
            stop_rules_processing=stop_rules_processing,
            created_at=now,
            updated_at=now,
        )
        rule.raise_(
            SalesRuleCreated(
                sales_rule_id=str(rule.id),
                rule_id=rule_id,
                name=name,
                simple_action=simple_action,
                discount_amount=discount_amount,
            )
        )
        return rule

    @property
    def store_label(self) -> str:
        """Label shown to customers; falls back to the rule name."""
        return self.label or self.name

    def categories(self) -> list[int]:
        return json.loads(self.category_ids) if self.category_ids else []

    def matches_categories(self, product_category_ids) -> bool:
        """True when the rule has no category condition or shares a category with the product."""
        categories = self.categories()
        if not categories:
            return True
        return bool(set(categories) & {int(c) for c in product_category_ids})

    def activate(self):
        if self.is_active:
            raise ValidationError({"is_active": ["Sales rule is already active"]})
        self.is_active = True
        self.updated_at = datetime.now(UTC)
        self.raise_(SalesRuleActivated(sales_rule_id=str(self.id), rule_id=self.rule_id))

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Sales rule is already inactive"]})
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(SalesRuleDeactivated(sales_rule_id=str(self.id), rule_id=self.rule_id))


@checkout.repository(part_of=SalesRule)
class SalesRuleRepository:
    def find_by_name(self, name: str) -> SalesRule | None:
        results = self._dao.query.filter(name=name).all().items
        return results[0] if results else None

    def find_by_rule_id(self, rule_id: int) -> SalesRule | None:
        results = self._dao.query.filter(rule_id=rule_id).all().items
        return results[0] if results else None

    def active_rules(self) -> list[SalesRule]:
        """Active rules in the order they are applied."""
        rules = self._dao.query.filter(is_active=True).all().items
        return sorted(rules, key=lambda rule: (rule.sort_order or 0, rule.rule_id))

    def next_rule_id(self) -> int:
        rules = self._dao.query.all().items
        return max((rule.rule_id for rule in rules), default=0) + 1
