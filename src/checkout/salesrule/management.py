"""Sales rule management — commands and handler."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Float, Integer, String, Text
from protean.utils.globals import current_domain

from checkout.domain import checkout, logger
from checkout.salesrule.rule import RuleAction, SalesRule


@checkout.command(part_of="SalesRule")
class CreateSalesRule:
    """Configure a new cart-level promotion. Returns the rule's integer id."""

    name = String(required=True, max_length=255)
    label = String(max_length=255)
    description = Text()
    simple_action = String(choices=RuleAction, default=RuleAction.BY_PERCENT.value)
    discount_amount = Float(required=True, min_value=0.0)
    discount_qty = Integer(min_value=0)
    category_ids = Text()  # JSON array of category ids
    sort_order = Integer(default=0)
    stop_rules_processing = Boolean(default=False)
    is_active = Boolean(default=True)


@checkout.command(part_of="SalesRule")
class ActivateSalesRule:
    rule_id = Integer(required=True)


@checkout.command(part_of="SalesRule")
class DeactivateSalesRule:
    rule_id = Integer(required=True)


@checkout.command_handler(part_of=SalesRule)
class ManageSalesRuleHandler:
    @handle(CreateSalesRule)
    def create_sales_rule(self, command):
        repo = current_domain.repository_for(SalesRule)
        if repo.find_by_name(command.name) is not None:
            raise ValidationError({"name": [f"Sales rule `{command.name}` already exists"]})

        rule = SalesRule.create(
            rule_id=repo.next_rule_id(),
            name=command.name,
            label=command.label,
            description=command.description,
            simple_action=command.simple_action or RuleAction.BY_PERCENT.value,
            discount_amount=command.discount_amount,
            discount_qty=command.discount_qty,
            category_ids=json.loads(command.category_ids) if command.category_ids else [],
            sort_order=command.sort_order or 0,
            stop_rules_processing=bool(command.stop_rules_processing),
            is_active=command.is_active if command.is_active is not None else True,
        )
        repo.add(rule)

        logger.info("sales_rule_created", rule_id=rule.rule_id, name=rule.name)
        return rule.rule_id

    @handle(ActivateSalesRule)
    def activate_sales_rule(self, command):
        repo = current_domain.repository_for(SalesRule)
        rule = _get_rule(repo, command.rule_id)
        rule.activate()
        repo.add(rule)

    @handle(DeactivateSalesRule)
    def deactivate_sales_rule(self, command):
        repo = current_domain.repository_for(SalesRule)
        rule = _get_rule(repo, command.rule_id)
        rule.deactivate()
        repo.add(rule)


def _get_rule(repo, rule_id):
    rule = repo.find_by_rule_id(rule_id)
    if rule is None:
        raise ObjectNotFoundError(f"Sales rule {rule_id} does not exist")
    return rule
