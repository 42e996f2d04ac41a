"""Query-by-name access to sales rules."""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from checkout.salesrule.rule import SalesRule


@dataclass(frozen=True)
class RuleReference:
    rule_id: int
    label: str
    name: str


class RuleLookup:
    def get_rule_by_name(self, name: str) -> RuleReference:
        rule = current_domain.repository_for(SalesRule).find_by_name(name)
        if rule is None:
            raise ObjectNotFoundError(f"Sales rule `{name}` does not exist")
        return RuleReference(rule_id=rule.rule_id, label=rule.store_label, name=rule.name)
