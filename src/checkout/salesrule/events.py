"""Domain events for the SalesRule aggregate."""

from protean.fields import Float, Identifier, Integer, String

from checkout.domain import checkout


@checkout.event(part_of="SalesRule")
class SalesRuleCreated:
    """A cart-level promotion was configured."""

    __version__ = 1

    sales_rule_id = Identifier(required=True)
    rule_id = Integer(required=True)
    name = String(required=True)
    simple_action = String(required=True)
    discount_amount = Float(required=True)


@checkout.event(part_of="SalesRule")
class SalesRuleActivated:
    __version__ = 1

    sales_rule_id = Identifier(required=True)
    rule_id = Integer(required=True)


@checkout.event(part_of="SalesRule")
class SalesRuleDeactivated:
    __version__ = 1

    sales_rule_id = Identifier(required=True)
    rule_id = Integer(required=True)
