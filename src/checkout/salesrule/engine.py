"""Promotion engine — decides which sales rules discount which cart items.

Rules are applied in priority order (``sort_order``, then ``rule_id``). For
every item a rule matches, the engine computes the rule's discount, caps it
at what is left of the item's row total and appends a discount record, so an
item's records come out in application order. A rule flagged with
``stop_rules_processing`` shields the items it discounted from later rules.

The engine works in a single currency: base amounts equal quote amounts.
``original_amount`` is the rule's discount before capping.
"""

from decimal import ROUND_DOWN, Decimal

from checkout.domain import logger
from checkout.quote.discounts import DiscountData, DiscountRecord
from checkout.salesrule.rule import RuleAction
from checkout.shared.amounts import CENT, ZERO, quantize, to_decimal

HUNDRED = Decimal("100")


class PromotionEngine:
    def __init__(self, rules):
        self.rules = sorted(rules, key=lambda rule: (rule.sort_order or 0, rule.rule_id))

    def apply(self, items, categories_by_product) -> dict[str, list[DiscountRecord]]:
        """Compute discount records for each item.

        Args:
            items: Quote items (need ``id``, ``product_id``, ``quantity`` and ``price``).
            categories_by_product: Product id to the product's category ids.

        Returns:
            Item id to the ordered list of discount records for that item.
        """
        items = list(items)
        applications = {str(item.id): [] for item in items}
        remaining = {str(item.id): _row_total(item) for item in items}
        stopped = set()

        for rule in self.rules:
            if not rule.is_active:
                continue

            matching = [
                item
                for item in items
                if str(item.id) not in stopped
                and rule.matches_categories(categories_by_product.get(str(item.product_id), []))
            ]
            if not matching:
                continue

            for item, original in zip(matching, self._discounts_for(rule, matching), strict=True):
                item_id = str(item.id)
                amount = min(original, remaining[item_id])
                if amount <= ZERO:
                    continue

                remaining[item_id] -= amount
                applications[item_id].append(
                    DiscountRecord(
                        rule_label=rule.store_label,
                        rule_id=rule.rule_id,
                        discount=DiscountData.single_currency(amount, original_amount=original),
                    )
                )
                if rule.stop_rules_processing:
                    stopped.add(item_id)

            logger.debug("sales_rule_applied", rule_id=rule.rule_id, items=len(matching))

        return applications

    def _discounts_for(self, rule, items) -> list[Decimal]:
        action = RuleAction(rule.simple_action)
        amount = to_decimal(rule.discount_amount)

        if action == RuleAction.BY_PERCENT:
            percent = min(amount, HUNDRED)
            return [quantize(to_decimal(item.price) * _discount_qty(rule, item) * percent / HUNDRED) for item in items]

        if action == RuleAction.BY_FIXED:
            return [quantize(amount * _discount_qty(rule, item)) for item in items]

        return _spread(amount, [_row_total(item) for item in items])


def _discount_qty(rule, item) -> int:
    if rule.discount_qty:
        return min(item.quantity, rule.discount_qty)
    return item.quantity


def _row_total(item) -> Decimal:
    return quantize(to_decimal(item.price) * item.quantity)


def _spread(amount, row_totals) -> list[Decimal]:
    """Split a cart-wide amount over rows by weight; the last row absorbs rounding.

    Shares before the last are rounded down so that the remainder is never negative.
    """
    total = sum(row_totals, ZERO)
    if total <= ZERO:
        return [ZERO for _ in row_totals]

    amount = min(quantize(amount), total)
    shares = [(amount * row / total).quantize(CENT, rounding=ROUND_DOWN) for row in row_totals[:-1]]
    shares.append(amount - sum(shares, ZERO))
    return shares
