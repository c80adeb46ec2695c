"""Per-line bulk promotion."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from cart import CartLineItem
from money import percent_of, to_decimal
from rules import DEFAULT_DISCOUNT_RULES, DiscountRules


@dataclass(frozen=True)
class LineItemResult:
    sku: str
    name: str
    unit_price: int
    quantity: int
    unit_weight_kg: float
    original_total: int
    bulk_discount: int

    @property
    def discounted_total(self) -> int:
        return self.original_total - self.bulk_discount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sku": self.sku,
            "name": self.name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "unit_weight_kg": str(to_decimal(self.unit_weight_kg)),
            "original_total": self.original_total,
            "bulk_discount": self.bulk_discount,
        }


class BulkPromotion:
    """Takes a fixed percentage off any line bought in bulk."""

    def __init__(self, rules: DiscountRules = DEFAULT_DISCOUNT_RULES) -> None:
        self._rules = rules

    def discount(self, item: CartLineItem) -> int:
        if item.quantity >= self._rules.bulk_min_quantity:
            return percent_of(item.line_total, self._rules.bulk_rate)
        return 0

    def apply(self, item: CartLineItem) -> LineItemResult:
        return LineItemResult(
            sku=item.sku,
            name=item.name,
            unit_price=item.unit_price,
            quantity=item.quantity,
            unit_weight_kg=item.unit_weight_kg,
            original_total=item.line_total,
            bulk_discount=self.discount(item),
        )
