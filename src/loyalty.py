"""Tenure-based loyalty discount."""
from __future__ import annotations

from cart import CustomerProfile
from money import percent_of
from rules import DEFAULT_DISCOUNT_RULES, DiscountRules


class LoyaltyProgram:
    def __init__(self, rules: DiscountRules = DEFAULT_DISCOUNT_RULES) -> None:
        self._rules = rules

    def is_eligible(self, customer: CustomerProfile) -> bool:
        return customer.tenure_years > self._rules.loyalty_min_tenure_years

    def discount(self, subtotal_after_bulk: int, customer: CustomerProfile) -> int:
        # Compounds on the bulk-adjusted subtotal, not the original total.
        if not self.is_eligible(customer):
            return 0
        return percent_of(subtotal_after_bulk, self._rules.loyalty_rate)
