"""Rule tables for discounts and shipping.

Rates are Decimals so percentage math stays exact; amounts are integer cents.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


def _check_rate(name: str, rate: Decimal) -> None:
    if not isinstance(rate, Decimal) or not (Decimal("0") <= rate <= Decimal("1")):
        raise ValueError(f"{name} must be a Decimal between 0 and 1, got {rate!r}")


def _check_amount(name: str, amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {amount!r}")


@dataclass(frozen=True)
class DiscountRules:
    bulk_min_quantity: int = 3
    bulk_rate: Decimal = Decimal("0.15")
    # Loyalty applies strictly above this many years.
    loyalty_min_tenure_years: int = 2
    loyalty_rate: Decimal = Decimal("0.05")
    discount_cap_rate: Decimal = Decimal("0.30")

    def __post_init__(self) -> None:
        _check_amount("bulk_min_quantity", self.bulk_min_quantity)
        _check_amount("loyalty_min_tenure_years", self.loyalty_min_tenure_years)
        _check_rate("bulk_rate", self.bulk_rate)
        _check_rate("loyalty_rate", self.loyalty_rate)
        _check_rate("discount_cap_rate", self.discount_cap_rate)


@dataclass(frozen=True)
class ShippingRates:
    base: int = 700
    per_kg: int = 200
    expedited_rate: Decimal = Decimal("0.15")
    # Orders must be strictly above this to ship free.
    free_threshold: int = 10000
    express_flat: int = 2500

    def __post_init__(self) -> None:
        _check_amount("base", self.base)
        _check_amount("per_kg", self.per_kg)
        _check_amount("free_threshold", self.free_threshold)
        _check_amount("express_flat", self.express_flat)
        _check_rate("expedited_rate", self.expedited_rate)


DEFAULT_DISCOUNT_RULES = DiscountRules()
DEFAULT_SHIPPING_RATES = ShippingRates()
