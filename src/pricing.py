"""Cart pricing: bulk and loyalty discounts, the discount cap, and shipping."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Sequence, Tuple

from cart import (
    CartLineItem,
    CustomerProfile,
    DuplicateSkuError,
    ShippingMethod,
    UnknownShippingMethodError,
)
from loyalty import LoyaltyProgram
from money import percent_of
from promotions import BulkPromotion, LineItemResult
from rules import DEFAULT_DISCOUNT_RULES, DEFAULT_SHIPPING_RATES, DiscountRules, ShippingRates
from shipping import ShipmentResult, ShippingCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Subtotals:
    original_total: int
    bulk_discount_total: int

    @property
    def subtotal_after_bulk(self) -> int:
        return self.original_total - self.bulk_discount_total


@dataclass(frozen=True)
class CappedDiscount:
    total_discount: int
    is_capped: bool
    cap: int


@dataclass(frozen=True)
class PricingResult:
    original_total: int
    line_items: Tuple[LineItemResult, ...]
    bulk_discount_total: int
    subtotal_after_bulk: int
    loyalty_discount: int
    total_discount: int
    is_capped: bool
    final_total: int
    shipment: ShipmentResult
    grand_total: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_total": self.original_total,
            "line_items": [line.to_dict() for line in self.line_items],
            "bulk_discount_total": self.bulk_discount_total,
            "subtotal_after_bulk": self.subtotal_after_bulk,
            "loyalty_discount": self.loyalty_discount,
            "total_discount": self.total_discount,
            "is_capped": self.is_capped,
            "final_total": self.final_total,
            "shipment": self.shipment.to_dict(),
            "grand_total": self.grand_total,
        }


def aggregate(lines: Iterable[LineItemResult]) -> Subtotals:
    original_total = 0
    bulk_discount_total = 0
    for line in lines:
        original_total += line.original_total
        bulk_discount_total += line.bulk_discount
    return Subtotals(original_total=original_total, bulk_discount_total=bulk_discount_total)


def cap_discount(original_total: int, bulk_discount: int, loyalty_discount: int, rules: DiscountRules) -> CappedDiscount:
    """Bound the combined discount, not each component, by a share of the original total."""
    cap = percent_of(original_total, rules.discount_cap_rate)
    candidate = bulk_discount + loyalty_discount
    if candidate > cap:
        return CappedDiscount(total_discount=cap, is_capped=True, cap=cap)
    return CappedDiscount(total_discount=candidate, is_capped=False, cap=cap)


def _check_unique_skus(items: Sequence[CartLineItem]) -> None:
    seen = set()
    for item in items:
        if item.sku in seen:
            raise DuplicateSkuError(f"Duplicate SKU in cart: {item.sku}")
        seen.add(item.sku)


class PricingEngine:
    """Prices a cart in one forward pass.

    Bulk discounts are taken per line, loyalty compounds on the bulk-adjusted
    subtotal, and the combined discount is capped before shipping is quoted so
    that free-shipping eligibility sees the capped total.
    """

    def __init__(
        self,
        discount_rules: DiscountRules = DEFAULT_DISCOUNT_RULES,
        shipping_rates: ShippingRates = DEFAULT_SHIPPING_RATES,
    ) -> None:
        self._rules = discount_rules
        self._bulk = BulkPromotion(discount_rules)
        self._loyalty = LoyaltyProgram(discount_rules)
        self._shipping = ShippingCalculator(shipping_rates)

    def calculate(
        self,
        items: Sequence[CartLineItem],
        customer: CustomerProfile,
        method: ShippingMethod,
    ) -> PricingResult:
        if not isinstance(method, ShippingMethod):
            raise UnknownShippingMethodError(f"Unsupported shipping method: {method!r}")
        items = tuple(items)
        _check_unique_skus(items)

        lines = tuple(self._bulk.apply(item) for item in items)
        subtotals = aggregate(lines)
        loyalty_discount = self._loyalty.discount(subtotals.subtotal_after_bulk, customer)
        capped = cap_discount(
            subtotals.original_total,
            subtotals.bulk_discount_total,
            loyalty_discount,
            self._rules,
        )
        final_total = subtotals.original_total - capped.total_discount
        if capped.is_capped:
            logger.info(
                "Combined discount %s capped at %s (original total %s)",
                subtotals.bulk_discount_total + loyalty_discount,
                capped.cap,
                subtotals.original_total,
            )

        shipment = self._shipping.quote(items, subtotals.original_total, final_total, method)
        result = PricingResult(
            original_total=subtotals.original_total,
            line_items=lines,
            bulk_discount_total=subtotals.bulk_discount_total,
            subtotal_after_bulk=subtotals.subtotal_after_bulk,
            loyalty_discount=loyalty_discount,
            total_discount=capped.total_discount,
            is_capped=capped.is_capped,
            final_total=final_total,
            shipment=shipment,
            grand_total=final_total + shipment.total_shipping,
        )
        logger.debug(
            "Priced %d line(s): original=%s discount=%s capped=%s final=%s method=%s shipping=%s grand=%s",
            len(lines),
            result.original_total,
            result.total_discount,
            result.is_capped,
            result.final_total,
            method.value,
            shipment.total_shipping,
            result.grand_total,
        )
        return result


_default_engine = PricingEngine()


def calculate(
    items: Sequence[CartLineItem],
    customer: CustomerProfile,
    method: ShippingMethod,
) -> PricingResult:
    return _default_engine.calculate(items, customer, method)
