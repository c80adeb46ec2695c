"""Shipping charges by weight, order value, and method."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, assert_never

from cart import CartLineItem, ShippingMethod, UnknownShippingMethodError
from money import percent_of, scaled_cents
from rules import DEFAULT_SHIPPING_RATES, ShippingRates


@dataclass(frozen=True)
class ShipmentResult:
    method: ShippingMethod
    total_weight_kg: Decimal
    base_shipping: int
    weight_surcharge: int
    expedited_surcharge: int
    is_free_shipping: bool
    total_shipping: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method.value,
            "total_weight_kg": str(self.total_weight_kg),
            "base_shipping": self.base_shipping,
            "weight_surcharge": self.weight_surcharge,
            "expedited_surcharge": self.expedited_surcharge,
            "is_free_shipping": self.is_free_shipping,
            "total_shipping": self.total_shipping,
        }


def total_weight(items: Iterable[CartLineItem]) -> Decimal:
    return sum((item.line_weight for item in items), Decimal("0"))


class ShippingCalculator:
    """Prices a shipment once product discounts are settled.

    The free-shipping check looks at the discounted (and capped) product total,
    while the expedited premium is charged on the undiscounted order value.
    """

    def __init__(self, rates: ShippingRates = DEFAULT_SHIPPING_RATES) -> None:
        self._rates = rates

    def qualifies_for_free_shipping(self, method: ShippingMethod, final_total: int) -> bool:
        return method is not ShippingMethod.EXPRESS and final_total > self._rates.free_threshold

    def quote(
        self,
        items: Iterable[CartLineItem],
        original_total: int,
        final_total: int,
        method: ShippingMethod,
    ) -> ShipmentResult:
        if not isinstance(method, ShippingMethod):
            raise UnknownShippingMethodError(f"Unsupported shipping method: {method!r}")

        items = tuple(items)
        weight = total_weight(items)
        rates = self._rates

        match method:
            case ShippingMethod.EXPRESS:
                return ShipmentResult(
                    method=method,
                    total_weight_kg=weight,
                    base_shipping=0,
                    weight_surcharge=0,
                    expedited_surcharge=0,
                    is_free_shipping=False,
                    total_shipping=rates.express_flat,
                )
            case ShippingMethod.STANDARD | ShippingMethod.EXPEDITED:
                if not items:
                    # Empty cart: nothing to ship.
                    return ShipmentResult(
                        method=method,
                        total_weight_kg=weight,
                        base_shipping=0,
                        weight_surcharge=0,
                        expedited_surcharge=0,
                        is_free_shipping=False,
                        total_shipping=0,
                    )
                if self.qualifies_for_free_shipping(method, final_total):
                    return ShipmentResult(
                        method=method,
                        total_weight_kg=weight,
                        base_shipping=0,
                        weight_surcharge=0,
                        expedited_surcharge=0,
                        is_free_shipping=True,
                        total_shipping=0,
                    )
                weight_surcharge = scaled_cents(weight, rates.per_kg)
                expedited_surcharge = 0
                if method is ShippingMethod.EXPEDITED:
                    expedited_surcharge = percent_of(original_total, rates.expedited_rate)
                return ShipmentResult(
                    method=method,
                    total_weight_kg=weight,
                    base_shipping=rates.base,
                    weight_surcharge=weight_surcharge,
                    expedited_surcharge=expedited_surcharge,
                    is_free_shipping=False,
                    total_shipping=rates.base + weight_surcharge + expedited_surcharge,
                )
            case _:
                assert_never(method)
