"""Cart inputs for the pricing engine: line items, customers, shipping methods."""
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Union

from money import to_decimal


class InvalidInputError(ValueError):
    """A cart value that the pricing rules are not defined for."""


class DuplicateSkuError(InvalidInputError):
    pass


class UnknownShippingMethodError(ValueError):
    pass


def _require_int(field: str, value: object, minimum: int) -> None:
    # bool is an int subclass; True is not a quantity.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{field} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidInputError(f"{field} must be >= {minimum}, got {value}")


class ShippingMethod(str, Enum):
    STANDARD = "standard"
    EXPEDITED = "expedited"
    EXPRESS = "express"

    @classmethod
    def parse(cls, value: Union[str, "ShippingMethod"]) -> "ShippingMethod":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnknownShippingMethodError(f"Unsupported shipping method: {value!r}")


@dataclass(frozen=True)
class CartLineItem:
    sku: str
    name: str
    unit_price: int
    quantity: int
    unit_weight_kg: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.sku, str) or not self.sku:
            raise InvalidInputError("sku must be a non-empty string")
        _require_int("unit_price", self.unit_price, 0)
        _require_int("quantity", self.quantity, 1)
        weight = self.unit_weight_kg
        if isinstance(weight, bool) or not isinstance(weight, (int, float, Decimal)):
            raise InvalidInputError(f"unit_weight_kg must be a number, got {weight!r}")
        if not math.isfinite(weight) or weight < 0:
            raise InvalidInputError(f"unit_weight_kg must be finite and >= 0, got {weight}")

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity

    @property
    def line_weight(self) -> Decimal:
        return to_decimal(self.unit_weight_kg) * self.quantity


@dataclass(frozen=True)
class CustomerProfile:
    tenure_years: int = 0

    def __post_init__(self) -> None:
        _require_int("tenure_years", self.tenure_years, 0)
