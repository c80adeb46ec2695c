"""In-memory record of pricing calls, keyed by whoever records them."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

from cart import CartLineItem, CustomerProfile, ShippingMethod
from money import to_decimal


@dataclass
class Interaction:
    input: Dict[str, Any]
    output: Dict[str, Any]
    at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def describe_input(
    items: Sequence[CartLineItem],
    customer: CustomerProfile,
    method: ShippingMethod,
) -> Dict[str, Any]:
    return {
        "items": [
            {
                "sku": item.sku,
                "name": item.name,
                "unit_price": item.unit_price,
                "quantity": item.quantity,
                "unit_weight_kg": str(to_decimal(item.unit_weight_kg)),
            }
            for item in items
        ],
        "customer": {"tenure_years": customer.tenure_years},
        "method": method.value,
    }


class InteractionTracer:
    """Write-only sink for (input, output) pairs.

    Callers pass the key explicitly; the tracer never looks at who is calling.
    """

    def __init__(self) -> None:
        self._traces: Dict[str, List[Interaction]] = {}

    def record(self, key: str, input: Dict[str, Any], output: Dict[str, Any]) -> Interaction:
        interaction = Interaction(input=input, output=output)
        self._traces.setdefault(key, []).append(interaction)
        return interaction

    def get(self, key: str) -> List[Interaction]:
        return list(self._traces.get(key, []))

    def all(self) -> Dict[str, List[Interaction]]:
        return {key: list(entries) for key, entries in self._traces.items()}

    def clear(self) -> None:
        self._traces.clear()
