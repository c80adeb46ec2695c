from decimal import Decimal

import pytest

from cart import CartLineItem, CustomerProfile, InvalidInputError, ShippingMethod, UnknownShippingMethodError
from money import percent_of, round_cents
from rules import DiscountRules, ShippingRates


def make_item(**overrides):
    fields = dict(sku="SKU", name="Thing", unit_price=100, quantity=1, unit_weight_kg=0.5)
    fields.update(overrides)
    return CartLineItem(**fields)


@pytest.mark.parametrize(
    "overrides",
    [
        {"unit_price": -1},
        {"quantity": 0},
        {"quantity": -2},
        {"unit_weight_kg": -0.1},
        {"unit_weight_kg": float("nan")},
        {"unit_weight_kg": float("inf")},
        {"sku": ""},
        {"unit_price": 1.5},
        {"quantity": True},
    ],
)
def test_invalid_line_items_rejected(overrides):
    with pytest.raises(InvalidInputError):
        make_item(**overrides)


def test_line_item_defaults_and_totals():
    item = CartLineItem(sku="A", name="a", unit_price=250, quantity=4)
    assert item.unit_weight_kg == 0.0
    assert item.line_total == 1000
    assert item.line_weight == Decimal("0")


def test_zero_price_is_allowed():
    assert make_item(unit_price=0).line_total == 0


def test_negative_tenure_rejected():
    with pytest.raises(InvalidInputError):
        CustomerProfile(tenure_years=-1)


def test_invalid_input_is_a_value_error():
    with pytest.raises(ValueError):
        make_item(quantity=0)


@pytest.mark.parametrize("raw", ["standard", "EXPEDITED", " Express "])
def test_parse_shipping_method(raw):
    assert ShippingMethod.parse(raw).value == raw.strip().lower()


@pytest.mark.parametrize("raw", ["overnight", "", 3, None])
def test_parse_unknown_shipping_method(raw):
    with pytest.raises(UnknownShippingMethodError):
        ShippingMethod.parse(raw)


def test_parse_passes_members_through():
    assert ShippingMethod.parse(ShippingMethod.EXPRESS) is ShippingMethod.EXPRESS


@pytest.mark.parametrize(
    "value, expected",
    [(0, 0), (4.5, 5), (Decimal("4.4999"), 4), (Decimal("2.5"), 3), (3.5, 4), (7, 7)],
)
def test_round_cents_rounds_half_up(value, expected):
    assert round_cents(value) == expected


def test_percent_of():
    assert percent_of(300000, Decimal("0.15")) == 45000
    assert percent_of(10, Decimal("0.05")) == 1
    assert percent_of(0, Decimal("0.30")) == 0


def test_rule_tables_validate():
    with pytest.raises(ValueError):
        DiscountRules(bulk_rate=Decimal("1.5"))
    with pytest.raises(ValueError):
        DiscountRules(loyalty_rate=0.05)
    with pytest.raises(ValueError):
        ShippingRates(base=-1)
    assert ShippingRates().express_flat == 2500
    assert DiscountRules().discount_cap_rate == Decimal("0.30")
