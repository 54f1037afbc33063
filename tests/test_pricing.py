"""
Tests for delivery pricing, totals and line identity
"""

import json
from decimal import Decimal

import pytest

from foodcart.cart import LineItem, aggregate_totals, delivery_fee, delivery_time, options_key
from foodcart.cart.pricing import TAX_RATE
from foodcart.services.money import format_money, round_money, to_decimal


class TestDeliveryFee:
    """Tests for delivery_fee."""

    def test_missing_locations_pay_base_fee(self, restaurant_location):
        assert delivery_fee(None, None) == Decimal("2.50")
        assert delivery_fee(restaurant_location, None) == Decimal("2.50")
        assert delivery_fee(None, restaurant_location) == Decimal("2.50")

    @pytest.mark.parametrize("km", [0, 0.5, 1.5, 1.99])
    def test_inside_free_radius(self, restaurant_location, km_north, km):
        assert delivery_fee(restaurant_location, km_north(restaurant_location, km)) == Decimal("2.50")

    def test_five_km(self, restaurant_location, user_5km):
        # 2.50 + 3 * 0.50
        assert delivery_fee(restaurant_location, user_5km) == Decimal("4.00")

    def test_fee_is_rounded_to_cents(self, restaurant_location, km_north):
        fee = delivery_fee(restaurant_location, km_north(restaurant_location, 3.333))
        assert fee == Decimal("3.17")
        assert fee.as_tuple().exponent == -2


class TestDeliveryTime:
    """Tests for delivery_time."""

    def test_missing_location_returns_base(self, restaurant_location):
        assert delivery_time(None, restaurant_location) == 25
        assert delivery_time(restaurant_location, None, base_minutes=40) == 40

    @pytest.mark.parametrize("km", [0, 1, 1.99])
    def test_inside_free_radius(self, restaurant_location, km_north, km):
        assert delivery_time(restaurant_location, km_north(restaurant_location, km), base_minutes=25) == 25

    def test_five_km_rounds_to_five_minutes(self, restaurant_location, user_5km):
        # 25 + 3 * 3 = 34 -> 35
        assert delivery_time(restaurant_location, user_5km) == 35

    def test_rounds_down_to_step(self, restaurant_location, km_north):
        # 25 + 2 * 3 = 31 -> 30
        assert delivery_time(restaurant_location, km_north(restaurant_location, 4)) == 30

    def test_custom_base(self, restaurant_location, user_5km):
        # 40 + 9 = 49 -> 50
        assert delivery_time(restaurant_location, user_5km, base_minutes=40) == 50


class TestAggregateTotals:
    """Tests for aggregate_totals."""

    def test_empty(self):
        totals = aggregate_totals([], Decimal("2.50"))
        assert totals.subtotal == Decimal("0.00")
        assert totals.tax == Decimal("0.00")
        assert totals.total == Decimal("2.50")

    def test_subtotal_tax_total(self):
        items = [LineItem(id="a", price=10, quantity=1), LineItem(id="b", price="3.50", quantity=2)]
        totals = aggregate_totals(items, Decimal("4.00"))

        assert totals.subtotal == Decimal("17.00")
        assert totals.tax == round_money(Decimal("17") * TAX_RATE)
        assert totals.total == totals.subtotal + totals.tax + Decimal("4.00")

    def test_tax_rounds_half_up(self):
        # 10 * 0.0825 = 0.825
        totals = aggregate_totals([LineItem(id="a", price=10)], Decimal("0"))
        assert totals.tax == Decimal("0.83")


class TestOptionsKey:
    """Tests for the line identity hasher."""

    def test_empty(self):
        assert options_key(None) == ""
        assert options_key({}) == ""

    def test_sorted_keys(self):
        assert options_key({"size": "large", "sauce": "bbq"}) == "sauce:bbq|size:large"

    def test_insertion_order_ignored(self):
        a = {"size": "large", "sauce": "bbq", "spice": "hot"}
        b = {"spice": "hot", "sauce": "bbq", "size": "large"}
        assert options_key(a) == options_key(b)

    def test_different_values_differ(self):
        assert options_key({"size": "large"}) != options_key({"size": "small"})

    def test_tuple_and_list_values_match(self):
        # Tuples are stored as JSON lists and must still merge after a reload
        assert options_key({"toppings": ("olives", "onion")}) == options_key({"toppings": ["olives", "onion"]})

    def test_nested_mapping_order_ignored(self):
        a = {"extras": {"cheese": 2, "bacon": 1}}
        b = {"extras": {"bacon": 1, "cheese": 2}}
        assert options_key(a) == options_key(b)

    def test_line_survives_snapshot_round_trip(self):
        item = LineItem(id="pizza", price=12, options={"toppings": ("olives", "onion")})
        reloaded = LineItem.from_dict(json.loads(json.dumps(item.to_dict())))
        assert reloaded.identity == item.identity


class TestMoney:
    """Tests for money helpers used by pricing."""

    def test_to_decimal_from_float(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_to_decimal_invalid(self):
        assert to_decimal("abc") == Decimal("0")
        assert to_decimal(None) == Decimal("0")

    def test_round_money_half_up(self):
        assert round_money("2.345") == Decimal("2.35")
        assert round_money("2.344") == Decimal("2.34")

    def test_format_money(self):
        assert format_money(Decimal("1234.5")) == "$1,234.50"
