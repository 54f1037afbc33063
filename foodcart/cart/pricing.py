"""
Pricing - delivery fee, delivery time and cart totals.

All functions are pure. A missing restaurant or user location is a normal
input and yields the baseline fee/time; distance is only computed when both
points are known.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from foodcart.location.distance import haversine_km
from foodcart.models import Coordinates
from foodcart.services.money import add, multiply, round_money, subtract, to_decimal

from .models import DEFAULT_BASE_MINUTES, LineItem

TAX_RATE = Decimal("0.0825")  # 8.25%

BASE_DELIVERY_FEE = Decimal("2.50")
FREE_RADIUS_KM = Decimal("2")
FEE_PER_KM = Decimal("0.50")

MINUTES_PER_KM = Decimal("3")
ETA_STEP_MINUTES = Decimal("5")


@dataclass(frozen=True)
class Totals:
    """Rounded monetary totals for a set of line items."""
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def _extra_km(restaurant_loc: Optional[Coordinates], user_loc: Optional[Coordinates]) -> Decimal:
    """Kilometers beyond the free radius; zero when a location is missing."""
    if restaurant_loc is None or user_loc is None:
        return Decimal("0")
    distance = to_decimal(haversine_km(restaurant_loc, user_loc))
    if distance <= FREE_RADIUS_KM:
        return Decimal("0")
    return subtract(distance, FREE_RADIUS_KM)


def delivery_fee(restaurant_loc: Optional[Coordinates], user_loc: Optional[Coordinates]) -> Decimal:
    """Flat base fee inside the free radius, plus a per-km rate beyond it."""
    extra = _extra_km(restaurant_loc, user_loc)
    if extra == 0:
        return BASE_DELIVERY_FEE
    return round_money(add(BASE_DELIVERY_FEE, multiply(extra, FEE_PER_KM)))


def delivery_time(
    restaurant_loc: Optional[Coordinates],
    user_loc: Optional[Coordinates],
    base_minutes: int = DEFAULT_BASE_MINUTES,
) -> int:
    """
    Estimated delivery time in minutes.

    Beyond the free radius every extra kilometer adds MINUTES_PER_KM and the
    result is rounded to the nearest 5 minutes (halves round up).
    """
    extra = _extra_km(restaurant_loc, user_loc)
    if extra == 0:
        return base_minutes
    minutes = add(base_minutes, multiply(extra, MINUTES_PER_KM))
    steps = (minutes / ETA_STEP_MINUTES).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(steps * ETA_STEP_MINUTES)


def aggregate_totals(items: Iterable[LineItem], fee: Decimal) -> Totals:
    """
    Subtotal, tax and total for the given items and delivery fee.

    Subtotal and tax are rounded separately and the total is their sum plus
    the fee, so the displayed figures always add up.
    """
    raw_subtotal = sum((multiply(item.price, item.quantity) for item in items), Decimal("0"))
    subtotal = round_money(raw_subtotal)
    tax = round_money(multiply(raw_subtotal, TAX_RATE))
    total = round_money(subtotal + tax + to_decimal(fee))
    return Totals(subtotal=subtotal, tax=tax, total=total)
