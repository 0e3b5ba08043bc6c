# travel_ledger/domain/pricing.py

from datetime import datetime
from decimal import Decimal, ROUND_DOWN
from typing import Optional

from travel_ledger.domain.entities import Ticket, utc_now

CENT = Decimal("0.01")
PRICE_CAP_MULTIPLIER = Decimal("2.5")
REFUND_RATE = Decimal("0.8")
PEAK_MONTHS = frozenset({6, 7, 8, 12, 1})


def _to_decimal(value: float) -> Decimal:
    return Decimal(str(value))


def _truncate_to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_DOWN)


def is_whole_cents(value: float) -> bool:
    """True when value has no fraction of a cent, so truncation cannot go below it."""
    amount = _to_decimal(value)
    return amount == amount.quantize(CENT)


def occupancy_factor(total_seats: int, available_seats: int) -> Decimal:
    """1.0 for an empty ticket up to 1.5 when every seat is taken."""
    occupied = Decimal(total_seats - available_seats)
    return Decimal("1") + Decimal("0.5") * occupied / Decimal(total_seats)


def time_factor(departure_time: datetime, now: datetime) -> Decimal:
    days_until_departure = (departure_time - now).total_seconds() / 86400
    if days_until_departure < 1:
        return Decimal("1.3")
    if days_until_departure < 3:
        return Decimal("1.2")
    if days_until_departure < 7:
        return Decimal("1.1")
    return Decimal("1.0")


def seasonal_factor(now: datetime) -> Decimal:
    if now.month in PEAK_MONTHS:
        return Decimal("1.2")
    return Decimal("1.0")


def compute_dynamic_price(
    base_price: float,
    total_seats: int,
    available_seats: int,
    departure_time: datetime,
    now: datetime,
) -> float:
    """
    Per-seat price from occupancy, time to departure and season.

    The result is clamped to [base, 2.5 x base] and truncated to cents.
    """
    base = _to_decimal(base_price)
    price = (
        base
        * occupancy_factor(total_seats, available_seats)
        * time_factor(departure_time, now)
        * seasonal_factor(now)
    )
    price = max(base, min(price, base * PRICE_CAP_MULTIPLIER))
    return float(_truncate_to_cents(price))


def price_ticket(ticket: Ticket, now: Optional[datetime] = None) -> float:
    return compute_dynamic_price(
        base_price=ticket.base_price,
        total_seats=ticket.total_seats,
        available_seats=ticket.available_seats,
        departure_time=ticket.departure_time,
        now=now or utc_now(),
    )


def total_for_seats(unit_price: float, seat_count: int) -> float:
    return float(_to_decimal(unit_price) * seat_count)


def refund_for(total_price: float) -> float:
    return float(_to_decimal(total_price) * REFUND_RATE)
