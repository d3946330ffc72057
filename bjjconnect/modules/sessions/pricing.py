# bjjconnect/modules/sessions/pricing.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")


def compute_price(hourly_rate: Decimal | int | float | str, duration_minutes: int) -> Decimal:
    """
    rate x duration / 60, rounded half-up to cents.

    >>> compute_price(Decimal("100"), 90)
    Decimal('150.00')
    """
    if duration_minutes <= 0:
        raise ValueError("duration_minutes must be positive")
    rate = Decimal(str(hourly_rate))
    if rate < 0:
        raise ValueError("hourly_rate must not be negative")
    return (rate * Decimal(duration_minutes) / Decimal(60)).quantize(
        CENTS, rounding=ROUND_HALF_UP
    )
