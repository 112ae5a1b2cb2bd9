"""Money helpers: every amount is a Decimal rounded to cents."""

from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    if value is None or value == "":
        return ZERO
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def percent_change(current: Decimal, previous: Decimal) -> Decimal:
    """(current - previous) / previous * 100, or zero without a baseline."""
    if previous <= 0:
        return ZERO
    return to_money((current - previous) / previous * 100)


def percent_reduction(current: Decimal, previous: Decimal) -> Decimal:
    """(previous - current) / previous * 100; positive when current fell."""
    if previous <= 0:
        return ZERO
    return to_money((previous - current) / previous * 100)


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    if whole <= 0:
        return ZERO
    return to_money(part / whole * 100)
