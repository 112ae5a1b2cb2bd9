"""
Reporting windows and chart buckets.

All times are naive UTC, like every timestamp the ledger
stores. A window covers [start, end); the comparison window
is the span of equal kind that immediately precedes it.

    today    hourly buckets from midnight to the current hour
    week     7 daily buckets ending today
    month    30 daily buckets ending today
    quarter  weekly buckets from the start of the quarter
    year     monthly buckets from 1 January
"""

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta

from pos_ledger.models.enums import Period


class Granularity(str, enum.Enum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


GRANULARITY_BY_PERIOD = {
    Period.TODAY: Granularity.HOUR,
    Period.WEEK: Granularity.DAY,
    Period.MONTH: Granularity.DAY,
    Period.QUARTER: Granularity.WEEK,
    Period.YEAR: Granularity.MONTH,
}

# Rolling windows, in days, ending with today.
ROLLING_DAYS = {
    Period.WEEK: 7,
    Period.MONTH: 30,
}


@dataclass(frozen=True)
class PeriodWindow:
    period: Period
    start: datetime
    end: datetime
    previous_start: datetime
    previous_end: datetime

    @property
    def granularity(self) -> Granularity:
        return GRANULARITY_BY_PERIOD[self.period]

    def contains(self, ts: datetime) -> bool:
        return self.start <= ts < self.end

    def contains_previous(self, ts: datetime) -> bool:
        return self.previous_start <= ts < self.previous_end


@dataclass(frozen=True)
class Bucket:
    start: datetime
    label: str


def midnight(ts: datetime) -> datetime:
    return ts.replace(hour=0, minute=0, second=0, microsecond=0)


def quarter_start(year: int, quarter: int) -> datetime:
    """First day of a zero-based quarter; quarter -1 is last year's Q4."""
    year += quarter // 4
    return datetime(year, (quarter % 4) * 3 + 1, 1)


def resolve_period(period: Period | str, now: datetime) -> PeriodWindow:
    period = Period(period)
    today = midnight(now)

    if period == Period.TODAY:
        start = today
        previous_start = today - timedelta(days=1)
    elif period in ROLLING_DAYS:
        days = ROLLING_DAYS[period]
        start = today - timedelta(days=days - 1)
        previous_start = start - timedelta(days=days)
    elif period == Period.QUARTER:
        quarter = (now.month - 1) // 3
        start = quarter_start(now.year, quarter)
        previous_start = quarter_start(now.year, quarter - 1)
    else:
        start = datetime(now.year, 1, 1)
        previous_start = datetime(now.year - 1, 1, 1)

    return PeriodWindow(
        period=period,
        start=start,
        end=now,
        previous_start=previous_start,
        previous_end=start,
    )


def bucket_start(
    ts: datetime, granularity: Granularity, origin: datetime
) -> datetime:
    """Start of the bucket holding ts; weeks are counted from origin."""
    if granularity == Granularity.HOUR:
        return ts.replace(minute=0, second=0, microsecond=0)
    if granularity == Granularity.DAY:
        return midnight(ts)
    if granularity == Granularity.WEEK:
        weeks = (midnight(ts) - origin).days // 7
        return origin + timedelta(days=7 * weeks)
    return midnight(ts).replace(day=1)


def _next_start(start: datetime, granularity: Granularity) -> datetime:
    if granularity == Granularity.HOUR:
        return start + timedelta(hours=1)
    if granularity == Granularity.DAY:
        return start + timedelta(days=1)
    if granularity == Granularity.WEEK:
        return start + timedelta(days=7)
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


def _label(start: datetime, period: Period, index: int) -> str:
    if period == Period.TODAY:
        return start.strftime("%H:00")
    if period == Period.WEEK:
        return f"{start:%a} {start.day}"
    if period == Period.MONTH:
        return f"{start:%b} {start.day}"
    if period == Period.QUARTER:
        return f"Week {index + 1}"
    return start.strftime("%b")


def build_buckets(window: PeriodWindow) -> list[Bucket]:
    """
    Every bucket of the current window, oldest first.

    The bucket containing window.end is included, so a week
    always yields seven buckets and today yields one per hour
    up to and including the current hour.
    """
    granularity = window.granularity
    buckets = []
    current = window.start
    while current <= window.end:
        buckets.append(
            Bucket(start=current, label=_label(current, window.period, len(buckets)))
        )
        current = _next_start(current, granularity)
    return buckets
