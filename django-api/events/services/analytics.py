"""Capacity metrics and registration projections.

All functions are pure and read-only.
"""

import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from events.domain.models import Event

NEAR_FULL_PERCENT = 80
GOOD_PERCENT = 50
LOW_PERCENT = 25
SECONDS_PER_DAY = 24 * 60 * 60


class AlertLevel(Enum):
    OPTIMAL = "optimal"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


ALERT_COLORS = {
    AlertLevel.OPTIMAL: "success",
    AlertLevel.GOOD: "primary",
    AlertLevel.WARNING: "warning",
    AlertLevel.CRITICAL: "danger",
}


@dataclass(frozen=True)
class EventMetrics:
    total_registered: int
    capacity: int
    percentage: float
    spots_remaining: int
    is_full: bool
    is_near_full: bool
    alert_level: AlertLevel


@dataclass(frozen=True)
class TrendPoint:
    day: date
    count: int


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def metrics(registered: int, capacity: int) -> EventMetrics:
    """Compute fill metrics. A capacity of 0 reports 0% and is never full."""
    percentage = registered / capacity * 100 if capacity > 0 else 0.0
    is_full = capacity > 0 and registered >= capacity

    if is_full:
        level = AlertLevel.CRITICAL
    elif percentage >= NEAR_FULL_PERCENT:
        level = AlertLevel.WARNING
    elif percentage >= GOOD_PERCENT:
        level = AlertLevel.GOOD
    else:
        level = AlertLevel.OPTIMAL

    return EventMetrics(
        total_registered=registered,
        capacity=capacity,
        percentage=percentage,
        spots_remaining=max(0, capacity - registered),
        is_full=is_full,
        is_near_full=percentage >= NEAR_FULL_PERCENT,
        alert_level=level,
    )


def metrics_for(event: Event) -> EventMetrics:
    return metrics(event.registered, event.capacity.value)


def alert_message(m: EventMetrics) -> str | None:
    if m.is_full:
        return (
            "Event is at full capacity! Consider increasing capacity "
            "or creating another session."
        )
    if m.is_near_full:
        return f"Event is {round_half_up(m.percentage)}% full - Consider promoting now!"
    if m.percentage < LOW_PERCENT:
        return (
            f"Low registrations ({m.total_registered} out of {m.capacity}). "
            "Boost promotion!"
        )
    return None


def alert_color(level: AlertLevel) -> str:
    return ALERT_COLORS.get(level, "default")


def _days_spanned(timestamps: Sequence[datetime]) -> float:
    ordered = sorted(timestamps)
    return (ordered[-1] - ordered[0]).total_seconds() / SECONDS_PER_DAY


def _projected(count: int, projected: float) -> int:
    # A projection too large to represent stays at the current count.
    if not math.isfinite(projected):
        return count
    return round_half_up(max(count, projected))


def estimate_future_registrations(
    history: int | Sequence[datetime],
    days_ahead: float,
    weekly_growth: float = 0.1,
) -> int:
    """Project the registration count `days_ahead` days from now.

    With a plain count, growth is assumed flat at `weekly_growth` of the
    count per week. With registration timestamps, the observed average
    rate over the span they cover is used. Never projects below the
    current count.
    """
    if isinstance(history, int):
        if history == 0:
            return 0
        daily_rate = history * weekly_growth / 7
        return _projected(history, history + daily_rate * days_ahead)

    count = len(history)
    if count == 0:
        return 0
    days = _days_spanned(history)
    if days == 0:
        return count
    rate = count / days
    return _projected(count, count + rate * days_ahead)


def growth_rate(timestamps: Sequence[datetime]) -> float:
    """Registrations per day across the span of `timestamps`, to 2 places."""
    if len(timestamps) < 2:
        return 0.0
    days = _days_spanned(timestamps)
    if days == 0:
        return float(len(timestamps))
    return round_half_up(len(timestamps) / days * 100) / 100


def registration_trend(timestamps: Sequence[datetime]) -> list[TrendPoint]:
    """Count registrations per calendar day, oldest day first."""
    per_day = Counter(ts.date() for ts in timestamps)
    return [TrendPoint(day=day, count=per_day[day]) for day in sorted(per_day)]
