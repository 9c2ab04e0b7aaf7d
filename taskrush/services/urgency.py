"""Urgency scoring - priority weight per day-equivalent until the deadline."""

from datetime import date, datetime, time, timezone
from typing import Optional, Union

from taskrush.models.task import Priority


PRIORITY_WEIGHTS: dict[Priority, int] = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
    Priority.CRITICAL: 5,
}

HOURS_PER_DAY = 24

# Floor for hours remaining; overdue and imminent deadlines share the max score
MIN_HOURS_UNTIL_DEADLINE = 1.0


def priority_weight(priority: Union[Priority, str]) -> int:
    """Return the scoring weight for a priority."""
    return PRIORITY_WEIGHTS[Priority(priority)]


def _as_utc(moment: Union[date, datetime]) -> datetime:
    """Normalize a date or datetime to an aware UTC datetime.

    A bare date means midnight UTC of that day; a naive datetime is taken as UTC.
    """
    if not isinstance(moment, datetime):
        return datetime.combine(moment, time.min, tzinfo=timezone.utc)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def hours_until(deadline: Union[date, datetime], now: datetime) -> float:
    """Hours from ``now`` to ``deadline``, clamped to the 1 hour floor."""
    delta = _as_utc(deadline) - _as_utc(now)
    return max(MIN_HOURS_UNTIL_DEADLINE, delta.total_seconds() / 3600)


def compute_urgency(
    priority: Union[Priority, str],
    deadline: Optional[Union[date, datetime]],
    now: datetime,
) -> float:
    """
    Compute the urgency score for a task.

    Without a deadline the score is the flat priority weight. With one it is
    ``weight / (hours_until_deadline / 24)`` rounded to 2 places, so it grows
    as the deadline nears and peaks at ``weight * 24`` once the deadline is
    within an hour or already past.
    """
    weight = priority_weight(priority)

    if deadline is None:
        return float(weight)

    hours = hours_until(deadline, now)
    return round(weight / (hours / HOURS_PER_DAY), 2)
