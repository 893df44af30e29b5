from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable

from .parcours import to_date

WEEK_DAYS = 7


@dataclass(frozen=True)
class WeeklyEngagementStats:
    engagement: Any
    days: tuple[bool, ...]  # Monday first

    def as_dict(self) -> dict[str, Any]:
        e = self.engagement
        return {
            "engagement": {
                "id": e.id,
                "category": e.category,
                "title": e.title,
                "sort_order": e.sort_order,
            },
            "days": list(self.days),
        }


def week_dates(week_start: date | str) -> list[date]:
    start = to_date(week_start)
    if start is None:
        raise ValueError(f"Not a date: {week_start!r}")
    return [start + timedelta(days=i) for i in range(WEEK_DAYS)]


def monday_of(value: date | str) -> date:
    day_value = to_date(value)
    if day_value is None:
        raise ValueError(f"Not a date: {value!r}")
    return day_value - timedelta(days=day_value.weekday())


def compute_weekly_stats(
    active_engagements: Iterable[Any],
    checks_in_range: Iterable[Any],
    week_start: date | str,
) -> list[WeeklyEngagementStats]:
    dates = week_dates(week_start)
    checked_pairs = {
        (c.engagement_id, to_date(c.date))
        for c in checks_in_range
        if c.checked
    }
    return [
        WeeklyEngagementStats(
            engagement=e,
            days=tuple((e.id, d) in checked_pairs for d in dates),
        )
        for e in active_engagements
    ]
