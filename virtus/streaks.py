from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Any, Iterable, Optional

from .parcours import CampaignWindow, get_campaign, to_date


def completed_counts(check_history: Iterable[Any], start: date, end: date) -> dict[date, int]:
    """Distinct checked engagement ids per date, restricted to [start, end]."""
    ids_by_date: dict[date, set[str]] = defaultdict(set)
    for check in check_history:
        if not check.checked:
            continue
        check_day = to_date(check.date)
        if check_day is None or check_day < start or check_day > end:
            continue
        ids_by_date[check_day].add(check.engagement_id)
    return {d: len(ids) for d, ids in ids_by_date.items()}


def compute_streak(
    active_engagement_count: int,
    check_history: Iterable[Any],
    today: date | str,
    campaign: Optional[CampaignWindow] = None,
) -> int:
    """
    Consecutive fully-completed days ending at (and including) today.

    A day is complete when at least `active_engagement_count` distinct
    engagements were checked on it (>= so that engagements deactivated after
    being checked still count). Days before the campaign start are ignored.
    """
    if active_engagement_count <= 0:
        return 0
    campaign = campaign or get_campaign()
    today_d = to_date(today)
    if today_d is None:
        raise ValueError(f"Not a date: {today!r}")
    if today_d < campaign.start_date:
        return 0

    counts = completed_counts(check_history, campaign.start_date, today_d)
    streak = 0
    cursor = today_d
    while cursor >= campaign.start_date and counts.get(cursor, 0) >= active_engagement_count:
        streak += 1
        cursor -= timedelta(days=1)
    return streak
