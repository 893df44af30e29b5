"""
Overall fidelity: checks performed / checks possible per category since the parcours start.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Iterable, Optional

from .models import CATEGORIES
from .parcours import CampaignWindow, get_campaign, to_date
from .progress import percentage


@dataclass(frozen=True)
class OverallStats:
    spiritual: int = 0
    virtue: int = 0
    penance: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def elapsed_window(today: date | str, campaign: Optional[CampaignWindow] = None) -> Optional[tuple[date, date]]:
    """[start, min(today, end)] or None when today is outside the parcours."""
    campaign = campaign or get_campaign()
    if campaign.current_day(today) is None:
        return None
    return campaign.start_date, campaign.elapsed_end(today)


def compute_overall_stats(
    active_engagements: Iterable[Any],
    checks: Iterable[Any],
    today: date | str,
    campaign: Optional[CampaignWindow] = None,
) -> OverallStats:
    campaign = campaign or get_campaign()
    elapsed_days = campaign.current_day(today)
    if elapsed_days is None:
        return OverallStats()
    window_start, window_end = campaign.start_date, campaign.elapsed_end(today)

    dates_by_engagement: dict[str, set[date]] = defaultdict(set)
    for check in checks:
        if not check.checked:
            continue
        check_day = to_date(check.date)
        if check_day is None or check_day < window_start or check_day > window_end:
            continue
        dates_by_engagement[check.engagement_id].add(check_day)

    ids_by_category: dict[str, list[str]] = {cat: [] for cat in CATEGORIES}
    for e in active_engagements:
        if e.category in ids_by_category:
            ids_by_category[e.category].append(e.id)

    values: dict[str, int] = {}
    for cat, ids in ids_by_category.items():
        # today counts as a full elapsed day
        total_possible = len(ids) * elapsed_days
        total_checked = sum(len(dates_by_engagement.get(eid, ())) for eid in ids)
        values[cat] = percentage(total_checked, total_possible)
    return OverallStats(**values)
