"""
Per-day category progress.

Pure functions only: callers fetch the active engagements and the checks for
a date, then call compute_day_progress() once.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Iterable, Optional

from .models import CATEGORIES, CATEGORY_PENANCE, CATEGORY_SPIRITUAL, CATEGORY_VIRTUE
from .parcours import CampaignWindow, get_campaign, to_date

OVERALL = "overall"


def percentage(part: int, whole: int) -> int:
    """round(part / whole * 100) with halves rounded up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


@dataclass(frozen=True)
class CategoryProgress:
    category: str
    checked: int
    total: int
    percentage: int


@dataclass(frozen=True)
class DayProgress:
    day: int  # 0 outside the campaign
    date: date
    spiritual: CategoryProgress
    virtue: CategoryProgress
    penance: CategoryProgress
    overall: CategoryProgress

    def as_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["date"] = self.date.isoformat()
        return out


def checked_ids(checks: Iterable[Any]) -> set[str]:
    return {c.engagement_id for c in checks if c.checked}


def category_progress(category: str, engagements: Iterable[Any], done: set[str]) -> CategoryProgress:
    members = [e for e in engagements if e.category == category]
    total = len(members)
    checked = sum(1 for e in members if e.id in done)
    return CategoryProgress(category=category, checked=checked, total=total, percentage=percentage(checked, total))


def compute_day_progress(
    active_engagements: Iterable[Any],
    checks_for_date: Iterable[Any],
    on_date: date | str,
    campaign: Optional[CampaignWindow] = None,
) -> DayProgress:
    campaign = campaign or get_campaign()
    day_value = to_date(on_date)
    if day_value is None:
        raise ValueError(f"Not a date: {on_date!r}")

    engagements = list(active_engagements)
    done = checked_ids(checks_for_date)
    by_category = {cat: category_progress(cat, engagements, done) for cat in CATEGORIES}

    # summed raw counts, not an average of the category percentages
    overall_checked = sum(p.checked for p in by_category.values())
    overall_total = sum(p.total for p in by_category.values())
    overall = CategoryProgress(
        category=OVERALL,
        checked=overall_checked,
        total=overall_total,
        percentage=percentage(overall_checked, overall_total),
    )

    return DayProgress(
        day=campaign.current_day(day_value) or 0,
        date=day_value,
        spiritual=by_category[CATEGORY_SPIRITUAL],
        virtue=by_category[CATEGORY_VIRTUE],
        penance=by_category[CATEGORY_PENANCE],
        overall=overall,
    )
