from __future__ import annotations

import math
from collections import Counter
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Iterable, List, Optional

from .parcours import CampaignWindow, get_campaign, to_date
from .progress import percentage


@dataclass(frozen=True)
class TimelineDay:
    day: int
    date: date
    weekday: int  # Monday=0 … Sunday=6
    percentage: int
    is_past: bool
    is_today: bool
    is_future: bool

    def as_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["date"] = self.date.isoformat()
        return out


def week_number_for(current_day: int) -> int:
    return max(1, math.ceil(current_day / 7))


def week_block(current_day: int, campaign: Optional[CampaignWindow] = None) -> List[int]:
    """Parcours days of the 7-day block (1-7, 8-14, …) containing current_day."""
    campaign = campaign or get_campaign()
    first = ((current_day - 1) // 7) * 7 + 1
    return [d for d in range(first, first + 7) if 1 <= d <= campaign.total_days]


def build_week_timeline(
    total_active: int,
    checks: Iterable[Any],
    current_day: int,
    campaign: Optional[CampaignWindow] = None,
) -> List[TimelineDay]:
    campaign = campaign or get_campaign()
    checked_per_date = Counter(to_date(c.date) for c in checks if c.checked)
    out: List[TimelineDay] = []
    for day in week_block(current_day, campaign):
        day_date = campaign.day_date(day)
        is_future = day > current_day
        pct = 0
        if not is_future and total_active > 0:
            # checked rows may exceed total_active when engagements were deactivated later
            pct = min(100, percentage(checked_per_date.get(day_date, 0), total_active))
        out.append(
            TimelineDay(
                day=day,
                date=day_date,
                weekday=day_date.weekday(),
                percentage=pct,
                is_past=day < current_day,
                is_today=day == current_day,
                is_future=is_future,
            )
        )
    return out
