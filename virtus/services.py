"""
Use cases: fetch everything a screen needs from the store, then run the pure
calculator once. The Session is always passed in by the caller.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from .bilan import confession_info, generate_encouragement, week_start_for_day
from .checks import get_checks_for_date, get_checks_for_date_range, toggle_check
from .debug_utils import debug_log
from .engagements import get_active_engagements, get_engagement
from .errors import NotFound
from .fidelity import OverallStats, compute_overall_stats, elapsed_window
from .models import DailyCheck
from .parcours import CampaignWindow, get_campaign, to_date
from .progress import DayProgress, compute_day_progress
from .streaks import compute_streak
from .timeline import TimelineDay, build_week_timeline, week_block, week_number_for
from .weekly_stats import WeeklyEngagementStats, compute_weekly_stats, week_dates


def get_day_progress(s: Session, day: date, campaign: Optional[CampaignWindow] = None) -> DayProgress:
    engagements = get_active_engagements(s)
    checks = get_checks_for_date(s, day)
    return compute_day_progress(engagements, checks, day, campaign)


def get_overall_stats(s: Session, today: date, campaign: Optional[CampaignWindow] = None) -> OverallStats:
    campaign = campaign or get_campaign()
    window = elapsed_window(today, campaign)
    if window is None:
        return OverallStats()
    engagements = get_active_engagements(s)
    checks = get_checks_for_date_range(s, *window)
    return compute_overall_stats(engagements, checks, today, campaign)


def get_weekly_stats(s: Session, week_start: date) -> List[WeeklyEngagementStats]:
    dates = week_dates(week_start)
    engagements = get_active_engagements(s)
    checks = get_checks_for_date_range(s, dates[0], dates[-1])
    return compute_weekly_stats(engagements, checks, week_start)


def get_streak(s: Session, today: date | datetime, campaign: Optional[CampaignWindow] = None) -> int:
    campaign = campaign or get_campaign()
    today = to_date(today)
    if today is None:
        raise ValueError("get_streak needs a date")
    if today < campaign.start_date:
        return 0
    active_count = len(get_active_engagements(s))
    history = get_checks_for_date_range(s, campaign.start_date, today)
    return compute_streak(active_count, history, today, campaign)


def toggle_engagement_check(s: Session, engagement_id: str, day: date) -> DailyCheck:
    if get_engagement(s, engagement_id) is None:
        raise NotFound(f"Engagement {engagement_id} not found")
    row = toggle_check(s, engagement_id, day)
    debug_log("check toggled", {"engagement_id": engagement_id, "date": day, "checked": row.checked}, tag="checks")
    return row


def get_week_timeline(
    s: Session, today: date, campaign: Optional[CampaignWindow] = None
) -> Dict[str, Any]:
    campaign = campaign or get_campaign()
    current_day = campaign.current_day(today)
    if current_day is None:
        return {"week_number": None, "days": []}
    days = week_block(current_day, campaign)
    total_active = len(get_active_engagements(s))
    checks = get_checks_for_date_range(s, campaign.day_date(days[0]), campaign.day_date(days[-1]))
    timeline: List[TimelineDay] = build_week_timeline(total_active, checks, current_day, campaign)
    return {"week_number": week_number_for(current_day), "days": timeline}


def build_bilan(s: Session, today: date, campaign: Optional[CampaignWindow] = None) -> Dict[str, Any]:
    campaign = campaign or get_campaign()
    current_day = campaign.current_day(today)
    stats = get_overall_stats(s, today, campaign)
    if current_day is not None:
        week_start = week_start_for_day(current_day, campaign)
        weekly = get_weekly_stats(s, week_start)
    else:
        week_start = today - timedelta(days=today.weekday())
        weekly = []
    return {
        "current_day": current_day,
        "overall_stats": stats,
        "week_start": week_start,
        "weekly_stats": weekly,
        "encouragement": generate_encouragement(stats),
        "confession": confession_info(s, today),
    }
