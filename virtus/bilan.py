"""
Bilan (weekly review) helpers: encouragement message, confession tracking,
and the Monday-based week shown in the heatmap.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from .config import settings
from .errors import ValidationError
from .fidelity import OverallStats
from .parcours import CampaignWindow, get_campaign, to_date
from .user_settings import get_setting, set_setting

LAST_CONFESSION_KEY = "last_confession_date"
CONFESSION_GOAL_KEY = "confession_goal_days"

# (long label, short label, OverallStats field)
_AREAS = [
    ("la prière", "prière", "spiritual"),
    ("la vertu", "vertu", "virtue"),
    ("la pénitence", "pénitence", "penance"),
]


def generate_encouragement(stats: OverallStats) -> Dict[str, str]:
    values = [(name, short, getattr(stats, field)) for name, short, field in _AREAS]
    average = int(math.floor(sum(v for _, _, v in values) / 3 + 0.5))

    ranked = sorted(values, key=lambda item: item[2], reverse=True)
    strongest, weakest = ranked[0], ranked[-1]

    if average >= 80:
        return {
            "emoji": "🌟",
            "message": "Magnifique fidélité ! Tu tiens bon sur tous les fronts. Continue ainsi, la grâce opère en toi.",
        }
    if average >= 60:
        if strongest[2] >= 70 and weakest[2] < 50:
            short = weakest[1][:1].upper() + weakest[1][1:]
            return {
                "emoji": "💪",
                "message": f"Tu es solide sur {strongest[0]} ! {short} demande un effort supplémentaire cette semaine.",
            }
        return {
            "emoji": "👍",
            "message": f"Tu avances bien. Persévère dans {weakest[0]}, c'est là que se joue ta conversion.",
        }
    if average >= 40:
        return {
            "emoji": "🙏",
            "message": f"Le chemin est exigeant, mais chaque effort compte. Appuie-toi sur {strongest[0]} pour progresser.",
        }
    if average >= 20:
        return {
            "emoji": "💖",
            "message": "Ne te décourage pas. Recommence chaque jour avec confiance. Dieu regarde le cœur.",
        }
    # very low or just starting
    return {
        "emoji": "🌱",
        "message": "C'est le début du chemin. Choisis un engagement simple et tiens-le aujourd'hui.",
    }


# ──────────────────────────────────────────────────────────────────────────────
# Confession tracking
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ConfessionInfo:
    last_date: Optional[date]
    days_since: Optional[int]
    goal_days: int
    days_until_goal: Optional[int]
    is_overdue: bool

    def as_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["last_date"] = self.last_date.isoformat() if self.last_date else None
        return out


def confession_goal(s: Session) -> int:
    raw = get_setting(s, CONFESSION_GOAL_KEY)
    try:
        goal = int(raw) if raw is not None else settings.CONFESSION_GOAL_DAYS
    except ValueError:
        goal = settings.CONFESSION_GOAL_DAYS
    return goal if goal > 0 else settings.CONFESSION_GOAL_DAYS


def confession_info(s: Session, today: date) -> ConfessionInfo:
    goal = confession_goal(s)
    last = to_date(get_setting(s, LAST_CONFESSION_KEY))
    if last is None:
        return ConfessionInfo(last_date=None, days_since=None, goal_days=goal, days_until_goal=None, is_overdue=False)
    days_since = (today - last).days
    days_until_goal = goal - days_since
    return ConfessionInfo(
        last_date=last,
        days_since=days_since,
        goal_days=goal,
        days_until_goal=days_until_goal,
        is_overdue=days_until_goal < 0,
    )


def record_confession(s: Session, today: date, confession_date: Optional[date] = None) -> ConfessionInfo:
    chosen = confession_date or today
    if chosen > today:
        raise ValidationError("Confession date cannot be in the future")
    set_setting(s, LAST_CONFESSION_KEY, chosen.isoformat())
    s.commit()
    return confession_info(s, today)


def update_confession_goal(s: Session, today: date, days: int) -> ConfessionInfo:
    try:
        goal = int(days)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Confession goal must be a whole number of days, got {days!r}") from exc
    if goal <= 0:
        raise ValidationError(f"Confession goal must be positive, got {goal}")
    set_setting(s, CONFESSION_GOAL_KEY, str(goal))
    s.commit()
    return confession_info(s, today)


def week_start_for_day(day: int, campaign: Optional[CampaignWindow] = None) -> date:
    """Monday of the calendar week containing parcours day `day`."""
    campaign = campaign or get_campaign()
    day_date = campaign.day_date(day)
    return day_date - timedelta(days=day_date.weekday())
