from __future__ import annotations

from datetime import date

import pytest

from virtus.bilan import (
    confession_info,
    generate_encouragement,
    record_confession,
    update_confession_goal,
    week_start_for_day,
)
from virtus.config import settings
from virtus.errors import ValidationError
from virtus.fidelity import OverallStats

TODAY = date(2026, 3, 10)


@pytest.mark.parametrize(
    "stats,emoji",
    [
        (OverallStats(90, 85, 80), "🌟"),
        (OverallStats(80, 70, 40), "💪"),
        (OverallStats(60, 60, 60), "👍"),
        (OverallStats(50, 40, 40), "🙏"),
        (OverallStats(20, 20, 20), "💖"),
        (OverallStats(0, 0, 0), "🌱"),
    ],
)
def test_encouragement_tiers(stats, emoji):
    assert generate_encouragement(stats)["emoji"] == emoji


def test_encouragement_names_strongest_and_weakest():
    msg = generate_encouragement(OverallStats(spiritual=80, virtue=70, penance=40))["message"]
    assert "la prière" in msg
    assert "Pénitence demande un effort" in msg


def test_no_confession_recorded(session):
    info = confession_info(session, TODAY)
    assert info.last_date is None
    assert info.days_since is None
    assert info.goal_days == settings.CONFESSION_GOAL_DAYS
    assert not info.is_overdue


def test_record_confession(session):
    info = record_confession(session, TODAY, date(2026, 2, 20))
    assert info.last_date == date(2026, 2, 20)
    assert info.days_since == 18
    assert info.days_until_goal == settings.CONFESSION_GOAL_DAYS - 18
    assert info.is_overdue == (settings.CONFESSION_GOAL_DAYS < 18)
    assert info.as_dict()["last_date"] == "2026-02-20"


def test_record_confession_defaults_to_today(session):
    info = record_confession(session, TODAY)
    assert info.days_since == 0
    assert not info.is_overdue


def test_future_confession_rejected(session):
    with pytest.raises(ValidationError):
        record_confession(session, TODAY, date(2026, 3, 11))


def test_update_goal(session):
    record_confession(session, TODAY, date(2026, 3, 1))
    info = update_confession_goal(session, TODAY, 7)
    assert info.goal_days == 7
    assert info.days_until_goal == -2
    assert info.is_overdue


@pytest.mark.parametrize("days", [0, -3, "abc"])
def test_invalid_goal(session, days):
    with pytest.raises(ValidationError):
        update_confession_goal(session, TODAY, days)


def test_week_start_for_day(campaign, campaign_2025):
    # 2026-02-01 is a Sunday
    assert week_start_for_day(1, campaign) == date(2026, 1, 26)
    assert week_start_for_day(2, campaign) == date(2026, 2, 2)
    assert week_start_for_day(18, campaign_2025) == date(2025, 3, 3)
