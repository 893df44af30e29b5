from __future__ import annotations

from datetime import date

import pytest

from factories import make_check, make_engagement
from virtus.weekly_stats import compute_weekly_stats, monday_of, week_dates

MONDAY = date(2026, 2, 2)


def test_week_dates_are_seven_consecutive_days():
    dates = week_dates(MONDAY)
    assert len(dates) == 7
    assert dates[0] == MONDAY
    assert dates[-1] == date(2026, 2, 8)


def test_monday_of():
    assert monday_of(date(2026, 2, 1)) == date(2026, 1, 26)
    assert monday_of(date(2026, 2, 4)) == MONDAY


def test_weekly_flags_per_engagement():
    engagements = [make_engagement("s1", "spiritual", 0), make_engagement("p1", "penance", 10)]
    checks = [
        make_check("s1", date(2026, 2, 3)),
        make_check("s1", date(2026, 2, 8)),
        make_check("p1", date(2026, 2, 3), checked=False),
        make_check("p1", date(2026, 2, 9)),  # next week
    ]
    stats = compute_weekly_stats(engagements, checks, MONDAY)
    assert [s.engagement.id for s in stats] == ["s1", "p1"]
    assert stats[0].days == (False, True, False, False, False, False, True)
    assert stats[1].days == (False,) * 7


def test_as_dict():
    stats = compute_weekly_stats([make_engagement("v1", "virtue", 5, title="Pas de grignotage")], [], MONDAY)
    out = stats[0].as_dict()
    assert out["engagement"]["title"] == "Pas de grignotage"
    assert out["days"] == [False] * 7


def test_bad_week_start():
    with pytest.raises(ValueError):
        week_dates("not-a-date")
