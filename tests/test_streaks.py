from __future__ import annotations

from datetime import date, timedelta

from factories import make_check
from virtus.streaks import completed_counts, compute_streak

START = date(2026, 2, 1)


def full_days(ids, first, count):
    return [make_check(eid, first + timedelta(days=i)) for i in range(count) for eid in ids]


def test_consecutive_complete_days(campaign):
    history = full_days(["a", "b", "c"], START, 3)
    assert compute_streak(3, history, START + timedelta(days=2), campaign) == 3


def test_incomplete_today_breaks_streak(campaign):
    history = full_days(["a", "b", "c"], START, 3) + [make_check("a", START + timedelta(days=3))]
    assert compute_streak(3, history, START + timedelta(days=3), campaign) == 0


def test_gap_stops_the_walk(campaign):
    history = full_days(["a", "b"], START, 2) + full_days(["a", "b"], START + timedelta(days=3), 2)
    assert compute_streak(2, history, START + timedelta(days=4), campaign) == 2


def test_more_checks_than_active_still_complete(campaign):
    # an engagement deactivated after being checked still counts that day
    history = full_days(["a", "b", "retired"], START, 2)
    assert compute_streak(2, history, START + timedelta(days=1), campaign) == 2


def test_zero_active_engagements(campaign):
    assert compute_streak(0, full_days(["a"], START, 5), START + timedelta(days=4), campaign) == 0


def test_before_campaign(campaign):
    assert compute_streak(1, [], date(2026, 1, 20), campaign) == 0


def test_checks_before_start_are_ignored(campaign):
    history = full_days(["a"], START - timedelta(days=5), 6)
    assert compute_streak(1, history, START, campaign) == 1


def test_duplicate_and_unchecked_rows_do_not_count():
    history = [make_check("a", START), make_check("a", START), make_check("b", START, checked=False)]
    assert completed_counts(history, START, START) == {START: 1}
