from __future__ import annotations

from datetime import date

from virtus.user_settings import get_setting, has_completed_onboarding, set_onboarding_completed, set_setting
from virtus.virtual_clock import (
    advance_virtual_date,
    get_effective_today,
    get_virtual_date,
    is_virtual_enabled,
    set_virtual_mode,
)


def test_settings_round_trip(session):
    assert get_setting(session, "x") is None
    set_setting(session, "x", "1")
    set_setting(session, "x", "2")
    session.commit()
    assert get_setting(session, "x") == "2"


def test_onboarding_flag(session):
    assert not has_completed_onboarding(session)
    set_onboarding_completed(session)
    assert has_completed_onboarding(session)


def test_real_clock_by_default(session):
    assert not is_virtual_enabled(session)
    assert get_virtual_date(session) is None
    assert get_effective_today(session, default_today=date(2026, 2, 5)) == date(2026, 2, 5)


def test_virtual_clock_set_and_advance(session):
    chosen = set_virtual_mode(session, enabled=True, start_date=date(2026, 3, 1))
    assert chosen == date(2026, 3, 1)
    assert get_effective_today(session) == date(2026, 3, 1)
    assert advance_virtual_date(session, days=3) == date(2026, 3, 4)
    # keeps the running date when re-enabled without an explicit one
    assert set_virtual_mode(session, enabled=True) == date(2026, 3, 4)


def test_disable_clears_date(session):
    set_virtual_mode(session, enabled=True, start_date=date(2026, 3, 1))
    assert set_virtual_mode(session, enabled=False) is None
    assert get_virtual_date(session) is None
    assert advance_virtual_date(session) is None
