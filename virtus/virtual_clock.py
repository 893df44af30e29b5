from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from .config import DEFAULT_TZ
from .user_settings import delete_setting, get_setting, is_truthy, set_setting

VIRTUAL_ENABLED_KEY = "virtual_enabled"
VIRTUAL_DATE_KEY = "virtual_date"


def _parse_iso_date(value: object) -> Optional[date]:
    if value is None:
        return None
    raw = str(value).strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def real_today() -> date:
    return datetime.now(DEFAULT_TZ).date()


def is_virtual_enabled(session: Session) -> bool:
    return is_truthy(get_setting(session, VIRTUAL_ENABLED_KEY))


def get_virtual_date(session: Session) -> Optional[date]:
    if not is_virtual_enabled(session):
        return None
    return _parse_iso_date(get_setting(session, VIRTUAL_DATE_KEY))


def get_effective_today(session: Session, default_today: Optional[date] = None) -> date:
    return get_virtual_date(session) or default_today or real_today()


def set_virtual_mode(
    session: Session,
    *,
    enabled: bool,
    start_date: Optional[date] = None,
    keep_existing_date: bool = True,
) -> Optional[date]:
    if not enabled:
        set_setting(session, VIRTUAL_ENABLED_KEY, "0")
        delete_setting(session, VIRTUAL_DATE_KEY)
        return None
    existing = get_virtual_date(session) if keep_existing_date else None
    set_setting(session, VIRTUAL_ENABLED_KEY, "1")
    chosen = start_date or existing or real_today()
    set_setting(session, VIRTUAL_DATE_KEY, chosen.isoformat())
    return chosen


def advance_virtual_date(session: Session, days: int = 1) -> Optional[date]:
    if not is_virtual_enabled(session):
        return None
    step = max(1, int(days))
    current = get_virtual_date(session) or real_today()
    next_date = current + timedelta(days=step)
    set_setting(session, VIRTUAL_DATE_KEY, next_date.isoformat())
    return next_date
