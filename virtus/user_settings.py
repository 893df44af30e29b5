from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from .models import UserSetting

ONBOARDING_KEY = "onboarding_completed"
_TRUE_VALUES = {"1", "true", "yes", "on"}


def get_setting(session: Session, key: str) -> Optional[str]:
    row = session.get(UserSetting, key)
    return row.value if row else None


def set_setting(session: Session, key: str, value: str) -> None:
    row = session.get(UserSetting, key)
    if row:
        row.value = value
        session.add(row)
        return
    session.add(UserSetting(key=key, value=value))
    # sessions run with autoflush off; make the new key visible to session.get()
    session.flush()


def delete_setting(session: Session, key: str) -> None:
    row = session.get(UserSetting, key)
    if row:
        session.delete(row)
        session.flush()


def is_truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUE_VALUES


def has_completed_onboarding(session: Session) -> bool:
    return is_truthy(get_setting(session, ONBOARDING_KEY))


def set_onboarding_completed(session: Session) -> None:
    set_setting(session, ONBOARDING_KEY, "true")
