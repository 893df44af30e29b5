"""
Helpers to record and fetch daily checks. One row per (engagement_id, date);
no row means "unchecked".
"""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .models import DailyCheck


def check_id(engagement_id: str, day: date) -> str:
    return f"{engagement_id}-{day.isoformat()}"


def get_check(s: Session, engagement_id: str, day: date) -> Optional[DailyCheck]:
    return s.scalars(
        select(DailyCheck).where(DailyCheck.engagement_id == engagement_id, DailyCheck.date == day)
    ).first()


def get_checks_for_date(s: Session, day: date) -> List[DailyCheck]:
    return list(s.scalars(select(DailyCheck).where(DailyCheck.date == day)))


def get_checks_for_date_range(s: Session, start: date, end: date) -> List[DailyCheck]:
    """Inclusive on both ends, oldest first."""
    return list(
        s.scalars(
            select(DailyCheck)
            .where(DailyCheck.date >= start, DailyCheck.date <= end)
            .order_by(DailyCheck.date.asc(), DailyCheck.engagement_id.asc())
        )
    )


def _apply(row: DailyCheck, checked: bool, now: Optional[datetime]) -> None:
    row.checked = bool(checked)
    row.checked_at = (now or datetime.utcnow()) if checked else None


def set_check(s: Session, engagement_id: str, day: date, checked: bool, now: Optional[datetime] = None) -> DailyCheck:
    """Force a check state (creating the row if needed) and commit."""
    row = get_check(s, engagement_id, day)
    if row is None:
        row = DailyCheck(id=check_id(engagement_id, day), engagement_id=engagement_id, date=day)
    _apply(row, checked, now)
    s.add(row)
    try:
        s.commit()
    except IntegrityError:
        # another writer inserted the same (engagement, date) first: update its row instead
        s.rollback()
        row = get_check(s, engagement_id, day)
        if row is None:
            raise
        _apply(row, checked, now)
        s.add(row)
        s.commit()
    return row


def toggle_check(s: Session, engagement_id: str, day: date, now: Optional[datetime] = None) -> DailyCheck:
    """Flip the check for (engagement, day) and commit; a missing row becomes checked."""
    row = get_check(s, engagement_id, day)
    new_state = True if row is None else not row.checked
    return set_check(s, engagement_id, day, new_state, now=now)
