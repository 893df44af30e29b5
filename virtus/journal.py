"""
Helpers to record and fetch journal entries (examen steps, graces, notes).
One entry per (date, type, step): saving again replaces the content.
"""
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .checks import get_check, set_check
from .engagements import get_active_engagements
from .errors import NotFound, ValidationError
from .models import (
    EXAMEN_STEPS,
    JOURNAL_EXAMEN,
    JOURNAL_GRACES,
    JOURNAL_TYPES,
    DailyCheck,
    JournalEntry,
)

EXAMEN_KEYWORD = "examen"


def _validate(entry_type: str, step: Optional[int]) -> None:
    if entry_type not in JOURNAL_TYPES:
        raise ValidationError(f"Unknown journal type {entry_type!r}")
    if entry_type == JOURNAL_EXAMEN:
        if step is None or not 1 <= int(step) <= EXAMEN_STEPS:
            raise ValidationError(f"Examen entries need a step between 1 and {EXAMEN_STEPS}")
    elif step is not None:
        raise ValidationError(f"{entry_type} entries do not take a step")


def find_entry(s: Session, day: date, entry_type: str, step: Optional[int]) -> Optional[JournalEntry]:
    q = select(JournalEntry).where(JournalEntry.date == day, JournalEntry.type == entry_type)
    q = q.where(JournalEntry.step.is_(None)) if step is None else q.where(JournalEntry.step == step)
    return s.scalars(q.order_by(JournalEntry.updated_at.desc())).first()


def save_journal_entry(
    s: Session,
    day: date,
    entry_type: str,
    content: str,
    step: Optional[int] = None,
) -> JournalEntry:
    """
    Persist an entry and return it.
    An existing (date, type, step) entry is updated in place; otherwise a new one is created.
    """
    _validate(entry_type, step)
    now = datetime.utcnow()
    row = find_entry(s, day, entry_type, step)
    if row is None:
        row = JournalEntry(
            id=str(uuid.uuid4()),
            date=day,
            type=entry_type,
            step=step,
            content=content or "",
            created_at=now,
            updated_at=now,
        )
    else:
        row.content = content or ""
        row.updated_at = now
    s.add(row)
    s.commit()
    return row


def update_journal_entry(s: Session, entry_id: str, content: str) -> JournalEntry:
    row = s.get(JournalEntry, entry_id)
    if row is None:
        raise NotFound(f"Journal entry with id {entry_id} not found")
    row.content = content or ""
    row.updated_at = datetime.utcnow()
    s.add(row)
    s.commit()
    return row


def get_entries_for_date(s: Session, day: date) -> List[JournalEntry]:
    return list(
        s.scalars(select(JournalEntry).where(JournalEntry.date == day).order_by(JournalEntry.created_at.asc()))
    )


def get_examen_for_date(s: Session, day: date) -> List[JournalEntry]:
    return list(
        s.scalars(
            select(JournalEntry)
            .where(JournalEntry.date == day, JournalEntry.type == JOURNAL_EXAMEN)
            .order_by(JournalEntry.step.asc(), JournalEntry.created_at.asc())
        )
    )


def load_examen(s: Session, day: date) -> Dict[str, Any]:
    """Step contents 1..5 (empty string when missing) plus the graces text."""
    steps = {i: "" for i in range(1, EXAMEN_STEPS + 1)}
    graces = ""
    for entry in get_entries_for_date(s, day):
        if entry.type == JOURNAL_EXAMEN and entry.step in steps:
            steps[entry.step] = entry.content or ""
        elif entry.type == JOURNAL_GRACES:
            graces = entry.content or ""
    return {"date": day.isoformat(), "steps": steps, "graces": graces}


def finish_examen(s: Session, day: date) -> Optional[DailyCheck]:
    """Mark the "Examen de conscience" engagement as done for the day (idempotent)."""
    examen = next(
        (e for e in get_active_engagements(s) if EXAMEN_KEYWORD in (e.title or "").lower()),
        None,
    )
    if examen is None:
        return None
    existing = get_check(s, examen.id, day)
    if existing is not None and existing.checked:
        return existing
    return set_check(s, examen.id, day, True)


def entry_to_dict(entry: JournalEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "date": entry.date.isoformat(),
        "type": entry.type,
        "step": entry.step,
        "content": entry.content or "",
        "created_at": entry.created_at,
        "updated_at": entry.updated_at,
    }
