"""
Penance roster: exactly five penance engagements.

setup_penances() runs once during onboarding; replace_penances() reconciles a
new selection against the stored rows by title. Rows that may be referenced
by check history are deactivated, never deleted. Both operations validate
everything before touching the session and commit (or roll back) as a unit.
"""
from __future__ import annotations

from typing import Iterable, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .debug_utils import debug_log
from .engagements import get_engagements_by_category, insert_engagement
from .errors import ValidationError
from .models import CATEGORY_PENANCE, Engagement
from .user_settings import has_completed_onboarding, set_onboarding_completed

ROSTER_SIZE = 5


def normalize_titles(titles: Iterable[str]) -> List[str]:
    """Trim every title and enforce the roster rules; raises ValidationError."""
    if isinstance(titles, str):
        raise ValidationError("Penance titles must be a list, not a single string")
    raw = list(titles)
    if len(raw) != ROSTER_SIZE:
        raise ValidationError(f"Expected exactly {ROSTER_SIZE} penance engagements, got {len(raw)}")
    cleaned = [str(t if t is not None else "").strip() for t in raw]
    if any(not t for t in cleaned):
        raise ValidationError("Penance engagement titles cannot be empty")
    if len(set(cleaned)) != len(cleaned):
        raise ValidationError("Penance engagement titles must be distinct")
    return cleaned


def penance_base_order(s: Session) -> int:
    """First sort order after the fixed (non-custom) engagements."""
    top = s.execute(
        select(func.max(Engagement.sort_order)).where(Engagement.is_custom.is_(False))
    ).scalar()
    return 0 if top is None else int(top) + 1


def setup_penances(s: Session, titles: Iterable[str]) -> List[Engagement]:
    """First-time roster creation; once a roster exists, changes go through replace_penances()."""
    cleaned = normalize_titles(titles)
    if has_completed_onboarding(s) or any(e.is_active for e in get_engagements_by_category(s, CATEGORY_PENANCE)):
        raise ValidationError("Penance engagements are already set up; use replace instead")
    base = penance_base_order(s)
    try:
        rows = [
            insert_engagement(s, category=CATEGORY_PENANCE, title=title, sort_order=base + idx, is_custom=True)
            for idx, title in enumerate(cleaned)
        ]
        set_onboarding_completed(s)
        s.commit()
    except Exception:
        s.rollback()
        raise
    print(f"[roster] onboarding penances created: {len(rows)}")
    return rows


def replace_penances(s: Session, titles: Iterable[str]) -> List[Engagement]:
    """
    Reconcile by exact (trimmed) title:
    - existing title in the selection → reactivated and re-sequenced
    - existing title not selected     → deactivated
    - new title                       → inserted
    Returns the active roster in selection order.
    """
    cleaned = normalize_titles(titles)
    base = penance_base_order(s)
    try:
        existing = get_engagements_by_category(s, CATEGORY_PENANCE)
        by_title: dict[str, Engagement] = {}
        for row in existing:
            # keep the first row per title; later duplicates (legacy data) get deactivated below
            by_title.setdefault(row.title.strip(), row)

        roster: List[Engagement] = []
        kept_ids: set[str] = set()
        for idx, title in enumerate(cleaned):
            row = by_title.get(title)
            if row is not None:
                row.is_active = True
                row.sort_order = base + idx
                s.add(row)
            else:
                row = insert_engagement(
                    s, category=CATEGORY_PENANCE, title=title, sort_order=base + idx, is_custom=True
                )
            kept_ids.add(row.id)
            roster.append(row)

        deactivated = 0
        for row in existing:
            if row.id not in kept_ids and row.is_active:
                row.is_active = False
                s.add(row)
                deactivated += 1
        s.commit()
    except Exception:
        s.rollback()
        raise
    debug_log(
        "penances replaced",
        {"active": [r.title for r in roster], "deactivated": deactivated},
        tag="roster",
    )
    return roster
