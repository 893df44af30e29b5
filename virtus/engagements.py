"""
Engagement store helpers. Every function takes the caller's Session; none commits
except where noted, so callers can group writes in one transaction.
"""
from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .errors import ValidationError
from .models import CATEGORIES, CATEGORY_PENANCE, Engagement


def get_all_engagements(s: Session) -> List[Engagement]:
    return list(s.scalars(select(Engagement).order_by(Engagement.sort_order.asc(), Engagement.id.asc())))


def get_active_engagements(s: Session) -> List[Engagement]:
    return list(
        s.scalars(
            select(Engagement)
            .where(Engagement.is_active.is_(True))
            .order_by(Engagement.sort_order.asc(), Engagement.id.asc())
        )
    )


def get_engagements_by_category(s: Session, category: str) -> List[Engagement]:
    if category not in CATEGORIES:
        raise ValidationError(f"Unknown category {category!r}")
    return list(
        s.scalars(
            select(Engagement)
            .where(Engagement.category == category)
            .order_by(Engagement.sort_order.asc(), Engagement.id.asc())
        )
    )


def get_engagement(s: Session, engagement_id: str) -> Optional[Engagement]:
    return s.get(Engagement, engagement_id)


def new_penance_id() -> str:
    return f"penance-{uuid.uuid4().hex[:12]}"


def insert_engagement(
    s: Session,
    *,
    category: str,
    title: str,
    sort_order: int,
    is_custom: bool = True,
    engagement_id: Optional[str] = None,
) -> Engagement:
    if category not in CATEGORIES:
        raise ValidationError(f"Unknown category {category!r}")
    row = Engagement(
        id=engagement_id or (new_penance_id() if category == CATEGORY_PENANCE else f"{category}-{uuid.uuid4().hex[:12]}"),
        category=category,
        title=title,
        is_custom=is_custom,
        is_active=True,
        sort_order=sort_order,
    )
    s.add(row)
    return row


def update_engagement_active(s: Session, engagement_id: str, is_active: bool, sort_order: Optional[int] = None) -> bool:
    row = s.get(Engagement, engagement_id)
    if row is None:
        return False
    row.is_active = bool(is_active)
    if sort_order is not None:
        row.sort_order = sort_order
    s.add(row)
    return True


def has_penance_engagements(s: Session) -> bool:
    return bool(get_engagements_by_category(s, CATEGORY_PENANCE))
