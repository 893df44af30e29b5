# virtus/seed.py
# • Seeds the 10 fixed engagements (5 spiritual + 5 virtue) once.
# • Lists the suggested penance options shown during onboarding.

from __future__ import annotations

from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models import CATEGORY_SPIRITUAL, CATEGORY_VIRTUE, Engagement

# (id, category, title); sort order follows list position
FIXED_ENGAGEMENTS: List[Tuple[str, str, str]] = [
    ("spiritual-1", CATEGORY_SPIRITUAL, "Chapelet"),
    ("spiritual-2", CATEGORY_SPIRITUAL, "Oraison (30 min)"),
    ("spiritual-3", CATEGORY_SPIRITUAL, "Formation du jour"),
    ("spiritual-4", CATEGORY_SPIRITUAL, "Examen de conscience"),
    ("spiritual-5", CATEGORY_SPIRITUAL, "Messe/Adoration (sem.)"),
    ("virtue-1",    CATEGORY_VIRTUE,    "Pas d'écrans inutiles"),
    ("virtue-2",    CATEGORY_VIRTUE,    "7h de sommeil"),
    ("virtue-3",    CATEGORY_VIRTUE,    "Activité physique (2h/sem.)"),
    ("virtue-4",    CATEGORY_VIRTUE,    "Pas de grignotage"),
    ("virtue-5",    CATEGORY_VIRTUE,    "Service (1h/sem.)"),
]

PENANCE_OPTIONS: List[str] = [
    "Pas d'alcool",
    "Jeûne le vendredi",
    "Douche froide",
    "Pas de viande",
    "Pas de sucre ajouté",
    "Dormir par terre 1x/semaine",
    "Pas de musique profane",
    "Se lever à 6h",
    "Pas de snacks/gourmandises",
    "Pas de café/thé",
]


def seed_fixed_engagements(s: Session) -> int:
    """
    Insert the fixed engagements if none exist yet. Returns the number inserted.
    Never touches penance (custom) rows.
    """
    existing = s.execute(
        select(func.count()).select_from(Engagement).where(Engagement.is_custom.is_(False))
    ).scalar_one()
    if existing:
        return 0

    for order, (eid, category, title) in enumerate(FIXED_ENGAGEMENTS):
        s.add(Engagement(
            id=eid,
            category=category,
            title=title,
            is_custom=False,
            is_active=True,
            sort_order=order,
        ))
    s.commit()
    print(f"[seed] inserted {len(FIXED_ENGAGEMENTS)} fixed engagements")
    return len(FIXED_ENGAGEMENTS)
