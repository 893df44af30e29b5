"""Lightweight stand-ins for engagement and check rows, for the pure calculators."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace


def make_engagement(eid: str, category: str, sort_order: int = 0, title: str | None = None):
    return SimpleNamespace(id=eid, category=category, title=title or eid, sort_order=sort_order, is_active=True)


def make_check(eid: str, day: date, checked: bool = True):
    return SimpleNamespace(engagement_id=eid, date=day, checked=checked)
