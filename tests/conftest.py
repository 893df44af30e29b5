"""Shared fixtures: in-memory SQLite database seeded with the fixed engagements."""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from virtus.models import Base
from virtus.parcours import build_campaign
from virtus.seed import seed_fixed_engagements

PARCOURS_2026_START = date(2026, 2, 1)
PARCOURS_2025_START = date(2025, 2, 16)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def session(session_factory):
    s = session_factory()
    seed_fixed_engagements(s)
    yield s
    s.close()


@pytest.fixture
def campaign():
    return build_campaign(PARCOURS_2026_START)


@pytest.fixture
def campaign_2025():
    return build_campaign(PARCOURS_2025_START)
