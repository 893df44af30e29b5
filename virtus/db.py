# virtus/db.py
from __future__ import annotations
import os
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import settings

# ──────────────────────────────────────────────────────────────────────────────
# DATABASE URL
# ──────────────────────────────────────────────────────────────────────────────

# Prefer env var; fall back to config.py (which defaults to a local SQLite file).
DATABASE_URL = os.getenv("DATABASE_URL") or settings.DATABASE_URL

# ──────────────────────────────────────────────────────────────────────────────
# SQLAlchemy engine/session
# ──────────────────────────────────────────────────────────────────────────────
def make_engine(url: str, **kwargs):
    if url.startswith("sqlite"):
        # FastAPI serves sync routes from a threadpool
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, future=True, **kwargs)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ──────────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────────
def get_session() -> Iterator[Session]:
    """FastAPI dependency: one session per request, always closed."""
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()

def init_db(bind=None, reset: bool = False) -> None:
    """
    One‑shot initializer to call at app startup:
      1) (optionally) drop everything,
      2) create tables,
      3) seed fixed engagements if missing.
    """
    # Import here to avoid circular import at module import time
    from .models import Base
    from .seed import seed_fixed_engagements

    bind = bind or engine
    if reset:
        print("[db] RESET: dropping all tables")
        Base.metadata.drop_all(bind=bind)

    # 1) Create all tables
    Base.metadata.create_all(bind=bind)

    # 2) Fixed engagements (idempotent)
    with Session(bind=bind) as s:
        seed_fixed_engagements(s)
