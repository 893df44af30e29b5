from __future__ import annotations

from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Text, Date, DateTime, Boolean, ForeignKey,
    UniqueConstraint, Index, text
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# Shared labels so seeds/services/API stay in sync
CATEGORY_SPIRITUAL = "spiritual"
CATEGORY_VIRTUE = "virtue"
CATEGORY_PENANCE = "penance"
CATEGORIES = (CATEGORY_SPIRITUAL, CATEGORY_VIRTUE, CATEGORY_PENANCE)

JOURNAL_EXAMEN = "examen"
JOURNAL_GRACES = "graces"
JOURNAL_NOTES = "notes"
JOURNAL_TYPES = (JOURNAL_EXAMEN, JOURNAL_GRACES, JOURNAL_NOTES)
EXAMEN_STEPS = 5

# ──────────────────────────────────────────────────────────────────────────────
# Engagements + daily checks
# ──────────────────────────────────────────────────────────────────────────────
class Engagement(Base):
    __tablename__ = "engagements"
    id         = Column(String(64), primary_key=True)            # e.g. "spiritual-1", "penance-3f2a..."
    category   = Column(String(16), nullable=False, index=True)  # spiritual | virtue | penance
    title      = Column(String(200), nullable=False)
    is_custom  = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    is_active  = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    sort_order = Column(Integer, nullable=False, default=0, server_default=text("0"))

    checks     = relationship("DailyCheck", back_populates="engagement")

    def __repr__(self) -> str:
        return f"<Engagement {self.id} {self.category} {self.title!r} active={self.is_active}>"


class DailyCheck(Base):
    __tablename__ = "daily_checks"
    id            = Column(String(96), primary_key=True)             # "<engagement_id>-<YYYY-MM-DD>"
    engagement_id = Column(String(64), ForeignKey("engagements.id", ondelete="RESTRICT"), nullable=False, index=True)
    date          = Column(Date, nullable=False, index=True)
    checked       = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    checked_at    = Column(DateTime, nullable=True)

    engagement    = relationship("Engagement", back_populates="checks")

    __table_args__ = (
        UniqueConstraint("engagement_id", "date", name="uq_daily_checks_engagement_date"),
    )

    def __repr__(self) -> str:
        return f"<DailyCheck {self.engagement_id} {self.date} checked={self.checked}>"

# ──────────────────────────────────────────────────────────────────────────────
# Journal (examen steps 1-5, graces, free notes)
# ──────────────────────────────────────────────────────────────────────────────

class JournalEntry(Base):
    __tablename__ = "journal_entries"
    id         = Column(String(36), primary_key=True)
    date       = Column(Date, nullable=False, index=True)
    type       = Column(String(16), nullable=False, index=True)   # examen | graces | notes
    step       = Column(Integer, nullable=True)                   # 1..5 for examen, NULL otherwise
    content    = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_journal_entries_date_type_step", "date", "type", "step"),
    )

# ──────────────────────────────────────────────────────────────────────────────
# Key/value user settings (onboarding flag, confession tracking, virtual clock)
# ──────────────────────────────────────────────────────────────────────────────

class UserSetting(Base):
    __tablename__ = "user_settings"
    key        = Column(String(64), primary_key=True)
    value      = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
