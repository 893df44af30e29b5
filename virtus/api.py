# virtus/api.py
# JSON API over the parcours services. No HTML rendering: the mobile/web client owns the UI.

import os
import datetime as dt
from typing import Any, List, Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from .bilan import record_confession, update_confession_goal
from .config import settings
from .content import ContentRepository
from .db import get_session, init_db
from .engagements import get_active_engagements, get_engagements_by_category
from .errors import NotFound, OutOfRange, ValidationError
from .journal import (
    entry_to_dict,
    finish_examen,
    get_entries_for_date,
    load_examen,
    save_journal_entry,
    update_journal_entry,
)
from .models import CATEGORY_PENANCE, DailyCheck, Engagement
from .parcours import format_day_label, get_campaign
from .roster import replace_penances, setup_penances
from .seed import PENANCE_OPTIONS
from .services import (
    build_bilan,
    get_day_progress,
    get_overall_stats,
    get_streak,
    get_week_timeline,
    get_weekly_stats,
    toggle_engagement_check,
)
from .user_settings import has_completed_onboarding
from .virtual_clock import advance_virtual_date, get_effective_today, get_virtual_date, set_virtual_mode

ENV = os.getenv("ENV", "development").lower()

APP_TZ = ZoneInfo(settings.TZ_DEFAULT)
APP_START_DT = dt.datetime.now(APP_TZ)

app = FastAPI(title="Virtus")
router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# Startup + error mapping
# ──────────────────────────────────────────────────────────────────────────────

@app.on_event("startup")
def on_startup():
    init_db(reset=settings.RESET_DB_ON_STARTUP)
    app.state.content = ContentRepository()
    print(f"[api] content loaded from {app.state.content.content_dir}")
    campaign = get_campaign()
    print("\n" + "═" * 72)
    print(f"🚀 Starting Virtus [{ENV.upper()}]")
    print(f"🕒 App start: {APP_START_DT.strftime('%d/%m/%y %H:%M:%S')} ({settings.TZ_DEFAULT})")
    print(f"📅 Parcours: {campaign.start_date} → {campaign.end_date} ({campaign.total_days} days)")
    print("═" * 72 + "\n")


@app.exception_handler(ValidationError)
def _on_validation_error(_request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(OutOfRange)
def _on_out_of_range(_request: Request, exc: OutOfRange):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(NotFound)
def _on_not_found(_request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


# ──────────────────────────────────────────────────────────────────────────────
# Dependencies + serialisers
# ──────────────────────────────────────────────────────────────────────────────

def get_content(request: Request) -> ContentRepository:
    repo = getattr(request.app.state, "content", None)
    if repo is None:
        repo = ContentRepository()
        request.app.state.content = repo
    return repo


def _today(s: Session, today: Optional[dt.date]) -> dt.date:
    return today or get_effective_today(s)


def _engagement(e: Engagement) -> dict[str, Any]:
    return {
        "id": e.id,
        "category": e.category,
        "title": e.title,
        "is_custom": bool(e.is_custom),
        "is_active": bool(e.is_active),
        "sort_order": e.sort_order,
    }


def _check(c: DailyCheck) -> dict[str, Any]:
    return {
        "engagement_id": c.engagement_id,
        "date": c.date.isoformat(),
        "checked": bool(c.checked),
        "checked_at": c.checked_at,
    }


class TitlesIn(BaseModel):
    titles: List[str]


class ToggleIn(BaseModel):
    engagement_id: str
    date: Optional[dt.date] = None


class JournalIn(BaseModel):
    date: dt.date
    type: str
    step: Optional[int] = None
    content: str = ""


class JournalUpdateIn(BaseModel):
    content: str = ""


class ConfessionIn(BaseModel):
    date: Optional[dt.date] = None


class ConfessionGoalIn(BaseModel):
    days: int = Field(..., description="Target number of days between confessions")


class VirtualClockIn(BaseModel):
    enabled: bool
    date: Optional[dt.date] = None


# ──────────────────────────────────────────────────────────────────────────────
# Status / parcours
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/health")
def health():
    return {"ok": True, "env": ENV}


@router.get("/parcours")
def parcours_status(today: Optional[dt.date] = None, s: Session = Depends(get_session)):
    campaign = get_campaign()
    today = _today(s, today)
    day = campaign.current_day(today)
    return {
        "today": today.isoformat(),
        "start_date": campaign.start_date.isoformat(),
        "end_date": campaign.end_date.isoformat(),
        "total_days": campaign.total_days,
        "day": day,
        "label": format_day_label(day) if day else None,
        "period": campaign.current_period(day).name if day else None,
        "is_before": campaign.is_before(today),
        "is_after": campaign.is_after(today),
        "days_until_start": campaign.days_until_start(today),
        "days_remaining": campaign.days_remaining(today),
        "progress": campaign.progress_fraction(today),
        "onboarding_completed": has_completed_onboarding(s),
    }


@router.get("/parcours/days/{day}")
def parcours_day(day: int):
    campaign = get_campaign()
    period = campaign.current_period(day)
    return {
        "day": day,
        "label": format_day_label(day),
        "date": campaign.day_date(day).isoformat(),
        "period": {
            "name": period.name,
            "start_day": period.start_day,
            "end_day": period.end_day,
            "start_date": period.start_date.isoformat(),
            "end_date": period.end_date.isoformat(),
        },
    }


# ──────────────────────────────────────────────────────────────────────────────
# Engagements + checks
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/engagements")
def list_engagements(category: Optional[str] = None, s: Session = Depends(get_session)):
    rows = get_engagements_by_category(s, category) if category else get_active_engagements(s)
    return [_engagement(e) for e in rows]


@router.post("/checks/toggle")
def toggle(payload: ToggleIn, s: Session = Depends(get_session)):
    row = toggle_engagement_check(s, payload.engagement_id, _today(s, payload.date))
    return _check(row)


@router.get("/progress/day")
def day_progress(on: Optional[dt.date] = Query(None, alias="date"), s: Session = Depends(get_session)):
    return get_day_progress(s, _today(s, on)).as_dict()


@router.get("/stats/streak")
def streak(today: Optional[dt.date] = None, s: Session = Depends(get_session)):
    return {"streak": get_streak(s, _today(s, today))}


@router.get("/stats/overall")
def overall(today: Optional[dt.date] = None, s: Session = Depends(get_session)):
    return get_overall_stats(s, _today(s, today)).as_dict()


@router.get("/stats/weekly")
def weekly(week_start: dt.date, s: Session = Depends(get_session)):
    return [w.as_dict() for w in get_weekly_stats(s, week_start)]


@router.get("/timeline")
def timeline(today: Optional[dt.date] = None, s: Session = Depends(get_session)):
    data = get_week_timeline(s, _today(s, today))
    return {"week_number": data["week_number"], "days": [d.as_dict() for d in data["days"]]}


@router.get("/bilan")
def bilan(today: Optional[dt.date] = None, s: Session = Depends(get_session)):
    data = build_bilan(s, _today(s, today))
    return {
        "current_day": data["current_day"],
        "overall_stats": data["overall_stats"].as_dict(),
        "week_start": data["week_start"].isoformat(),
        "weekly_stats": [w.as_dict() for w in data["weekly_stats"]],
        "encouragement": data["encouragement"],
        "confession": data["confession"].as_dict(),
    }


@router.post("/bilan/confession")
def confession(payload: ConfessionIn, today: Optional[dt.date] = None, s: Session = Depends(get_session)):
    return record_confession(s, _today(s, today), payload.date).as_dict()


@router.put("/bilan/confession-goal")
def confession_goal(payload: ConfessionGoalIn, today: Optional[dt.date] = None, s: Session = Depends(get_session)):
    return update_confession_goal(s, _today(s, today), payload.days).as_dict()


# ──────────────────────────────────────────────────────────────────────────────
# Penance roster
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/penances/options")
def penance_options():
    return {"options": PENANCE_OPTIONS, "required": 5}


@router.post("/penances/setup", status_code=201)
def penances_setup(payload: TitlesIn, s: Session = Depends(get_session)):
    return [_engagement(e) for e in setup_penances(s, payload.titles)]


@router.put("/penances")
def penances_replace(payload: TitlesIn, s: Session = Depends(get_session)):
    replace_penances(s, payload.titles)
    return [_engagement(e) for e in get_engagements_by_category(s, CATEGORY_PENANCE)]


# ──────────────────────────────────────────────────────────────────────────────
# Journal / examen
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/journal/{on}")
def journal_for_date(on: dt.date, s: Session = Depends(get_session)):
    return [entry_to_dict(e) for e in get_entries_for_date(s, on)]


@router.post("/journal")
def journal_save(payload: JournalIn, s: Session = Depends(get_session)):
    row = save_journal_entry(s, payload.date, payload.type, payload.content, step=payload.step)
    return entry_to_dict(row)


@router.patch("/journal/entries/{entry_id}")
def journal_update(entry_id: str, payload: JournalUpdateIn, s: Session = Depends(get_session)):
    return entry_to_dict(update_journal_entry(s, entry_id, payload.content))


@router.get("/examen/{on}")
def examen_load(on: dt.date, s: Session = Depends(get_session)):
    return load_examen(s, on)


@router.post("/examen/{on}/finish")
def examen_finish(on: dt.date, s: Session = Depends(get_session)):
    row = finish_examen(s, on)
    return {"checked": _check(row) if row else None}


# ──────────────────────────────────────────────────────────────────────────────
# Daily content
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/content/formation/{day}")
def formation(day: int, content: ContentRepository = Depends(get_content)):
    get_campaign().day_date(day)  # OutOfRange → 400
    item = content.get_formation(day)
    if item is None:
        raise HTTPException(404, f"No formation for day {day}")
    return item.as_dict()


@router.get("/content/exhortation/{day}")
def exhortation(day: int, content: ContentRepository = Depends(get_content)):
    get_campaign().day_date(day)
    item = content.get_exhortation(day)
    if item is None:
        raise HTTPException(404, f"No exhortation for day {day}")
    return item.as_dict()


# ──────────────────────────────────────────────────────────────────────────────
# Virtual clock (preview the parcours outside its dates)
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/clock")
def clock(s: Session = Depends(get_session)):
    vdate = get_virtual_date(s)
    return {"virtual": vdate is not None, "today": get_effective_today(s).isoformat()}


@router.put("/clock")
def clock_set(payload: VirtualClockIn, s: Session = Depends(get_session)):
    chosen = set_virtual_mode(s, enabled=payload.enabled, start_date=payload.date, keep_existing_date=False)
    s.commit()
    return {"virtual": chosen is not None, "today": get_effective_today(s).isoformat()}


@router.post("/clock/advance")
def clock_advance(days: int = 1, s: Session = Depends(get_session)):
    next_date = advance_virtual_date(s, days=days)
    if next_date is None:
        raise HTTPException(409, "Virtual clock is disabled")
    s.commit()
    return {"virtual": True, "today": next_date.isoformat()}


app.include_router(router)
