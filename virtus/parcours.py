"""
Parcours calendar: maps calendar dates to 1-based campaign days and named periods.

All helpers normalise their input to a date-only value first, so the time of
day (and the timezone of an aware datetime, converted to UTC) never changes
the day index.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from .errors import OutOfRange

TOTAL_DAYS = 70

# (name, first day, last day); day ranges are relative to the start date
PERIOD_SEQUENCE: list[tuple[str, int, int]] = [
    ("Pré-Carême", 1, 17),
    ("Carême", 18, 63),
    ("Octave de Pâques", 64, 70),
]


def to_date(value: Any) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def _require_date(value: Any) -> date:
    day_value = to_date(value)
    if day_value is None:
        raise ValueError(f"Not a date: {value!r}")
    return day_value


@dataclass(frozen=True)
class Period:
    name: str
    start_day: int
    end_day: int
    start_date: date
    end_date: date

    def contains(self, day: int) -> bool:
        return self.start_day <= day <= self.end_day


@dataclass(frozen=True)
class CampaignWindow:
    start_date: date
    end_date: date
    total_days: int
    periods: tuple[Period, ...]

    def __post_init__(self) -> None:
        if self.total_days <= 0:
            raise ValueError("total_days must be positive")
        if (self.end_date - self.start_date).days + 1 != self.total_days:
            raise ValueError(
                f"{self.start_date}..{self.end_date} does not span {self.total_days} days"
            )
        if not self.periods:
            raise ValueError("at least one period is required")
        expected = 1
        for period in self.periods:
            if period.start_day != expected or period.end_day < period.start_day:
                raise ValueError(f"period {period.name!r} breaks contiguity at day {expected}")
            if period.start_date != self.start_date + timedelta(days=period.start_day - 1):
                raise ValueError(f"period {period.name!r} start date does not match day {period.start_day}")
            if period.end_date != self.start_date + timedelta(days=period.end_day - 1):
                raise ValueError(f"period {period.name!r} end date does not match day {period.end_day}")
            expected = period.end_day + 1
        if expected - 1 != self.total_days:
            raise ValueError(f"periods end at day {expected - 1}, expected {self.total_days}")

    # ── date → day
    def current_day(self, value: date | datetime | str) -> Optional[int]:
        day_value = _require_date(value)
        if day_value < self.start_date or day_value > self.end_date:
            return None
        return (day_value - self.start_date).days + 1

    def is_active(self, value: date | datetime | str) -> bool:
        return self.current_day(value) is not None

    def is_before(self, value: date | datetime | str) -> bool:
        return _require_date(value) < self.start_date

    def is_after(self, value: date | datetime | str) -> bool:
        return _require_date(value) > self.end_date

    def days_until_start(self, value: date | datetime | str) -> Optional[int]:
        day_value = _require_date(value)
        if day_value >= self.start_date:
            return None
        return (self.start_date - day_value).days

    def days_remaining(self, value: date | datetime | str) -> Optional[int]:
        day_no = self.current_day(value)
        if day_no is None:
            return None
        return self.total_days - day_no

    def progress_fraction(self, value: date | datetime | str) -> Optional[float]:
        day_no = self.current_day(value)
        if day_no is None:
            return None
        return day_no / self.total_days

    # ── day → period / date
    def _check_day(self, day: int) -> None:
        if day < 1 or day > self.total_days:
            raise OutOfRange(f"Day {day} is out of range (1-{self.total_days})")

    def current_period(self, day: int) -> Period:
        self._check_day(day)
        for period in self.periods:
            if period.contains(day):
                return period
        # unreachable once __post_init__ has validated the partition
        raise OutOfRange(f"No period found for day {day}")

    def day_date(self, day: int) -> date:
        self._check_day(day)
        return self.start_date + timedelta(days=day - 1)

    def week_number(self, day: int) -> int:
        self._check_day(day)
        return (day - 1) // 7 + 1

    def elapsed_end(self, today: date | datetime | str) -> date:
        """Last date counted as elapsed: today, capped at the campaign end."""
        return min(_require_date(today), self.end_date)


def format_day_label(day: int) -> str:
    return f"Jour {day}"


def build_campaign(start_value: date | datetime | str, total_days: int = TOTAL_DAYS) -> CampaignWindow:
    """
    Build the standard 70-day parcours anchored on ``start_value``.
    Period day ranges are fixed; their dates shift with the start date.
    """
    start_day = _require_date(start_value)
    periods = tuple(
        Period(
            name=name,
            start_day=first,
            end_day=last,
            start_date=start_day + timedelta(days=first - 1),
            end_date=start_day + timedelta(days=last - 1),
        )
        for name, first, last in PERIOD_SEQUENCE
    )
    return CampaignWindow(
        start_date=start_day,
        end_date=start_day + timedelta(days=total_days - 1),
        total_days=total_days,
        periods=periods,
    )


_campaign: CampaignWindow | None = None


def get_campaign() -> CampaignWindow:
    """Campaign built from settings.PARCOURS_START (cached)."""
    global _campaign
    if _campaign is None:
        from .config import settings

        _campaign = build_campaign(settings.PARCOURS_START)
    return _campaign
