# services_dates.py - calendar-day helpers (no time component, no timezone)
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

import numpy as np

__all__ = [
    "parse_day",
    "days_between",
    "today_local",
    "period_range",
    "PERIODS",
]

PERIODS = ["All", "Week", "Month", "Quarter", "Semester", "Year"]

DATES_LOGGER = logging.getLogger("services_dates")
_LOGGED_VALUES: set[str] = set()


def _ensure_logger() -> None:
    if not DATES_LOGGER.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [services_dates] %(levelname)s: %(message)s")
        )
        DATES_LOGGER.addHandler(handler)
    DATES_LOGGER.setLevel(logging.INFO)


def _log_unparseable_once(value) -> None:
    key = repr(value)
    if key in _LOGGED_VALUES:
        return
    _ensure_logger()
    DATES_LOGGER.warning(f"Unparseable date treated as absent: {key}")
    _LOGGED_VALUES.add(key)


def parse_day(value) -> date | None:
    """
    Parse an ISO `YYYY-MM-DD` value (or a date/datetime) into a `date`.
    Empty values give None; unparseable values are logged once and give None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        _log_unparseable_once(value)
        return None


def days_between(start: date, end: date) -> int:
    """Signed number of calendar days from `start` to `end`."""
    delta = np.datetime64(end, "D") - np.datetime64(start, "D")
    return int(delta.astype(int))


def today_local() -> date:
    return date.today()


def _iso(day: date) -> str:
    return day.isoformat()


def _month_end(year: int, month: int) -> date:
    if month == 12:
        return date(year, 12, 31)
    return date(year, month + 1, 1) - timedelta(days=1)


def period_range(period: str, today: date) -> tuple[str, str]:
    """
    Date range for a period preset, as ISO strings.
    Weeks run Sunday to Saturday; "All" (or anything unknown) gives ("", "").
    """
    if period == "Week":
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        return _iso(start), _iso(start + timedelta(days=6))
    if period == "Month":
        return _iso(today.replace(day=1)), _iso(_month_end(today.year, today.month))
    if period == "Quarter":
        first_month = (today.month - 1) // 3 * 3 + 1
        return (
            _iso(date(today.year, first_month, 1)),
            _iso(_month_end(today.year, first_month + 2)),
        )
    if period == "Semester":
        first_month = 1 if today.month <= 6 else 7
        return (
            _iso(date(today.year, first_month, 1)),
            _iso(_month_end(today.year, first_month + 5)),
        )
    if period == "Year":
        return _iso(date(today.year, 1, 1)), _iso(date(today.year, 12, 31))
    return "", ""
