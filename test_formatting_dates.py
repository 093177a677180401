#!/usr/bin/env python3
"""
Date parsing, period presets and display formatting.
"""

from __future__ import annotations

import sys
from datetime import date, datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(REPO_ROOT))

from formatting import NOT_AVAILABLE, format_currency, format_date, format_list, format_pct  # noqa: E402
from services_dates import days_between, parse_day, period_range  # noqa: E402

TODAY = date(2024, 3, 15)  # a Friday


def test_parse_day() -> None:
    assert parse_day("2024-03-15") == TODAY
    assert parse_day("2024-03-15T10:30:00Z") == TODAY
    assert parse_day(datetime(2024, 3, 15, 23, 59)) == TODAY
    assert parse_day("") is None
    assert parse_day(None) is None
    assert parse_day("15/03/2024") is None


def test_days_between_is_signed() -> None:
    assert days_between(date(2024, 2, 20), TODAY) == 24
    assert days_between(TODAY, date(2024, 2, 20)) == -24


def test_period_presets() -> None:
    assert period_range("All", TODAY) == ("", "")
    assert period_range("Week", TODAY) == ("2024-03-10", "2024-03-16")
    assert period_range("Week", date(2024, 3, 10)) == ("2024-03-10", "2024-03-16")
    assert period_range("Month", date(2024, 2, 10)) == ("2024-02-01", "2024-02-29")
    assert period_range("Quarter", TODAY) == ("2024-01-01", "2024-03-31")
    assert period_range("Quarter", date(2024, 11, 2)) == ("2024-10-01", "2024-12-31")
    assert period_range("Semester", date(2024, 8, 1)) == ("2024-07-01", "2024-12-31")
    assert period_range("Year", TODAY) == ("2024-01-01", "2024-12-31")


def test_format_date() -> None:
    assert format_date("2024-03-05") == "05/03/2024"
    assert format_date(None) == NOT_AVAILABLE
    assert format_date("garbage") == NOT_AVAILABLE


def test_format_currency() -> None:
    assert format_currency(1234.5) == "R$ 1.234,50"
    assert format_currency(-205) == "-R$ 205,00"
    assert format_currency(0) == "R$ 0,00"
    assert format_currency(None) == NOT_AVAILABLE
    assert format_currency(float("nan")) == NOT_AVAILABLE


def test_format_pct_and_list() -> None:
    assert format_pct(25) == "25.0 %"
    assert format_pct(12.346, decimals=2, signed=True) == "+12.35 %"
    assert format_pct(None) == NOT_AVAILABLE
    assert format_list(("Crane", "Pump")) == "Crane, Pump"
    assert format_list(()) == ""


if __name__ == "__main__":
    test_parse_day()
    test_days_between_is_signed()
    test_period_presets()
    test_format_date()
    test_format_currency()
    test_format_pct_and_list()
    print("PASS")
