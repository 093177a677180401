#!/usr/bin/env python3
"""
Overdue / remaining day rules per actual status.
"""

from __future__ import annotations

import sys
from datetime import date, timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(REPO_ROOT))

from activities import Activity  # noqa: E402
from services_metrics import derive_activities, derive_metrics  # noqa: E402

TODAY = date(2024, 3, 15)


def _act(status: str, planned_end: date | str | None = None, actual_end: date | str | None = None) -> Activity:
    return Activity.from_dict(
        {"id": "x", "actualStatus": status, "plannedEndDate": planned_end, "actualEndDate": actual_end}
    )


def test_delayed_counts_days_past_planned_end() -> None:
    for k in (1, 5, 40):
        assert derive_metrics(_act("Delayed", TODAY - timedelta(days=k)), TODAY) == (k, 0)
    for k in (0, 3):
        overdue, remaining = derive_metrics(_act("Delayed", TODAY + timedelta(days=k)), TODAY)
        assert overdue == 0
        assert remaining == k


def test_completed_late_counts_actual_minus_planned() -> None:
    assert derive_metrics(_act("Completed", "2024-01-10", "2024-01-12"), TODAY) == (2, 0)
    assert derive_metrics(_act("Completed", "2024-01-10", "2024-01-10"), TODAY) == (0, 0)
    assert derive_metrics(_act("Completed", "2024-01-10", "2024-01-02"), TODAY) == (0, 0)
    assert derive_metrics(_act("Completed", "2024-01-10", None), TODAY) == (0, 0)


def test_open_statuses_overdue_only_after_planned_end() -> None:
    for status in ("In Progress", "Not Started"):
        assert derive_metrics(_act(status, TODAY - timedelta(days=4)), TODAY) == (4, 0)
        assert derive_metrics(_act(status, TODAY), TODAY) == (0, 0)
        assert derive_metrics(_act(status, TODAY + timedelta(days=9)), TODAY) == (0, 9)


def test_remaining_is_zero_once_completed() -> None:
    assert derive_metrics(_act("Completed", TODAY + timedelta(days=30)), TODAY) == (0, 0)


def test_custom_status_never_overdue_but_can_have_remaining_days() -> None:
    assert derive_metrics(_act("Blocked", TODAY - timedelta(days=10)), TODAY) == (0, 0)
    assert derive_metrics(_act("Blocked", TODAY + timedelta(days=2)), TODAY) == (0, 2)


def test_missing_or_unparseable_dates_degrade_to_zero() -> None:
    assert derive_metrics(_act("Delayed", None), TODAY) == (0, 0)
    assert derive_metrics(_act("In Progress", "31/12/2023"), TODAY) == (0, 0)
    assert derive_metrics(_act("Completed", "2024-01-10", "garbage"), TODAY) == (0, 0)


def test_derive_activities_keeps_source_untouched() -> None:
    source = _act("Delayed", TODAY - timedelta(days=5))
    (derived,) = derive_activities([source], TODAY)
    assert derived.overdue_days == 5 and derived.remaining_days == 0
    assert derived.id == source.id and derived.actual_status == "Delayed"
    assert not hasattr(source, "overdue_days")


if __name__ == "__main__":
    test_delayed_counts_days_past_planned_end()
    test_completed_late_counts_actual_minus_planned()
    test_open_statuses_overdue_only_after_planned_end()
    test_remaining_is_zero_once_completed()
    test_custom_status_never_overdue_but_can_have_remaining_days()
    test_missing_or_unparseable_dates_degrade_to_zero()
    test_derive_activities_keeps_source_untouched()
    print("PASS")
