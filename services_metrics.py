from __future__ import annotations

from datetime import date
from typing import Iterable

from activities import Activity, DerivedActivity
from services_dates import days_between, parse_day
from taxonomy import COMPLETED, DELAYED, IN_PROGRESS, NOT_STARTED

__all__ = ["overdue_days", "remaining_days", "derive_metrics", "derive_activities"]


def overdue_days(activity: Activity, today: date) -> int:
    status = activity.actual_status
    planned_end = parse_day(activity.planned_end_date)
    if planned_end is None:
        return 0
    if status == DELAYED:
        return max(0, days_between(planned_end, today))
    if status == COMPLETED:
        actual_end = parse_day(activity.actual_end_date)
        if actual_end is not None and actual_end > planned_end:
            return days_between(planned_end, actual_end)
        return 0
    if status in (IN_PROGRESS, NOT_STARTED) and today > planned_end:
        return days_between(planned_end, today)
    return 0


def remaining_days(activity: Activity, today: date) -> int:
    if activity.actual_status == COMPLETED:
        return 0
    planned_end = parse_day(activity.planned_end_date)
    if planned_end is None or planned_end <= today:
        return 0
    return days_between(today, planned_end)


def derive_metrics(activity: Activity, today: date) -> tuple[int, int]:
    """(overdue days, remaining days) of one activity as of `today`."""
    return overdue_days(activity, today), remaining_days(activity, today)


def derive_activities(activities: Iterable[Activity], today: date) -> list[DerivedActivity]:
    derived: list[DerivedActivity] = []
    for activity in activities:
        overdue, remaining = derive_metrics(activity, today)
        derived.append(DerivedActivity.from_activity(activity, overdue, remaining))
    return derived
