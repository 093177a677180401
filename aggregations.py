"""
Aggregate views over the filtered, derived activity collection.

Every function here is pure: it reads the derived activities and returns
newly built lists/dicts made of plain Python values, ready for the chart and
table code. Group order is first-appearance order in the input.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

import pandas as pd

from activities import DerivedActivity
from services_dates import days_between, parse_day
from taxonomy import COMPLETED, DELAYED, IN_PROGRESS, NOT_STARTED

FRAME_COLUMNS = [
    "discipline",
    "responsible",
    "priority",
    "associated_risk",
    "planned_status",
    "actual_status",
    "planned_value",
    "actual_value",
]

RESPONSIBLE_BUCKETS = {
    COMPLETED: "completed",
    IN_PROGRESS: "in_progress",
    DELAYED: "delayed",
    NOT_STARTED: "not_started",
}


def activities_frame(derived: Sequence[DerivedActivity]) -> pd.DataFrame:
    rows = [{col: getattr(a, col) for col in FRAME_COLUMNS} for a in derived]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    for col in ("planned_value", "actual_value"):
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0).astype(float)
    return df


def status_summary(derived: Iterable[DerivedActivity], labels: Sequence[str], kind: str = "real") -> dict[str, int]:
    """
    Count per resolved status label. `kind` selects the planned or the real
    status; statuses outside `labels` are not counted.
    """
    summary = {label: 0 for label in labels}
    for activity in derived:
        status = activity.planned_status if kind == "planned" else activity.actual_status
        if status in summary:
            summary[status] += 1
    return summary


def status_chart_rows(planned: dict[str, int], real: dict[str, int]) -> list[dict]:
    return [
        {"status": status, "planned": planned[status], "real": real.get(status, 0)}
        for status in planned
    ]


def cost_by_discipline(derived: Sequence[DerivedActivity]) -> list[dict]:
    df = activities_frame(derived)
    if df.empty:
        return []
    grouped = df.groupby("discipline", sort=False)[["planned_value", "actual_value"]].sum()
    out: list[dict] = []
    for discipline, row in grouped.iterrows():
        planned = float(row["planned_value"])
        real = float(row["actual_value"])
        out.append(
            {
                "discipline": discipline,
                "planned": planned,
                "real": real,
                "deviation": real - planned,
            }
        )
    return out


def completion_by_discipline(derived: Sequence[DerivedActivity]) -> list[dict]:
    df = activities_frame(derived)
    if df.empty:
        return []
    df["is_completed"] = df["actual_status"] == COMPLETED
    grouped = df.groupby("discipline", sort=False).agg(
        total=("actual_status", "size"),
        completed=("is_completed", "sum"),
    )
    out: list[dict] = []
    for discipline, row in grouped.iterrows():
        total = int(row["total"])
        completed = int(row["completed"])
        out.append(
            {
                "discipline": discipline,
                "total": total,
                "completed": completed,
                "percent": completed / total * 100 if total > 0 else 0.0,
            }
        )
    return out


def _tally(values: Iterable[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return counts


def priority_counts(derived: Iterable[DerivedActivity]) -> dict[str, int]:
    return _tally(a.priority for a in derived)


def risk_counts(derived: Iterable[DerivedActivity]) -> dict[str, int]:
    return _tally(a.associated_risk for a in derived)


def responsible_summary(derived: Iterable[DerivedActivity]) -> dict[str, dict[str, int]]:
    summary: dict[str, dict[str, int]] = {}
    for activity in derived:
        bucket = summary.setdefault(
            activity.responsible,
            {"total": 0, "completed": 0, "in_progress": 0, "delayed": 0, "not_started": 0},
        )
        bucket["total"] += 1
        # Custom statuses count as in progress.
        bucket[RESPONSIBLE_BUCKETS.get(activity.actual_status, "in_progress")] += 1
    return summary


def discipline_responsible_matrix(derived: Sequence[DerivedActivity]) -> dict:
    """Occupancy counts per (discipline, responsible) plus the largest cell."""
    df = activities_frame(derived)
    disciplines = list(dict.fromkeys(df["discipline"]))
    responsibles = list(dict.fromkeys(df["responsible"]))
    if df.empty:
        return {"disciplines": [], "responsibles": [], "matrix": {}, "max_count": 0}
    table = pd.crosstab(df["discipline"], df["responsible"]).reindex(
        index=disciplines, columns=responsibles, fill_value=0
    )
    matrix = {
        d: {r: int(table.at[d, r]) for r in responsibles}
        for d in disciplines
    }
    max_count = max((c for row in matrix.values() for c in row.values()), default=0)
    return {
        "disciplines": disciplines,
        "responsibles": responsibles,
        "matrix": matrix,
        "max_count": max_count,
    }


def overdue_worklist(derived: Iterable[DerivedActivity]) -> list[DerivedActivity]:
    """
    Delayed activities by planned end date, earliest first.

    Activities without a usable planned end date go last, in input order.
    """
    delayed = [a for a in derived if a.actual_status == DELAYED]

    def _key(activity: DerivedActivity):
        day = parse_day(activity.planned_end_date)
        return (day is None, day or date.min)

    return sorted(delayed, key=_key)


def remaining_worklist(derived: Iterable[DerivedActivity]) -> list[DerivedActivity]:
    pending = [a for a in derived if a.remaining_days > 0 and a.actual_status != COMPLETED]
    return sorted(pending, key=lambda a: a.remaining_days)


def overall_completion(derived: Sequence[DerivedActivity]) -> float:
    total = len(derived)
    if total == 0:
        return 0.0
    completed = sum(1 for a in derived if a.actual_status == COMPLETED)
    return completed / total * 100


def deadline_deviation(derived: Iterable[DerivedActivity], today: date) -> list[dict]:
    """Days past (positive) or ahead of (negative) the planned end, latest first."""
    rows: list[dict] = []
    for activity in derived:
        planned_end = parse_day(activity.planned_end_date)
        actual_end = parse_day(activity.actual_end_date)
        deviation = 0
        if planned_end and actual_end:
            deviation = days_between(planned_end, actual_end)
        elif planned_end:
            deviation = days_between(planned_end, today)
        rows.append({"activity": activity.activity_name, "deviation_days": float(deviation)})
    return sorted(rows, key=lambda r: r["deviation_days"], reverse=True)
