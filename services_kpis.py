from __future__ import annotations

from typing import Sequence

import pandas as pd

from activities import DerivedActivity
from aggregations import activities_frame, overall_completion
from taxonomy import COMPLETED, DELAYED

__all__ = ["compute_kpis", "EMPTY_KPIS"]

EMPTY_KPIS = {
    "total": 0,
    "completed": 0,
    "completion_pct": 0.0,
    "overdue_count": 0,
    "total_overdue_days": 0,
    "total_remaining_days": 0,
    "total_planned_cost": 0.0,
    "total_real_cost": 0.0,
    "cost_deviation": 0.0,
    "high_priority": 0,
    "high_risk": 0,
}


def compute_kpis(derived: Sequence[DerivedActivity] | None) -> dict:
    """Headline totals for the KPI cards and the narrative analysis."""
    if not derived:
        return dict(EMPTY_KPIS)

    df = activities_frame(derived)
    planned = float(pd.to_numeric(df["planned_value"], errors="coerce").fillna(0).sum())
    real = float(pd.to_numeric(df["actual_value"], errors="coerce").fillna(0).sum())

    return {
        "total": len(derived),
        "completed": sum(1 for a in derived if a.actual_status == COMPLETED),
        "completion_pct": overall_completion(derived),
        "overdue_count": sum(1 for a in derived if a.actual_status == DELAYED),
        "total_overdue_days": sum(a.overdue_days for a in derived),
        "total_remaining_days": sum(a.remaining_days for a in derived),
        "total_planned_cost": planned,
        "total_real_cost": real,
        "cost_deviation": real - planned,
        "high_priority": sum(1 for a in derived if a.priority == "High"),
        "high_risk": sum(1 for a in derived if a.associated_risk == "High"),
    }
