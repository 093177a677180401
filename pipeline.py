"""
One recompute pass: input snapshot -> output snapshot.

`run_pipeline` is called on every change of activities, taxonomies or
filters. Nothing is cached between runs and nothing in the input is mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from activities import Activity, DerivedActivity
from activity_filters import FilterCriteria, filter_activities, unique_responsibles
from aggregations import (
    completion_by_discipline,
    cost_by_discipline,
    deadline_deviation,
    discipline_responsible_matrix,
    overall_completion,
    overdue_worklist,
    priority_counts,
    remaining_worklist,
    responsible_summary,
    risk_counts,
    status_chart_rows,
    status_summary,
)
from services_kpis import compute_kpis
from services_metrics import derive_activities
from taxonomy import TaxonomyEntry, resolve_risks, resolve_statuses


@dataclass(frozen=True)
class DashboardInput:
    activities: tuple[Activity, ...] = ()
    custom_statuses: tuple[TaxonomyEntry, ...] = ()
    custom_risks: tuple[TaxonomyEntry, ...] = ()
    criteria: FilterCriteria = field(default_factory=FilterCriteria)


@dataclass(frozen=True)
class DashboardResult:
    status_labels: list[str]
    risk_labels: list[str]
    responsibles: list[str]
    derived: list[DerivedActivity]
    planned_summary: dict[str, int]
    real_summary: dict[str, int]
    status_rows: list[dict]
    cost_by_discipline: list[dict]
    completion_by_discipline: list[dict]
    priority_counts: dict[str, int]
    risk_counts: dict[str, int]
    responsible_summary: dict[str, dict[str, int]]
    heatmap: dict
    overdue: list[DerivedActivity]
    remaining: list[DerivedActivity]
    deadline_deviation: list[dict]
    overall_completion: float
    kpis: dict


def run_pipeline(inputs: DashboardInput, today: date) -> DashboardResult:
    status_labels = resolve_statuses(list(inputs.custom_statuses))
    risk_labels = resolve_risks(list(inputs.custom_risks))

    filtered = filter_activities(inputs.activities, inputs.criteria)
    derived = derive_activities(filtered, today)

    planned = status_summary(derived, status_labels, "planned")
    real = status_summary(derived, status_labels, "real")

    return DashboardResult(
        status_labels=status_labels,
        risk_labels=risk_labels,
        responsibles=unique_responsibles(inputs.activities),
        derived=derived,
        planned_summary=planned,
        real_summary=real,
        status_rows=status_chart_rows(planned, real),
        cost_by_discipline=cost_by_discipline(derived),
        completion_by_discipline=completion_by_discipline(derived),
        priority_counts=priority_counts(derived),
        risk_counts=risk_counts(derived),
        responsible_summary=responsible_summary(derived),
        heatmap=discipline_responsible_matrix(derived),
        overdue=overdue_worklist(derived),
        remaining=remaining_worklist(derived),
        deadline_deviation=deadline_deviation(derived, today),
        overall_completion=overall_completion(derived),
        kpis=compute_kpis(derived),
    )
