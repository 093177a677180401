"""
Activity records: schema, boundary normalisation and the add/edit/remove flows.

Raw dicts (camelCase keys as stored by the dashboard store) are normalised
once by `Activity.from_dict`; the metrics and aggregation code only ever sees
`Activity` / `DerivedActivity` values.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Iterable

PRIORITIES = ["High", "Medium", "Low"]

# attribute name -> wire key
FIELD_KEYS: dict[str, str] = {
    "id": "id",
    "activity_name": "activityName",
    "discipline": "discipline",
    "responsible": "responsible",
    "priority": "priority",
    "notes": "notes",
    "dependencies": "dependencies",
    "required_resources": "requiredResources",
    "document_link": "documentLink",
    "planned_start_date": "plannedStartDate",
    "planned_end_date": "plannedEndDate",
    "actual_start_date": "actualStartDate",
    "actual_end_date": "actualEndDate",
    "planned_status": "plannedStatus",
    "actual_status": "actualStatus",
    "planned_value": "plannedValue",
    "actual_value": "actualValue",
    "actual_cost": "actualCost",
    "completion_percent": "completionPercent",
    "associated_risk": "associatedRisk",
    "last_updated_date": "lastUpdatedDate",
}

_TEXT_FIELDS = {
    "activity_name",
    "discipline",
    "responsible",
    "priority",
    "notes",
    "document_link",
    "planned_status",
    "actual_status",
    "associated_risk",
}
_DATE_FIELDS = {
    "planned_start_date",
    "planned_end_date",
    "actual_start_date",
    "actual_end_date",
    "last_updated_date",
}
_NUMBER_FIELDS = {"planned_value", "actual_value", "actual_cost", "completion_percent"}
_LIST_FIELDS = {"dependencies", "required_resources"}


@dataclass(frozen=True)
class Activity:
    id: str
    activity_name: str = ""
    discipline: str = ""
    responsible: str = ""
    priority: str = "Medium"
    notes: str = ""
    dependencies: tuple[str, ...] = ()
    required_resources: tuple[str, ...] = ()
    document_link: str = ""
    planned_start_date: str | None = None
    planned_end_date: str | None = None
    actual_start_date: str | None = None
    actual_end_date: str | None = None
    planned_status: str = "Not Started"
    actual_status: str = "Not Started"
    planned_value: float | None = None
    actual_value: float | None = None
    actual_cost: float | None = None
    completion_percent: float | None = None
    associated_risk: str = "Low"
    last_updated_date: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Activity":
        values: dict[str, Any] = {}
        for attr, key in FIELD_KEYS.items():
            if key in raw:
                value = raw[key]
            elif attr in raw:
                value = raw[attr]
            else:
                continue
            values[attr] = _normalize(attr, value)
        if not values.get("id"):
            values["id"] = new_activity_id()
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for attr, key in FIELD_KEYS.items():
            value = getattr(self, attr)
            if attr in _LIST_FIELDS:
                value = list(value)
            out[key] = value
        return out


@dataclass(frozen=True)
class DerivedActivity(Activity):
    overdue_days: int = 0
    remaining_days: int = 0

    @classmethod
    def from_activity(cls, activity: Activity, overdue_days: int, remaining_days: int) -> "DerivedActivity":
        base = {f.name: getattr(activity, f.name) for f in fields(Activity)}
        return cls(**base, overdue_days=overdue_days, remaining_days=remaining_days)

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["overdueDays"] = self.overdue_days
        out["remainingDays"] = self.remaining_days
        return out


def _coerce_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _coerce_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        items = [value]
    return tuple(str(item).strip() for item in items if str(item).strip())


def _normalize(attr: str, value: Any) -> Any:
    if attr == "id":
        return "" if value is None else str(value).strip()
    if attr in _TEXT_FIELDS:
        return "" if value is None else str(value).strip()
    if attr in _DATE_FIELDS:
        if isinstance(value, date):
            return value.isoformat()
        text = "" if value is None else str(value).strip()
        return text or None
    if attr in _NUMBER_FIELDS:
        return _coerce_number(value)
    if attr in _LIST_FIELDS:
        return _coerce_list(value)
    return value


def new_activity_id(existing: Iterable[str] = ()) -> str:
    taken = set(existing)
    while True:
        candidate = f"act_{uuid.uuid4().hex[:10]}"
        if candidate not in taken:
            return candidate


def new_activity(activities: list[Activity], raw: dict[str, Any], today: date) -> list[Activity]:
    """Add-flow: returns a new list with the record appended under a fresh id."""
    data = dict(raw)
    data["id"] = new_activity_id(a.id for a in activities)
    data.setdefault("lastUpdatedDate", today.isoformat())
    return [*activities, Activity.from_dict(data)]


def replace_activity(activities: list[Activity], updated: Activity) -> list[Activity]:
    """Edit-flow: wholesale replacement of the record with the same id."""
    return [updated if a.id == updated.id else a for a in activities]


def remove_activity(activities: list[Activity], activity_id: str) -> list[Activity]:
    return [a for a in activities if a.id != activity_id]


def activities_from_records(records: Any) -> list[Activity]:
    if not isinstance(records, list):
        return []
    return [Activity.from_dict(r) for r in records if isinstance(r, dict)]
