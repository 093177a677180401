from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from typing import Any, Iterable

import streamlit as st

from activities import Activity
from services_dates import PERIODS, parse_day, period_range

FILTER_ALL = "All"


@dataclass(frozen=True)
class FilterCriteria:
    search_term: str = ""
    status_filter: str = FILTER_ALL
    responsible_filter: str = FILTER_ALL
    start_date: str | None = None
    end_date: str | None = None


def _search_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(_search_text(v) for v in value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def matches_search(activity: Activity, search_term: str) -> bool:
    if not search_term:
        return True
    needle = search_term.lower()
    return any(
        needle in _search_text(getattr(activity, f.name)).lower()
        for f in fields(activity)
    )


def matches_status(activity: Activity, status_filter: str) -> bool:
    return status_filter == FILTER_ALL or activity.actual_status == status_filter


def matches_responsible(activity: Activity, responsible_filter: str) -> bool:
    return responsible_filter == FILTER_ALL or activity.responsible == responsible_filter


def matches_date(activity: Activity, start_date: Any, end_date: Any) -> bool:
    # A one-sided range filters nothing.
    start = parse_day(start_date)
    end = parse_day(end_date)
    if start is None or end is None:
        return True
    reference = parse_day(activity.actual_start_date) or parse_day(activity.planned_start_date)
    if reference is None:
        return False
    return start <= reference <= end


def filter_activities(activities: Iterable[Activity], criteria: FilterCriteria) -> list[Activity]:
    return [
        activity
        for activity in activities
        if matches_search(activity, criteria.search_term)
        and matches_status(activity, criteria.status_filter)
        and matches_responsible(activity, criteria.responsible_filter)
        and matches_date(activity, criteria.start_date, criteria.end_date)
    ]


def unique_responsibles(activities: Iterable[Activity]) -> list[str]:
    seen: dict[str, None] = {}
    for activity in activities:
        seen.setdefault(activity.responsible, None)
    return list(seen)


def _to_iso(value: date | None) -> str | None:
    return value.isoformat() if value else None


def build_activity_filter_sidebar(
    activities: list[Activity],
    status_labels: list[str],
    today: date,
    *,
    sidebar: Any | None = None,
    key_prefix: str = "filter",
) -> FilterCriteria:
    """Render the filter widgets and return the criteria they describe."""
    sidebar = sidebar or st.sidebar
    search_key = f"{key_prefix}_search"
    status_key = f"{key_prefix}_status"
    responsible_key = f"{key_prefix}_responsible"
    period_key = f"{key_prefix}_period"
    start_key = f"{key_prefix}_start"
    end_key = f"{key_prefix}_end"

    search_term = sidebar.text_input("Search", key=search_key, placeholder="Any field...")

    status_options = [FILTER_ALL] + list(status_labels)
    if st.session_state.get(status_key) not in status_options:
        st.session_state[status_key] = FILTER_ALL
    status_filter = sidebar.selectbox("Actual status", status_options, key=status_key)

    responsible_options = [FILTER_ALL] + [r for r in unique_responsibles(activities) if r]
    if st.session_state.get(responsible_key) not in responsible_options:
        st.session_state[responsible_key] = FILTER_ALL
    responsible_filter = sidebar.selectbox("Responsible", responsible_options, key=responsible_key)

    period = sidebar.selectbox("Period", PERIODS, key=period_key)
    last_period_key = f"_{key_prefix}_last_period"
    if st.session_state.get(last_period_key) != period:
        # Presets only overwrite the range when the period changes.
        preset_start, preset_end = period_range(period, today)
        st.session_state[start_key] = parse_day(preset_start)
        st.session_state[end_key] = parse_day(preset_end)
        st.session_state[last_period_key] = period
    st.session_state.setdefault(start_key, None)
    st.session_state.setdefault(end_key, None)
    start_value = sidebar.date_input("From", key=start_key, format="DD/MM/YYYY")
    end_value = sidebar.date_input("To", key=end_key, format="DD/MM/YYYY")

    return FilterCriteria(
        search_term=search_term or "",
        status_filter=status_filter or FILTER_ALL,
        responsible_filter=responsible_filter or FILTER_ALL,
        start_date=_to_iso(start_value if isinstance(start_value, date) else None),
        end_date=_to_iso(end_value if isinstance(end_value, date) else None),
    )
