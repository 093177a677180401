# ui.py - reusable UI kit (cards, badges, tables, activity form)
from __future__ import annotations

import html
from datetime import date

import pandas as pd
import streamlit as st

from activities import PRIORITIES, Activity
from formatting import format_currency, format_date, format_list, format_pct
from services_dates import parse_day
from taxonomy import TaxonomyEntry, risk_badge_colors, status_badge_colors

# (attribute, header)
COLUMN_DEFINITIONS = [
    ("activity_name", "Activity"),
    ("discipline", "Discipline"),
    ("responsible", "Resp."),
    ("priority", "Priority"),
    ("planned_start_date", "Planned start"),
    ("planned_end_date", "Planned end"),
    ("actual_start_date", "Actual start"),
    ("actual_end_date", "Actual end"),
    ("planned_value", "Planned value"),
    ("actual_value", "Actual value"),
    ("actual_cost", "Actual cost"),
    ("planned_status", "Planned status"),
    ("actual_status", "Actual status"),
    ("completion_percent", "Completion (%)"),
    ("associated_risk", "Risk"),
    ("overdue_days", "Overdue days"),
    ("remaining_days", "Remaining days"),
    ("required_resources", "Required resources"),
    ("document_link", "Link/Document"),
    ("last_updated_date", "Last update"),
]
_DATE_COLUMNS = {"planned_start_date", "planned_end_date", "actual_start_date", "actual_end_date", "last_updated_date"}
_MONEY_COLUMNS = {"planned_value", "actual_value", "actual_cost"}


def metric_card(label: str, value: str, sub: str = "", tone: str | None = None):
    cls = f"value {tone}" if tone else "value"
    st.markdown(
        f"""
        <div class="card metric">
            <div class="label">{html.escape(label)}</div>
            <div class="{cls}">{html.escape(value)}</div>
            <div class="sub">{html.escape(sub)}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def chart_heading(title: str):
    st.markdown(f'<div class="chart-heading">{html.escape(title)}</div>', unsafe_allow_html=True)


def badge_html(text: str, colors: tuple[str, str]) -> str:
    bg, fg = colors
    return f'<span class="badge" style="background:{bg};color:{fg}">{html.escape(text)}</span>'


def taxonomy_badges(entries: list[TaxonomyEntry], labels: list[str], kind: str, theme_name: str | None) -> str:
    pick = status_badge_colors if kind == "status" else risk_badge_colors
    return " ".join(badge_html(label, pick(label, entries, theme_name)) for label in labels)


def activities_dataframe(activities, visible: list[str] | None = None) -> pd.DataFrame:
    columns = [c for c in COLUMN_DEFINITIONS if visible is None or c[0] in visible]
    rows = []
    for activity in activities:
        row = {}
        for attr, header in columns:
            value = getattr(activity, attr, None)
            if attr in _DATE_COLUMNS:
                value = format_date(value)
            elif attr in _MONEY_COLUMNS:
                value = format_currency(value)
            elif attr == "completion_percent":
                value = format_pct(value, decimals=0)
            elif attr == "required_resources":
                value = format_list(value)
            row[header] = value
        rows.append(row)
    return pd.DataFrame(rows, columns=[header for _, header in columns])


def _index_or_zero(options: list[str], value: str) -> int:
    return options.index(value) if value in options else 0


def activity_form(
    key: str,
    status_labels: list[str],
    risk_labels: list[str],
    activity: Activity | None = None,
) -> dict | None:
    """
    Add/edit form. Returns the raw record (wire keys) on submit, else None.
    """
    a = activity or Activity(id="")
    with st.form(key=key, clear_on_submit=activity is None):
        c1, c2, c3 = st.columns(3)
        name = c1.text_input("Activity", value=a.activity_name)
        discipline = c2.text_input("Discipline", value=a.discipline)
        responsible = c3.text_input("Responsible", value=a.responsible)

        c1, c2, c3 = st.columns(3)
        priority = c1.selectbox("Priority", PRIORITIES, index=_index_or_zero(PRIORITIES, a.priority))
        planned_status = c2.selectbox(
            "Planned status", status_labels, index=_index_or_zero(status_labels, a.planned_status)
        )
        actual_status = c3.selectbox(
            "Actual status", status_labels, index=_index_or_zero(status_labels, a.actual_status)
        )

        c1, c2, c3, c4 = st.columns(4)
        planned_start = c1.date_input("Planned start", value=parse_day(a.planned_start_date), format="DD/MM/YYYY")
        planned_end = c2.date_input("Planned end", value=parse_day(a.planned_end_date), format="DD/MM/YYYY")
        actual_start = c3.date_input("Actual start", value=parse_day(a.actual_start_date), format="DD/MM/YYYY")
        actual_end = c4.date_input("Actual end", value=parse_day(a.actual_end_date), format="DD/MM/YYYY")

        c1, c2, c3, c4 = st.columns(4)
        planned_value = c1.number_input("Planned value", min_value=0.0, value=a.planned_value)
        actual_value = c2.number_input("Actual value", min_value=0.0, value=a.actual_value)
        actual_cost = c3.number_input("Actual cost", min_value=0.0, value=a.actual_cost)
        completion = c4.number_input(
            "Completion (%)", min_value=0.0, max_value=100.0, value=a.completion_percent
        )

        c1, c2 = st.columns(2)
        risk = c1.selectbox("Associated risk", risk_labels, index=_index_or_zero(risk_labels, a.associated_risk))
        document_link = c2.text_input("Link/Document", value=a.document_link)
        dependencies = st.text_input("Dependencies (comma separated)", value=", ".join(a.dependencies))
        resources = st.text_input("Required resources (comma separated)", value=", ".join(a.required_resources))
        notes = st.text_area("Notes", value=a.notes)

        submitted = st.form_submit_button("Save activity" if activity else "Add activity")
    if not submitted:
        return None

    def _iso(value) -> str | None:
        return value.isoformat() if isinstance(value, date) else None

    return {
        "id": a.id,
        "activityName": name,
        "discipline": discipline,
        "responsible": responsible,
        "priority": priority,
        "plannedStatus": planned_status,
        "actualStatus": actual_status,
        "plannedStartDate": _iso(planned_start),
        "plannedEndDate": _iso(planned_end),
        "actualStartDate": _iso(actual_start),
        "actualEndDate": _iso(actual_end),
        "plannedValue": planned_value,
        "actualValue": actual_value,
        "actualCost": actual_cost,
        "completionPercent": completion,
        "associatedRisk": risk,
        "documentLink": document_link,
        "dependencies": dependencies,
        "requiredResources": resources,
        "notes": notes,
        "lastUpdatedDate": date.today().isoformat(),
    }
