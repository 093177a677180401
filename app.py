from datetime import date
from time import perf_counter

import pandas as pd
import streamlit as st

from activities import Activity, activities_from_records, new_activity, remove_activity, replace_activity
from activity_filters import build_activity_filter_sidebar
from activity_store import (
    DebouncedSaver,
    create_dashboard,
    delete_dashboard,
    get_dashboard,
    list_dashboards,
    load_dashboard_data,
    verify_dashboard_password,
)
from charts import completion_fig, cost_fig, counts_fig, deviation_fig, heatmap_html, status_fig
from data import load_activities_json
from formatting import format_currency, format_date, format_pct
from narrative import cached_analysis
from pipeline import DashboardInput, run_pipeline
from runtime_checks import data_dir, default_theme, validate_runtime_config
from services_dates import today_local
from taxonomy import BUILTIN_RISKS, BUILTIN_STATUSES, add_custom_entry, resolve_risks, resolve_statuses
from theme import THEMES, get_theme, inject_theme
from ui import (
    COLUMN_DEFINITIONS,
    activities_dataframe,
    activity_form,
    chart_heading,
    metric_card,
    taxonomy_badges,
)

st.set_page_config(page_title="Activity Tracker", page_icon="📊", layout="wide")
validate_runtime_config()


def _time_call(func, *args, **kwargs):
    start = perf_counter()
    result = func(*args, **kwargs)
    return result, (perf_counter() - start) * 1000


def _feedback(message: str, ok: bool = True) -> None:
    (st.success if ok else st.warning)(message)


# ---------- Theme ----------
theme_names = list(THEMES)
if st.session_state.get("theme_name") not in theme_names:
    st.session_state["theme_name"] = default_theme() if default_theme() in THEMES else theme_names[0]
theme_name = st.sidebar.selectbox(
    "Theme", theme_names, format_func=lambda k: THEMES[k]["name"], key="theme_name"
)
inject_theme(theme_name)
theme = get_theme(theme_name)


# ---------- Dashboard selection ----------
def _open_dashboard(dashboard_id: str) -> None:
    saver = st.session_state.get("saver")
    if saver is not None:
        saver.flush()
    activities, statuses, risks = load_dashboard_data(dashboard_id)
    st.session_state["active_dashboard_id"] = dashboard_id
    st.session_state["activities"] = activities
    st.session_state["custom_statuses"] = statuses
    st.session_state["custom_risks"] = risks
    st.session_state["saver"] = DebouncedSaver(dashboard_id)


def _render_dashboard_selector() -> None:
    st.title("Activity Tracker")
    dashboards = list_dashboards()
    left, right = st.columns(2)
    with left:
        st.subheader("Open a dashboard")
        if not dashboards:
            st.caption("No dashboards yet.")
        else:
            options = {d["id"]: d for d in dashboards}
            chosen = st.selectbox("Dashboard", list(options), format_func=lambda i: options[i]["name"])
            password = st.text_input("Password", type="password", key="open_password")
            if st.button("Open"):
                if verify_dashboard_password(chosen, password):
                    _open_dashboard(chosen)
                    st.rerun()
                else:
                    _feedback("Wrong password.", ok=False)
    with right:
        st.subheader("Create a new dashboard")
        name = st.text_input("Dashboard name", key="new_dashboard_name")
        password = st.text_input("Dashboard password", type="password", key="new_dashboard_password")
        if st.button("Create dashboard"):
            dashboard, message = create_dashboard(name, password)
            if dashboard is None:
                _feedback(message, ok=False)
            else:
                _open_dashboard(dashboard["id"])
                st.rerun()


if not st.session_state.get("active_dashboard_id"):
    _render_dashboard_selector()
    st.stop()

if st.sidebar.button("Switch dashboard"):
    saver = st.session_state.get("saver")
    if saver is not None:
        saver.flush()
    for key in ("active_dashboard_id", "activities", "custom_statuses", "custom_risks", "saver"):
        st.session_state.pop(key, None)
    st.rerun()

with st.sidebar.expander("Delete dashboard"):
    confirm = st.checkbox("I understand this removes every activity", key="confirm_delete_dashboard")
    if st.button("Delete this dashboard", disabled=not confirm):
        st.session_state["saver"].flush()
        delete_dashboard(st.session_state["active_dashboard_id"])
        for key in ("active_dashboard_id", "activities", "custom_statuses", "custom_risks", "saver"):
            st.session_state.pop(key, None)
        st.rerun()


def _changed() -> None:
    st.session_state["saver"].schedule(
        st.session_state["activities"],
        st.session_state["custom_statuses"],
        st.session_state["custom_risks"],
    )


activities: list[Activity] = st.session_state["activities"]
custom_statuses = st.session_state["custom_statuses"]
custom_risks = st.session_state["custom_risks"]
today = today_local()

# ---------- Filters + pipeline ----------
criteria = build_activity_filter_sidebar(activities, resolve_statuses(custom_statuses), today)
inputs = DashboardInput(
    activities=tuple(activities),
    custom_statuses=tuple(custom_statuses),
    custom_risks=tuple(custom_risks),
    criteria=criteria,
)
result, pipeline_ms = _time_call(run_pipeline, inputs, today)
kpis = result.kpis

active = get_dashboard(st.session_state["active_dashboard_id"]) or {}
st.title(active.get("name") or "Activity Tracker")
st.caption(f"{len(result.derived)} of {len(activities)} activities shown · computed in {pipeline_ms:.0f} ms")

if not activities and st.button("Load demo activities"):
    # activities.json in the data dir seeds the demo when present
    st.session_state["activities"] = activities_from_records(load_activities_json(data_dir() / "activities.json"))
    _changed()
    st.rerun()

# ---------- KPIs ----------
cols = st.columns(5)
with cols[0]:
    metric_card("Activities", str(kpis["total"]), f"{kpis['completed']} completed")
with cols[1]:
    metric_card("Completion", format_pct(result.overall_completion), "overall")
with cols[2]:
    metric_card("Overdue days", str(kpis["total_overdue_days"]), f"{kpis['overdue_count']} delayed",
                tone="negative" if kpis["total_overdue_days"] else None)
with cols[3]:
    metric_card("Remaining days", str(kpis["total_remaining_days"]), "unfinished activities")
with cols[4]:
    metric_card("Cost deviation", format_currency(kpis["cost_deviation"]),
                f"{format_currency(kpis['total_real_cost'])} vs {format_currency(kpis['total_planned_cost'])}",
                tone="negative" if kpis["cost_deviation"] > 0 else "positive")

# ---------- Charts ----------
left, right = st.columns(2)
with left:
    chart_heading("Status: planned vs real")
    st.plotly_chart(status_fig(result.status_rows, theme_name), use_container_width=True, config={"displayModeBar": False})
with right:
    chart_heading("Cost by discipline")
    st.plotly_chart(cost_fig(result.cost_by_discipline, theme_name), use_container_width=True, config={"displayModeBar": False})

left, mid, right = st.columns(3)
with left:
    chart_heading("Completion by discipline (%)")
    st.plotly_chart(completion_fig(result.completion_by_discipline, theme_name), use_container_width=True, config={"displayModeBar": False})
with mid:
    chart_heading("Activities by priority")
    st.plotly_chart(counts_fig(result.priority_counts, theme["chartPriority"], theme_name), use_container_width=True, config={"displayModeBar": False})
with right:
    chart_heading("Activities by risk")
    st.plotly_chart(counts_fig(result.risk_counts, theme["chartRisk"], theme_name), use_container_width=True, config={"displayModeBar": False})

chart_heading("Deadline deviation (days)")
st.plotly_chart(deviation_fig(result.deadline_deviation, theme_name), use_container_width=True, config={"displayModeBar": False})

chart_heading("Occupancy: discipline × responsible")
if result.heatmap["disciplines"]:
    st.markdown(heatmap_html(result.heatmap, theme_name), unsafe_allow_html=True)
else:
    st.caption("No activities to map.")

# ---------- Worklists ----------
left, right = st.columns(2)
with left:
    chart_heading("Delayed activities")
    st.dataframe(
        pd.DataFrame(
            [
                {"Activity": a.activity_name, "Responsible": a.responsible,
                 "Planned end": format_date(a.planned_end_date), "Overdue days": a.overdue_days}
                for a in result.overdue
            ],
            columns=["Activity", "Responsible", "Planned end", "Overdue days"],
        ),
        use_container_width=True,
        hide_index=True,
    )
with right:
    chart_heading("Remaining days")
    st.dataframe(
        pd.DataFrame(
            [
                {"Activity": a.activity_name, "Responsible": a.responsible,
                 "Planned end": format_date(a.planned_end_date), "Remaining days": a.remaining_days}
                for a in result.remaining
            ],
            columns=["Activity", "Responsible", "Planned end", "Remaining days"],
        ),
        use_container_width=True,
        hide_index=True,
    )

chart_heading("Activities by responsible")
st.dataframe(
    pd.DataFrame.from_dict(result.responsible_summary, orient="index").rename_axis("Responsible"),
    use_container_width=True,
)

# ---------- Activity table ----------
chart_heading("Activities")
all_columns = [attr for attr, _ in COLUMN_DEFINITIONS]
st.session_state.setdefault("visible_columns", all_columns)
visible = st.multiselect(
    "Visible columns",
    all_columns,
    format_func=lambda attr: dict(COLUMN_DEFINITIONS)[attr],
    key="visible_columns",
)
st.dataframe(activities_dataframe(result.derived, visible), use_container_width=True, hide_index=True)

status_labels = result.status_labels
risk_labels = result.risk_labels

with st.expander("Add activity"):
    raw = activity_form("add_activity_form", status_labels, risk_labels)
    if raw is not None:
        st.session_state["activities"] = new_activity(activities, raw, today)
        _changed()
        st.rerun()

if activities:
    with st.expander("Edit activity"):
        by_id = {a.id: a for a in activities}
        edit_id = st.selectbox(
            "Activity to edit", list(by_id), format_func=lambda i: by_id[i].activity_name or i, key="edit_activity_id"
        )
        raw = activity_form(f"edit_activity_form_{edit_id}", status_labels, risk_labels, by_id[edit_id])
        if raw is not None:
            st.session_state["activities"] = replace_activity(activities, Activity.from_dict(raw))
            _changed()
            st.rerun()
        if st.button("Delete activity", key="delete_activity_btn"):
            st.session_state["activities"] = remove_activity(activities, edit_id)
            _changed()
            st.rerun()

# ---------- Taxonomies ----------
with st.expander("Statuses and risks"):
    left, right = st.columns(2)
    with left:
        st.markdown(taxonomy_badges(custom_statuses, resolve_statuses(custom_statuses), "status", theme_name),
                    unsafe_allow_html=True)
        name = st.text_input("New status", key="new_status_name")
        color = st.color_picker("Status colour", "#000000", key="new_status_color")
        if st.button("Add status"):
            updated, message, ok = add_custom_entry(BUILTIN_STATUSES, custom_statuses, name, color, kind="Status")
            _feedback(message, ok)
            if ok:
                st.session_state["custom_statuses"] = updated
                _changed()
    with right:
        st.markdown(taxonomy_badges(custom_risks, resolve_risks(custom_risks), "risk", theme_name),
                    unsafe_allow_html=True)
        name = st.text_input("New risk", key="new_risk_name")
        color = st.color_picker("Risk colour", "#000000", key="new_risk_color")
        if st.button("Add risk"):
            updated, message, ok = add_custom_entry(BUILTIN_RISKS, custom_risks, name, color, kind="Risk")
            _feedback(message, ok)
            if ok:
                st.session_state["custom_risks"] = updated
                _changed()

# ---------- Narrative analysis ----------
with st.expander("Report analysis"):
    if st.toggle("Generate analysis", key="analysis_open"):
        with st.spinner("Generating analysis..."):
            st.markdown(cached_analysis(kpis))
    st.caption(f"Generated on {format_date(date.today())}")
