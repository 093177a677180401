#!/usr/bin/env python3
"""
Dashboard store: password-protected dashboards, per-dashboard data files and
the debounced saver. Everything runs inside a temporary data directory.
"""

from __future__ import annotations

import json
import sys
import tempfile
import time
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(REPO_ROOT))

import activity_store  # noqa: E402
from activities import Activity  # noqa: E402
from taxonomy import TaxonomyEntry  # noqa: E402


def _use_tmp_store(tmp: str) -> None:
    activity_store.DASHBOARDS_PATH = Path(tmp) / "dashboards.json"
    activity_store.DASHBOARDS_DIR = Path(tmp) / "dashboards"


def test_create_dashboard_validates_and_hides_password() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        _use_tmp_store(tmp)
        dashboard, message = activity_store.create_dashboard("  ", "secret")
        assert dashboard is None
        assert message == "Dashboard name and password cannot be empty."

        dashboard, message = activity_store.create_dashboard(" Site A ", "secret")
        assert dashboard is not None
        assert message == 'Dashboard "Site A" created.'
        assert dashboard["name"] == "Site A"
        assert not any(k.startswith("password") for k in dashboard)

        duplicate, message = activity_store.create_dashboard("Site A", "other")
        assert duplicate is None
        assert message == "A dashboard with this name already exists. Please choose another."

        listed = activity_store.list_dashboards()
        assert [d["name"] for d in listed] == ["Site A"]
        stored = json.loads(activity_store.DASHBOARDS_PATH.read_text(encoding="utf-8"))
        assert "secret" not in json.dumps(stored)


def test_verify_password() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        _use_tmp_store(tmp)
        dashboard, _ = activity_store.create_dashboard("Site B", "s3cret")
        assert activity_store.verify_dashboard_password(dashboard["id"], "s3cret") is True
        assert activity_store.verify_dashboard_password(dashboard["id"], "wrong") is False
        assert activity_store.verify_dashboard_password("missing", "s3cret") is False


def test_new_dashboard_starts_empty_and_data_round_trips() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        _use_tmp_store(tmp)
        dashboard, _ = activity_store.create_dashboard("Site C", "pw")
        assert activity_store.load_dashboard_data(dashboard["id"]) == ([], [], [])

        activity = Activity.from_dict({
            "id": "act_1", "activityName": "Slab", "plannedValue": "1500,5",
            "requiredResources": "Crane, Pump", "plannedEndDate": "2024-03-01",
        })
        statuses = [TaxonomyEntry("Blocked", "#EF4444")]
        activity_store.save_dashboard_data(dashboard["id"], [activity], statuses, [])

        raw = json.loads((activity_store.DASHBOARDS_DIR / dashboard["id"] / "dashboard.json").read_text())
        assert set(raw) == {"activities", "customStatuses", "customRisks"}
        assert raw["activities"][0]["activityName"] == "Slab"
        assert raw["activities"][0]["plannedValue"] == 1500.5
        assert raw["activities"][0]["requiredResources"] == ["Crane", "Pump"]

        activities, loaded_statuses, loaded_risks = activity_store.load_dashboard_data(dashboard["id"])
        assert activities == [activity]
        assert loaded_statuses == statuses
        assert loaded_risks == []


def test_unreadable_data_file_loads_as_empty() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        _use_tmp_store(tmp)
        path = activity_store.DASHBOARDS_DIR / "dash_broken" / "dashboard.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")
        assert activity_store.load_dashboard_data("dash_broken") == ([], [], [])


def test_delete_dashboard() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        _use_tmp_store(tmp)
        dashboard, _ = activity_store.create_dashboard("Site D", "pw")
        assert activity_store.delete_dashboard(dashboard["id"]) is True
        assert activity_store.get_dashboard(dashboard["id"]) is None
        assert not (activity_store.DASHBOARDS_DIR / dashboard["id"]).exists()
        assert activity_store.delete_dashboard(dashboard["id"]) is False


def test_debounced_saver_keeps_only_latest_snapshot() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        _use_tmp_store(tmp)
        dashboard, _ = activity_store.create_dashboard("Site E", "pw")
        saver = activity_store.DebouncedSaver(dashboard["id"], delay=0.05)
        first = Activity.from_dict({"id": "a", "activityName": "First"})
        second = Activity.from_dict({"id": "b", "activityName": "Second"})
        saver.schedule([first], [], [])
        saver.schedule([first, second], [], [])
        deadline = time.time() + 5
        while saver.pending() and time.time() < deadline:
            time.sleep(0.01)
        activities, _, _ = activity_store.load_dashboard_data(dashboard["id"])
        assert [a.id for a in activities] == ["a", "b"]


def test_debounced_saver_flush_writes_immediately() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        _use_tmp_store(tmp)
        dashboard, _ = activity_store.create_dashboard("Site F", "pw")
        saver = activity_store.DebouncedSaver(dashboard["id"], delay=60)
        saver.schedule([Activity.from_dict({"id": "z"})], [TaxonomyEntry("Blocked")], [])
        assert saver.pending() is True
        saver.flush()
        assert saver.pending() is False
        activities, statuses, _ = activity_store.load_dashboard_data(dashboard["id"])
        assert [a.id for a in activities] == ["z"]
        assert [s.name for s in statuses] == ["Blocked"]


def test_save_after_delete_does_not_recreate_folder() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        _use_tmp_store(tmp)
        dashboard, _ = activity_store.create_dashboard("Site G", "pw")
        folder = activity_store.DASHBOARDS_DIR / dashboard["id"]
        assert activity_store.delete_dashboard(dashboard["id"]) is True
        saved = activity_store.save_dashboard_data(dashboard["id"], [Activity.from_dict({"id": "late"})], [], [])
        assert saved is False
        assert not folder.exists()


def test_pending_debounced_save_is_dropped_after_delete() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        _use_tmp_store(tmp)
        dashboard, _ = activity_store.create_dashboard("Site H", "pw")
        saver = activity_store.DebouncedSaver(dashboard["id"], delay=0.05)
        saver.schedule([Activity.from_dict({"id": "late"})], [], [])
        activity_store.delete_dashboard(dashboard["id"])
        deadline = time.time() + 5
        while saver.pending() and time.time() < deadline:
            time.sleep(0.01)
        assert not (activity_store.DASHBOARDS_DIR / dashboard["id"]).exists()
        assert activity_store.list_dashboards() == []


if __name__ == "__main__":
    test_create_dashboard_validates_and_hides_password()
    test_verify_password()
    test_new_dashboard_starts_empty_and_data_round_trips()
    test_unreadable_data_file_loads_as_empty()
    test_delete_dashboard()
    test_debounced_saver_keeps_only_latest_snapshot()
    test_debounced_saver_flush_writes_immediately()
    test_save_after_delete_does_not_recreate_folder()
    test_pending_debounced_save_is_dropped_after_delete()
    print("PASS")
