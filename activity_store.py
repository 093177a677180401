from __future__ import annotations

import hashlib
import hmac
import json
import logging
import os
import secrets
import shutil
import tempfile
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from activities import Activity, activities_from_records
from runtime_checks import data_dir, debug_enabled, save_debounce_seconds
from taxonomy import TaxonomyEntry, entries_from_records

DASHBOARDS_PATH = data_dir() / "dashboards.json"
DASHBOARDS_DIR = data_dir() / "dashboards"
PBKDF2_ITERATIONS = 120_000

STORE_LOGGER = logging.getLogger("activity_store")
_WRITE_LOCK = threading.Lock()


def _ensure_logger() -> None:
    if not STORE_LOGGER.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [activity_store] %(levelname)s: %(message)s")
        )
        STORE_LOGGER.addHandler(handler)
    STORE_LOGGER.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)


def _log(level: int, message: str) -> None:
    _ensure_logger()
    STORE_LOGGER.log(level, message)


def _now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _atomic_write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=str(path.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def _read_json(path: Path) -> Any:
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as err:
        _log(logging.WARNING, f"read_json unreadable path={path} error={err}")
        return None


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), PBKDF2_ITERATIONS)
    return digest.hex()


def _load_dashboards() -> list[dict]:
    data = _read_json(DASHBOARDS_PATH)
    if isinstance(data, dict):
        data = data.get("dashboards", [])
    if not isinstance(data, list):
        return []
    return [d for d in data if isinstance(d, dict) and d.get("id")]


def _save_dashboards(dashboards: list[dict]) -> None:
    _atomic_write_json(DASHBOARDS_PATH, dashboards)


def _dashboard_file(dashboard_id: str) -> Path:
    return DASHBOARDS_DIR / dashboard_id / "dashboard.json"


def _public(dashboard: dict) -> dict:
    return {k: v for k, v in dashboard.items() if not k.startswith("password")}


def list_dashboards() -> list[dict]:
    return [_public(d) for d in _load_dashboards()]


def get_dashboard(dashboard_id: str | None) -> dict | None:
    if not dashboard_id:
        return None
    for dashboard in _load_dashboards():
        if dashboard.get("id") == dashboard_id:
            return _public(dashboard)
    return None


def create_dashboard(name: str | None, password: str | None) -> tuple[dict | None, str]:
    clean_name = (name or "").strip()
    clean_password = (password or "").strip()
    if not clean_name or not clean_password:
        return None, "Dashboard name and password cannot be empty."
    with _WRITE_LOCK:
        dashboards = _load_dashboards()
        if any(d.get("name") == clean_name for d in dashboards):
            return None, "A dashboard with this name already exists. Please choose another."
        existing = {d.get("id") for d in dashboards}
        dashboard_id = f"dash_{uuid.uuid4().hex[:8]}"
        while dashboard_id in existing:
            dashboard_id = f"dash_{uuid.uuid4().hex[:8]}"
        salt = secrets.token_hex(16)
        dashboard = {
            "id": dashboard_id,
            "name": clean_name,
            "password_salt": salt,
            "password_hash": _hash_password(clean_password, salt),
            "created_at": _now_iso(),
            "updated_at": _now_iso(),
        }
        dashboards.append(dashboard)
        _save_dashboards(dashboards)
        _atomic_write_json(
            _dashboard_file(dashboard_id),
            {"activities": [], "customStatuses": [], "customRisks": []},
        )
    _log(logging.INFO, f"create_dashboard id={dashboard_id} name={clean_name!r}")
    return _public(dashboard), f'Dashboard "{clean_name}" created.'


def verify_dashboard_password(dashboard_id: str | None, password: str | None) -> bool:
    for dashboard in _load_dashboards():
        if dashboard.get("id") != dashboard_id:
            continue
        salt = dashboard.get("password_salt") or ""
        expected = dashboard.get("password_hash") or ""
        if not salt or not expected:
            return False
        try:
            candidate = _hash_password((password or "").strip(), salt)
        except ValueError:
            return False
        return hmac.compare_digest(candidate, expected)
    return False


def delete_dashboard(dashboard_id: str) -> bool:
    with _WRITE_LOCK:
        dashboards = _load_dashboards()
        kept = [d for d in dashboards if d.get("id") != dashboard_id]
        if len(kept) == len(dashboards):
            return False
        _save_dashboards(kept)
        shutil.rmtree(DASHBOARDS_DIR / dashboard_id, ignore_errors=True)
    _log(logging.INFO, f"delete_dashboard id={dashboard_id}")
    return True


def load_dashboard_data(dashboard_id: str) -> tuple[list[Activity], list[TaxonomyEntry], list[TaxonomyEntry]]:
    data = _read_json(_dashboard_file(dashboard_id))
    if not isinstance(data, dict):
        return [], [], []
    return (
        activities_from_records(data.get("activities")),
        entries_from_records(data.get("customStatuses")),
        entries_from_records(data.get("customRisks")),
    )


def save_dashboard_data(
    dashboard_id: str,
    activities: list[Activity],
    custom_statuses: list[TaxonomyEntry],
    custom_risks: list[TaxonomyEntry],
) -> bool:
    """Write the dashboard document. Returns False when the dashboard no longer exists."""
    payload = {
        "activities": [a.to_dict() for a in activities],
        "customStatuses": [e.to_dict() for e in custom_statuses],
        "customRisks": [e.to_dict() for e in custom_risks],
    }
    with _WRITE_LOCK:
        dashboards = _load_dashboards()
        current = next((d for d in dashboards if d.get("id") == dashboard_id), None)
        if current is None:
            _log(logging.WARNING, f"save_dashboard_data skipped unknown id={dashboard_id}")
            return False
        _atomic_write_json(_dashboard_file(dashboard_id), payload)
        current["updated_at"] = _now_iso()
        _save_dashboards(dashboards)
    _log(logging.DEBUG, f"save_dashboard_data id={dashboard_id} activities={len(activities)}")
    return True


class DebouncedSaver:
    """
    Saves a dashboard once its data has been quiet for `delay` seconds.
    A newer snapshot cancels the pending one.
    """

    def __init__(self, dashboard_id: str, delay: float | None = None) -> None:
        self.dashboard_id = dashboard_id
        self.delay = save_debounce_seconds() if delay is None else delay
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def schedule(
        self,
        activities: list[Activity],
        custom_statuses: list[TaxonomyEntry],
        custom_risks: list[TaxonomyEntry],
    ) -> None:
        snapshot = (list(activities), list(custom_statuses), list(custom_risks))
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._save, args=snapshot)
            self._timer.daemon = True
            self._timer.start()

    def _save(self, activities, custom_statuses, custom_risks) -> None:
        try:
            save_dashboard_data(self.dashboard_id, activities, custom_statuses, custom_risks)
        except OSError as err:
            _log(logging.ERROR, f"debounced_save failed id={self.dashboard_id} error={err}")

    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None and self._timer.is_alive()

    def flush(self) -> None:
        """Run a pending save now (used on dashboard switch)."""
        with self._lock:
            timer = self._timer
            self._timer = None
        if timer is None or not timer.is_alive():
            return
        timer.cancel()
        self._save(*timer.args)
