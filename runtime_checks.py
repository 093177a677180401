from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import streamlit as st

_LOGGED_EVENTS: set[str] = set()
RUNTIME_LOGGER = logging.getLogger("runtime_checks")

DEFAULT_DATA_DIR = "artifacts"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_SAVE_DEBOUNCE_MS = 500
DEFAULT_THEME = "light"


def debug_enabled() -> bool:
    return os.environ.get("TRACKER_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def _ensure_logger() -> None:
    if not RUNTIME_LOGGER.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [runtime_checks] %(levelname)s: %(message)s")
        )
        RUNTIME_LOGGER.addHandler(handler)
    RUNTIME_LOGGER.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)


def _log_once(key: str, level: int, message: str) -> None:
    if key in _LOGGED_EVENTS:
        return
    _ensure_logger()
    RUNTIME_LOGGER.log(level, message)
    _LOGGED_EVENTS.add(key)


def get_secret(key: str, default: str = "") -> str:
    value = os.environ.get(key, "")
    if not value:
        try:
            value = st.secrets.get(key, "")
        except Exception:
            value = ""
    return str(value) if value else default


def get_int_setting(key: str, default: int) -> int:
    raw = get_secret(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        _log_once(f"bad_int:{key}", logging.WARNING, f"Invalid integer for {key}: {raw!r}")
        return default


def data_dir() -> Path:
    return Path(get_secret("TRACKER_DATA_DIR", DEFAULT_DATA_DIR))


def gemini_model() -> str:
    return get_secret("GEMINI_MODEL", DEFAULT_GEMINI_MODEL)


def save_debounce_seconds() -> float:
    return max(0, get_int_setting("TRACKER_SAVE_DEBOUNCE_MS", DEFAULT_SAVE_DEBOUNCE_MS)) / 1000.0


def default_theme() -> str:
    return get_secret("TRACKER_THEME", DEFAULT_THEME)


@st.cache_resource(show_spinner=False)
def validate_runtime_config() -> dict[str, Any]:
    missing: list[str] = []
    for key in ["GEMINI_API_KEY"]:
        if not get_secret(key):
            missing.append(key)
            _log_once(f"missing:{key}", logging.WARNING, f"Missing runtime config key: {key}")
    path = data_dir()
    _log_once(f"data_dir:{path}", logging.INFO, f"Dashboard data dir: {path}")
    return {"missing": missing, "data_dir": str(path)}
