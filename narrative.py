from __future__ import annotations

import json
import logging
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

import streamlit as st

from formatting import format_currency
from runtime_checks import debug_enabled, gemini_model, get_secret

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
REQUEST_TIMEOUT_SECONDS = 30

NARRATIVE_LOGGER = logging.getLogger("narrative")


class AnalysisError(RuntimeError):
    """Failed analysis request; the message is safe to show to the user."""


def _ensure_logger() -> None:
    if not NARRATIVE_LOGGER.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [narrative] %(levelname)s: %(message)s")
        )
        NARRATIVE_LOGGER.addHandler(handler)
    NARRATIVE_LOGGER.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)


def _log(level: int, message: str) -> None:
    _ensure_logger()
    NARRATIVE_LOGGER.log(level, message)


def build_analysis_prompt(kpis: dict[str, Any]) -> str:
    total = kpis.get("total", 0)
    completed = kpis.get("completed", 0)
    return (
        "Write a concise, professional analysis of activity performance based on the following data:\n"
        f"- Total activities tracked: {total}\n"
        f"- Overall completion: {kpis.get('completion_pct', 0.0):.1f}% ({completed} of {total} completed)\n"
        f"- Total accumulated overdue days: {kpis.get('total_overdue_days', 0)} "
        f"({kpis.get('overdue_count', 0)} delayed activities)\n"
        f"- Total remaining days on unfinished activities: {kpis.get('total_remaining_days', 0)}\n"
        f"- Total planned cost: {format_currency(kpis.get('total_planned_cost'))}\n"
        f"- Total real cost: {format_currency(kpis.get('total_real_cost'))}\n"
        f"- Cost deviation: {format_currency(kpis.get('cost_deviation'))} "
        "(positive means real exceeded planned, negative means real was lower)\n"
        f"- High priority activities: {kpis.get('high_priority', 0)}\n"
        f"- High risk activities: {kpis.get('high_risk', 0)}\n"
        "\n"
        "The analysis should give insight into overall progress, timeliness and cost management. "
        "Highlight strengths and the areas that need attention."
    )


def _extract_text(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) and text else None


def request_analysis(kpis: dict[str, Any], *, timeout: float = REQUEST_TIMEOUT_SECONDS) -> str:
    """
    Ask the text-generation API for commentary on the KPI totals.
    Raises AnalysisError with a displayable message on any failure.
    """
    api_key = get_secret("GEMINI_API_KEY")
    if not api_key:
        _log(logging.WARNING, "request_analysis missing GEMINI_API_KEY")
        raise AnalysisError("Analysis unavailable: no API key configured.")

    url = f"{GEMINI_BASE_URL}/{gemini_model()}:generateContent?{urlencode({'key': api_key})}"
    body = json.dumps(
        {"contents": [{"role": "user", "parts": [{"text": build_analysis_prompt(kpis)}]}]}
    ).encode("utf-8")
    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    try:
        req = Request(url, data=body, headers=headers, method="POST")
        with urlopen(req, timeout=timeout) as response:
            raw = response.read().decode("utf-8")
    except HTTPError as err:
        detail = ""
        try:
            detail = err.read().decode("utf-8")
        except Exception:
            detail = ""
        _log(logging.WARNING, f"request_analysis http_error status={err.code} body={detail[:2000]}")
        raise AnalysisError(
            f"Error generating the analysis: {err.code} - {detail[:200] or 'empty or invalid response.'}"
        ) from err
    except URLError as err:
        _log(logging.WARNING, f"request_analysis url_error reason={getattr(err, 'reason', None)}")
        raise AnalysisError("Error generating the analysis. Check your connection or try again.") from err
    except OSError as err:
        _log(logging.WARNING, f"request_analysis error={err}")
        raise AnalysisError("Error generating the analysis. Check your connection or try again.") from err

    try:
        payload = json.loads(raw or "{}")
    except ValueError as err:
        _log(logging.WARNING, f"request_analysis invalid_json body={raw[:2000]}")
        raise AnalysisError(
            f"Error processing the API response: invalid format. Raw response: {raw[:200]}..."
        ) from err

    text = _extract_text(payload)
    if text is None:
        _log(logging.WARNING, f"request_analysis unexpected_payload payload={str(payload)[:2000]}")
        raise AnalysisError("Could not generate the analysis. Please try again.")
    return text


def generate_analysis(kpis: dict[str, Any], *, timeout: float = REQUEST_TIMEOUT_SECONDS) -> str:
    """Analysis text, or the error message when the request failed."""
    try:
        return request_analysis(kpis, timeout=timeout)
    except AnalysisError as err:
        return str(err)


# st.cache_data does not cache raised exceptions: failures are retried on the next call.
@st.cache_data(show_spinner=False, ttl=3600)
def _cached_request(kpi_items: tuple) -> str:
    return request_analysis(dict(kpi_items))


def cached_analysis(kpis: dict[str, Any]) -> str:
    try:
        return _cached_request(tuple(sorted(kpis.items())))
    except AnalysisError as err:
        return str(err)
