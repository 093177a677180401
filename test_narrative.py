#!/usr/bin/env python3
"""
Narrative analysis: prompt content and every failure path of the API call.
No network access: `narrative.urlopen` is patched.
"""

from __future__ import annotations

import io
import json
import os
import sys
from pathlib import Path
from unittest import mock
from urllib.error import HTTPError, URLError

REPO_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(REPO_ROOT))

import narrative  # noqa: E402

KPIS = {
    "total": 6,
    "completed": 1,
    "completion_pct": 100 / 6,
    "overdue_count": 3,
    "total_overdue_days": 40,
    "total_remaining_days": 22,
    "total_planned_cost": 360.0,
    "total_real_cost": 155.0,
    "cost_deviation": -205.0,
    "high_priority": 2,
    "high_risk": 2,
}


def _response(payload) -> io.BytesIO:
    body = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
    return io.BytesIO(body)


def test_prompt_carries_kpi_numbers() -> None:
    prompt = narrative.build_analysis_prompt(KPIS)
    assert "Total activities tracked: 6" in prompt
    assert "16.7% (1 of 6 completed)" in prompt
    assert "Total accumulated overdue days: 40" in prompt
    assert "R$ 360,00" in prompt
    assert "-R$ 205,00" in prompt
    assert "High risk activities: 2" in prompt


def test_missing_api_key_short_circuits() -> None:
    with mock.patch.dict(os.environ, {"GEMINI_API_KEY": ""}), mock.patch.object(narrative, "urlopen") as opener:
        assert narrative.generate_analysis(KPIS) == "Analysis unavailable: no API key configured."
        opener.assert_not_called()


def test_successful_call_returns_first_candidate_text() -> None:
    payload = {"candidates": [{"content": {"parts": [{"text": "Progress is slow."}]}}]}
    with mock.patch.dict(os.environ, {"GEMINI_API_KEY": "k"}), mock.patch.object(
        narrative, "urlopen", return_value=_response(payload)
    ) as opener:
        assert narrative.generate_analysis(KPIS) == "Progress is slow."
        request = opener.call_args[0][0]
        assert request.get_method() == "POST"
        assert "key=k" in request.full_url
        sent = json.loads(request.data.decode("utf-8"))
        assert "Total activities tracked: 6" in sent["contents"][0]["parts"][0]["text"]


def test_http_error_is_reported_with_status() -> None:
    err = HTTPError("http://x", 500, "boom", hdrs=None, fp=io.BytesIO(b"server down"))
    with mock.patch.dict(os.environ, {"GEMINI_API_KEY": "k"}), mock.patch.object(
        narrative, "urlopen", side_effect=err
    ):
        assert narrative.generate_analysis(KPIS) == "Error generating the analysis: 500 - server down"


def test_network_error_message() -> None:
    with mock.patch.dict(os.environ, {"GEMINI_API_KEY": "k"}), mock.patch.object(
        narrative, "urlopen", side_effect=URLError("offline")
    ):
        assert narrative.generate_analysis(KPIS) == (
            "Error generating the analysis. Check your connection or try again."
        )


def test_bad_payloads() -> None:
    with mock.patch.dict(os.environ, {"GEMINI_API_KEY": "k"}):
        with mock.patch.object(narrative, "urlopen", return_value=_response(b"<html>")):
            assert narrative.generate_analysis(KPIS).startswith("Error processing the API response")
        with mock.patch.object(narrative, "urlopen", return_value=_response({"candidates": []})):
            assert narrative.generate_analysis(KPIS) == "Could not generate the analysis. Please try again."


def test_request_analysis_raises_displayable_error() -> None:
    with mock.patch.dict(os.environ, {"GEMINI_API_KEY": ""}):
        try:
            narrative.request_analysis(KPIS)
        except narrative.AnalysisError as err:
            assert str(err) == "Analysis unavailable: no API key configured."
        else:
            raise AssertionError("expected AnalysisError")


def test_cached_analysis_retries_failures_and_keeps_successes() -> None:
    narrative._cached_request.clear()
    payload = {"candidates": [{"content": {"parts": [{"text": "On track."}]}}]}
    with mock.patch.dict(os.environ, {"GEMINI_API_KEY": ""}):
        assert narrative.cached_analysis(KPIS) == "Analysis unavailable: no API key configured."
    with mock.patch.dict(os.environ, {"GEMINI_API_KEY": "k"}):
        with mock.patch.object(narrative, "urlopen", return_value=_response(payload)) as opener:
            assert narrative.cached_analysis(KPIS) == "On track."
            assert opener.call_count == 1
        with mock.patch.object(narrative, "urlopen", side_effect=URLError("offline")) as opener:
            assert narrative.cached_analysis(KPIS) == "On track."
            opener.assert_not_called()
    narrative._cached_request.clear()


if __name__ == "__main__":
    test_prompt_carries_kpi_numbers()
    test_missing_api_key_short_circuits()
    test_successful_call_returns_first_candidate_text()
    test_http_error_is_reported_with_status()
    test_network_error_message()
    test_bad_payloads()
    test_request_analysis_raises_displayable_error()
    test_cached_analysis_retries_failures_and_keeps_successes()
    print("PASS")
