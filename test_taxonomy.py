#!/usr/bin/env python3
"""
Taxonomy checks: ordered merge of built-ins and custom entries, custom entry
validation, badge colours.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(REPO_ROOT))

from taxonomy import (  # noqa: E402
    BUILTIN_RISKS,
    BUILTIN_STATUSES,
    OrderedNameSet,
    TaxonomyEntry,
    add_custom_entry,
    resolve,
    resolve_risks,
    status_badge_colors,
)


def test_resolve_drops_duplicate_custom_names() -> None:
    customs = [TaxonomyEntry("Completed", "#00ff00"), TaxonomyEntry("Blocked", "#ff0000")]
    assert resolve(BUILTIN_STATUSES, customs) == [
        "Completed",
        "In Progress",
        "Delayed",
        "Not Started",
        "Blocked",
    ]


def test_resolve_accepts_raw_dicts_and_keeps_custom_order() -> None:
    customs = [{"name": "Waiting"}, {"name": "Blocked"}, {"name": "Waiting"}, {"color": "#fff"}]
    assert resolve_risks(customs) == ["High", "Medium", "Low", "Waiting", "Blocked"]


def test_resolve_treats_non_list_customs_as_empty() -> None:
    assert resolve(BUILTIN_RISKS, None) == BUILTIN_RISKS
    assert resolve(BUILTIN_RISKS, "Blocked") == BUILTIN_RISKS


def test_ordered_name_set() -> None:
    names = OrderedNameSet(["b", "a"])
    assert names.add("c") is True
    assert names.add("a") is False
    assert names.to_list() == ["b", "a", "c"]
    assert "c" in names and len(names) == 3


def test_add_custom_entry_rejects_blank_names() -> None:
    customs = [TaxonomyEntry("Blocked")]
    updated, message, ok = add_custom_entry(BUILTIN_STATUSES, customs, "   ", kind="Status")
    assert ok is False
    assert message == "Status name cannot be empty!"
    assert updated == customs
    assert customs == [TaxonomyEntry("Blocked")]


def test_add_custom_entry_rejects_existing_names_case_sensitively() -> None:
    customs = [TaxonomyEntry("Blocked")]
    _, message, ok = add_custom_entry(BUILTIN_STATUSES, customs, " Delayed ", kind="Status")
    assert ok is False and message == "Status already exists!"
    _, _, ok = add_custom_entry(BUILTIN_STATUSES, customs, "Blocked")
    assert ok is False
    updated, message, ok = add_custom_entry(BUILTIN_STATUSES, customs, "delayed", "#123456")
    assert ok is True
    assert message == 'Status "delayed" added!'
    assert updated == [TaxonomyEntry("Blocked"), TaxonomyEntry("delayed", "#123456")]
    assert len(customs) == 1


def test_status_badge_colors() -> None:
    assert status_badge_colors("Completed", []) == ("#D1FAE5", "#065F46")
    # dark custom swatch -> light text, light swatch -> dark text
    assert status_badge_colors("Blocked", [TaxonomyEntry("Blocked", "#000000")]) == ("#000000", "#FFFFFF")
    assert status_badge_colors("Review", [TaxonomyEntry("Review", "#FFFF00")]) == ("#FFFF00", "#1F2937")
    # unknown label falls back to the theme table header / text colours
    assert status_badge_colors("Unknown", [], "light") == ("#F9FAFB", "#1F2937")


if __name__ == "__main__":
    test_resolve_drops_duplicate_custom_names()
    test_resolve_accepts_raw_dicts_and_keeps_custom_order()
    test_resolve_treats_non_list_customs_as_empty()
    test_ordered_name_set()
    test_add_custom_entry_rejects_blank_names()
    test_add_custom_entry_rejects_existing_names_case_sensitively()
    test_status_badge_colors()
    print("PASS")
