"""
Status and risk taxonomies: built-in labels, custom entries and badge colours.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from colors import text_color_for
from theme import get_theme

COMPLETED = "Completed"
IN_PROGRESS = "In Progress"
DELAYED = "Delayed"
NOT_STARTED = "Not Started"

BUILTIN_STATUSES = [COMPLETED, IN_PROGRESS, DELAYED, NOT_STARTED]
BUILTIN_RISKS = ["High", "Medium", "Low"]

STATUS_BADGE_COLORS = {
    COMPLETED: ("#D1FAE5", "#065F46"),
    IN_PROGRESS: ("#DBEAFE", "#1E40AF"),
    DELAYED: ("#FEE2E2", "#991B1B"),
    NOT_STARTED: ("#F3F4F6", "#374151"),
}
RISK_BADGE_COLORS = {
    "High": ("#FEE2E2", "#991B1B"),
    "Medium": ("#FEF3C7", "#92400E"),
    "Low": ("#D1FAE5", "#065F46"),
}
DEFAULT_CUSTOM_COLOR = "#000000"


@dataclass(frozen=True)
class TaxonomyEntry:
    name: str
    color: str = DEFAULT_CUSTOM_COLOR

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "TaxonomyEntry":
        return cls(name=str(raw.get("name") or ""), color=str(raw.get("color") or DEFAULT_CUSTOM_COLOR))

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "color": self.color}


class OrderedNameSet:
    """Names kept unique in first-insertion order."""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: dict[str, None] = {}
        for name in names:
            self.add(name)

    def add(self, name: str) -> bool:
        if name in self._names:
            return False
        self._names[name] = None
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def to_list(self) -> list[str]:
        return list(self._names)


def _entry_name(entry: Any) -> str | None:
    if isinstance(entry, TaxonomyEntry):
        name = entry.name
    elif isinstance(entry, dict):
        name = entry.get("name")
    else:
        return None
    if not isinstance(name, str) or not name:
        return None
    return name


def entries_from_records(records: Any) -> list[TaxonomyEntry]:
    if not isinstance(records, list):
        return []
    out: list[TaxonomyEntry] = []
    for raw in records:
        if isinstance(raw, TaxonomyEntry):
            out.append(raw)
        elif isinstance(raw, dict) and _entry_name(raw):
            out.append(TaxonomyEntry.from_dict(raw))
    return out


def resolve(builtins: Iterable[str], customs: Any) -> list[str]:
    """Built-ins in fixed order, then custom names in insertion order, no duplicates."""
    names = OrderedNameSet(builtins)
    if isinstance(customs, (list, tuple)):
        for entry in customs:
            name = _entry_name(entry)
            if name is not None:
                names.add(name)
    return names.to_list()


def resolve_statuses(customs: Any) -> list[str]:
    return resolve(BUILTIN_STATUSES, customs)


def resolve_risks(customs: Any) -> list[str]:
    return resolve(BUILTIN_RISKS, customs)


def add_custom_entry(
    builtins: Iterable[str],
    customs: list[TaxonomyEntry],
    name: str | None,
    color: str = DEFAULT_CUSTOM_COLOR,
    kind: str = "Status",
) -> tuple[list[TaxonomyEntry], str, bool]:
    """
    Validate and append a custom taxonomy entry.

    Returns (customs, message, added). A rejected entry leaves `customs`
    untouched and only reports the reason.
    """
    trimmed = (name or "").strip()
    if not trimmed:
        return list(customs), f"{kind} name cannot be empty!", False
    if trimmed in resolve(builtins, customs):
        return list(customs), f"{kind} already exists!", False
    entry = TaxonomyEntry(name=trimmed, color=color or DEFAULT_CUSTOM_COLOR)
    return [*customs, entry], f'{kind} "{trimmed}" added!', True


def _badge_colors(
    name: str,
    customs: Iterable[TaxonomyEntry],
    defaults: dict[str, tuple[str, str]],
    theme_name: str | None,
) -> tuple[str, str]:
    for entry in customs:
        if entry.name == name:
            return entry.color, text_color_for(entry.color)
    if name in defaults:
        return defaults[name]
    theme = get_theme(theme_name)
    return theme["tableHeaderBg"], theme["textColor"]


def status_badge_colors(
    name: str, customs: Iterable[TaxonomyEntry], theme_name: str | None = None
) -> tuple[str, str]:
    return _badge_colors(name, customs, STATUS_BADGE_COLORS, theme_name)


def risk_badge_colors(
    name: str, customs: Iterable[TaxonomyEntry], theme_name: str | None = None
) -> tuple[str, str]:
    return _badge_colors(name, customs, RISK_BADGE_COLORS, theme_name)
