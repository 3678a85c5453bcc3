"""
Display Cache - Last-known labels for selected values.

Labels are keyed by (selection name, value) and kept independently of the
argument store, so a value that a later selection filtered out of the
current choices still renders with the label it had when it was picked.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any
import json


def display_from_value(value: Any) -> str:
    """
    Best-effort label for a value that has no cached display.

    Priority: `display` field, `name` field, primitive `value` field,
    then plain string conversion.
    """
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(display_from_value(v) for v in value)
    if not isinstance(value, Mapping):
        return str(value)
    if isinstance(value.get("display"), str):
        return value["display"]
    if isinstance(value.get("name"), str):
        return value["name"]
    inner = value.get("value")
    if inner is not None and not isinstance(inner, (Mapping, list, tuple)):
        return str(inner)
    return str(value)


def value_key(value: Any) -> str:
    """Stable key for arbitrary (JSON-like) values."""
    return json.dumps(value, sort_keys=True, default=str)


class DisplayCache:
    """(selection name, value) -> label."""

    def __init__(self) -> None:
        self._labels: dict[tuple[str, str], str] = {}

    def remember(self, selection_name: str, value: Any, label: str) -> None:
        self._labels[(selection_name, value_key(value))] = label

    def lookup(self, selection_name: str, value: Any) -> str | None:
        return self._labels.get((selection_name, value_key(value)))

    def label_for(self, selection_name: str, value: Any) -> str:
        """Cached label, per item for list values, falling back to display_from_value."""
        cached = self.lookup(selection_name, value)
        if cached is not None:
            return cached
        if isinstance(value, list):
            return ", ".join(self.label_for(selection_name, v) for v in value)
        return display_from_value(value)

    def forget(self, selection_name: str) -> None:
        for key in [k for k in self._labels if k[0] == selection_name]:
            del self._labels[key]

    def clear(self) -> None:
        self._labels.clear()

    def __len__(self) -> int:
        return len(self._labels)
