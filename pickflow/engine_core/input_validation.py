"""
Input Validation - Local checks on a value before it is bound.

Choice-based selections accept a value only if it refers to an enabled
candidate of the current choice set. When no candidates are known
locally the value is accepted and left to the server. Number and text
selections are checked against their declared constraints.
Repeating selections are always validated remotely.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import re

from ..spec_schema.action_spec import Choice, Selection, SelectionKind
from .choice_filter import element_identity, find_choice
from .cursor import bound_value


@dataclass
class FillResult:
    """Whether a value was accepted, with the candidate it matched."""
    valid: bool
    error: str | None = None
    choice: Choice | None = None

    @classmethod
    def ok(cls, choice: Choice | None = None) -> FillResult:
        return cls(valid=True, choice=choice)

    @classmethod
    def invalid(cls, error: str) -> FillResult:
        return cls(valid=False, error=error)


def match_candidate(selection: Selection, choices: list[Choice], value: Any) -> Choice | None:
    """Find the candidate `value` refers to, by raw or bound value."""
    if selection.kind == SelectionKind.ELEMENT:
        value = element_identity(value)
    match = find_choice(choices, value)
    if match is not None:
        return match
    for choice in choices:
        if bound_value(selection, choice) == value:
            return choice
    return None


def check_choice(selection: Selection, choices: list[Choice], value: Any) -> FillResult:
    if not choices:
        return FillResult.ok()
    match = match_candidate(selection, choices, value)
    if match is None:
        return FillResult.invalid(f'Invalid selection for "{selection.name}"')
    if not match.is_enabled:
        return FillResult.invalid(f'"{match.display}" is not selectable: {match.disabled}')
    return FillResult.ok(match)


def check_number(selection: Selection, value: Any) -> FillResult:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return FillResult.invalid(f'"{selection.name}" must be a number')
    if selection.integer and not float(value).is_integer():
        return FillResult.invalid(f'"{selection.name}" must be a whole number')
    if selection.min is not None and value < selection.min:
        return FillResult.invalid(f'"{selection.name}" must be at least {selection.min:g}')
    if selection.max is not None and value > selection.max:
        return FillResult.invalid(f'"{selection.name}" must be at most {selection.max:g}')
    return FillResult.ok()


def check_text(selection: Selection, value: Any) -> FillResult:
    if not isinstance(value, str):
        return FillResult.invalid(f'"{selection.name}" must be text')
    if selection.min_length is not None and len(value) < selection.min_length:
        return FillResult.invalid(
            f'"{selection.name}" must be at least {selection.min_length} characters'
        )
    if selection.max_length is not None and len(value) > selection.max_length:
        return FillResult.invalid(
            f'"{selection.name}" must be at most {selection.max_length} characters'
        )
    if selection.pattern and re.fullmatch(selection.pattern, value) is None:
        return FillResult.invalid(f'"{selection.name}" does not match the required format')
    return FillResult.ok()


def check_fill(selection: Selection, choices: list[Choice], value: Any) -> FillResult:
    """Validate a single (non-accumulated) value for `selection`."""
    if selection.is_repeating:
        return FillResult.ok()
    if selection.kind == SelectionKind.NUMBER:
        return check_number(selection, value)
    if selection.kind == SelectionKind.TEXT:
        return check_text(selection, value)
    return check_choice(selection, choices, value)


def check_values(selection: Selection, choices: list[Choice], values: list[Any]) -> FillResult:
    """Validate every item of a multi-select value."""
    for value in values:
        result = check_choice(selection, choices, value)
        if not result.valid:
            return result
    return FillResult.ok()
