"""
Choice Filter - Effective candidate set for a selection.

Resolution order for the base set:
1. Repeating coordinator's current choices (while that selection is mid-protocol)
2. Choices fetched from the server for this selection (deferred snapshot)
3. dependsOn lookup keyed by the string form of the dependent value
4. Static choices / valid elements

Then filterBy narrows the set, and choices already bound to an earlier
selection of the same kind are excluded. Declaration order is preserved
throughout, so the result is deterministic for a given store.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

from ..spec_schema.action_spec import (
    ActionDefinition,
    Choice,
    MultiSelect,
    Selection,
    SelectionKind,
    ValidElement,
)

if TYPE_CHECKING:
    from .arguments import ArgumentStore

# Kinds that take part in cross-selection exclusion
EXCLUSIVE_KINDS = frozenset({SelectionKind.CHOICE, SelectionKind.ELEMENT})


@dataclass
class ChoiceSnapshot:
    """Candidates fetched from the server when a deferred selection became current."""
    choices: list[Choice] | None = None
    valid_elements: list[ValidElement] | None = None
    multi_select: MultiSelect | None = None

    def candidates(self) -> list[Choice] | None:
        if self.choices is not None:
            return list(self.choices)
        if self.valid_elements is not None:
            return [el.to_choice() for el in self.valid_elements]
        return None


def dependent_key(value: Any) -> str:
    """
    String form of a dependent value, as used for choicesByDependentValue keys.

    Keys are produced by the game layer's own string conversion, so
    booleans, null and whole floats are rendered the same way it does.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(dependent_key(v) for v in value)
    if isinstance(value, Mapping):
        if "id" in value:
            return dependent_key(value["id"])
        return "[object Object]"
    return str(value)


def field_of(value: Any, key: str) -> Any:
    """Read `key` from a choice value (mapping entry or attribute)."""
    if isinstance(value, Mapping):
        return value.get(key)
    return getattr(value, key, None)


def element_identity(value: Any) -> Any:
    """Element id for a bound element value (plain id or {id: ...} object)."""
    if isinstance(value, Mapping) and "id" in value:
        return value["id"]
    return value


def base_candidates(
    selection: Selection,
    args: ArgumentStore,
    repeating_choices: list[Choice] | None = None,
    snapshot: ChoiceSnapshot | None = None,
) -> list[Choice]:
    """Candidate set before filterBy and exclusion are applied."""
    if repeating_choices is not None:
        return list(repeating_choices)

    if snapshot is not None:
        fetched = snapshot.candidates()
        if fetched is not None:
            return fetched

    if selection.depends_on is not None and selection.has_dependent_candidates:
        dependency = args.get(selection.depends_on)
        if dependency.is_unset:
            return []
        key = dependent_key(dependency.value)
        if selection.kind == SelectionKind.ELEMENT:
            return [el.to_choice() for el in selection.elements_by_dependent_value.get(key, [])]
        return list(selection.choices_by_dependent_value.get(key, []))

    return selection.static_candidates()


def apply_filter_by(selection: Selection, choices: list[Choice], args: ArgumentStore) -> list[Choice]:
    if selection.filter_by is None:
        return choices
    source = args.get(selection.filter_by.selection_name)
    if not source.is_set:
        return choices
    key = selection.filter_by.key
    return [c for c in choices if field_of(c.value, key) == source.value]


def bound_elsewhere(selection: Selection, action: ActionDefinition, args: ArgumentStore) -> list[Any]:
    """Values bound to earlier selections of the same kind."""
    if selection.kind not in EXCLUSIVE_KINDS:
        return []
    taken: list[Any] = []
    for earlier in action.selections_before(selection.name):
        if earlier.kind != selection.kind:
            continue
        entry = args.get(earlier.name)
        if not entry.is_set:
            continue
        values = entry.value if isinstance(entry.value, list) else [entry.value]
        if selection.kind == SelectionKind.ELEMENT:
            taken.extend(element_identity(v) for v in values)
        else:
            taken.extend(values)
    return taken


def available_choices(
    selection: Selection,
    action: ActionDefinition,
    args: ArgumentStore,
    repeating_choices: list[Choice] | None = None,
    snapshot: ChoiceSnapshot | None = None,
) -> list[Choice]:
    """
    Effective, order-stable candidates for `selection` given the store.

    Number and text selections have no candidates and return [].
    """
    if not selection.is_choice_based:
        return []

    choices = base_candidates(selection, args, repeating_choices, snapshot)
    choices = apply_filter_by(selection, choices, args)

    taken = bound_elsewhere(selection, action, args)
    if taken:
        choices = [c for c in choices if c.value not in taken]

    return choices


def available_elements(
    selection: Selection,
    action: ActionDefinition,
    args: ArgumentStore,
    snapshot: ChoiceSnapshot | None = None,
) -> list[ValidElement]:
    """Valid elements for an Element selection, narrowed like its choices."""
    if selection.kind != SelectionKind.ELEMENT:
        return []

    if snapshot is not None and snapshot.valid_elements is not None:
        elements = list(snapshot.valid_elements)
    elif selection.depends_on is not None and selection.elements_by_dependent_value:
        dependency = args.get(selection.depends_on)
        if dependency.is_unset:
            return []
        elements = list(selection.elements_by_dependent_value.get(dependent_key(dependency.value), []))
    else:
        elements = list(selection.valid_elements)

    allowed = {c.value for c in available_choices(selection, action, args, snapshot=snapshot)}
    return [el for el in elements if el.id in allowed]


def effective_multi_select(
    selection: Selection,
    args: ArgumentStore,
    snapshot: ChoiceSnapshot | None = None,
) -> MultiSelect | None:
    """Multi-select bounds after server and dependent-value overrides."""
    if snapshot is not None and snapshot.multi_select is not None:
        return snapshot.multi_select
    if selection.depends_on is not None and selection.multi_select_by_dependent_value:
        dependency = args.get(selection.depends_on)
        if dependency.is_set:
            key = dependent_key(dependency.value)
            if key in selection.multi_select_by_dependent_value:
                return selection.multi_select_by_dependent_value[key]
    return selection.multi_select


def find_choice(choices: list[Choice], value: Any) -> Choice | None:
    """
    Locate the choice a submitted value refers to.

    Accepts the choice's value itself, or the `value`/`id` field of an
    object-valued choice (board surfaces often report only the id).
    """
    for choice in choices:
        if choice.value == value:
            return choice
    for choice in choices:
        if isinstance(choice.value, Mapping):
            if choice.value.get("value") == value or choice.value.get("id") == value:
                return choice
    return None


@dataclass
class ChoiceFetch:
    """Result of asking the server for a deferred selection's candidates."""
    success: bool
    error: str | None = None
    snapshot: ChoiceSnapshot | None = None

    @classmethod
    def failure(cls, error: str) -> ChoiceFetch:
        return cls(success=False, error=error)
