"""
Action Validation - Structural checks for declared actions.

Validates that:
1. Selection names are present and unique within an action
2. filterBy / dependsOn reference selections declared earlier
3. Multi-select bounds are consistent
4. Kind-specific data is present and sane
"""

from __future__ import annotations
from dataclasses import dataclass
import re

from ..exceptions import PickflowError
from .action_spec import ActionDefinition, Selection, SelectionKind


class SpecValidationError(PickflowError):
    """Raised when action metadata validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Action validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_action(action: ActionDefinition, raise_on_error: bool = False) -> ValidationResult:
    """
    Validate a single action definition.

    Returns ValidationResult with errors and warnings.
    Raises SpecValidationError if raise_on_error=True and errors exist.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not action.name:
        errors.append("Action has empty name")

    seen: set[str] = set()
    for selection in action.selections:
        if not selection.name:
            errors.append(f"Action '{action.name}' has a selection with empty name")
            continue
        if selection.name in seen:
            errors.append(f"Action '{action.name}': duplicate selection '{selection.name}'")
        sel_errors, sel_warnings = _validate_selection(selection, seen)
        errors.extend(f"Action '{action.name}': {e}" for e in sel_errors)
        warnings.extend(f"Action '{action.name}': {w}" for w in sel_warnings)
        seen.add(selection.name)

    if raise_on_error and errors:
        raise SpecValidationError(errors)

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def validate_actions(
    actions: list[ActionDefinition], raise_on_error: bool = False
) -> ValidationResult:
    """Validate a set of actions, including name uniqueness across them."""
    errors: list[str] = []
    warnings: list[str] = []
    names: set[str] = set()

    for action in actions:
        if action.name in names:
            errors.append(f"Duplicate action '{action.name}'")
        names.add(action.name)
        result = validate_action(action)
        errors.extend(result.errors)
        warnings.extend(result.warnings)

    if raise_on_error and errors:
        raise SpecValidationError(errors)

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def _validate_selection(
    selection: Selection, earlier: set[str]
) -> tuple[list[str], list[str]]:
    """Validate one selection against the names declared before it."""
    errors: list[str] = []
    warnings: list[str] = []
    name = selection.name

    if selection.filter_by and selection.filter_by.selection_name not in earlier:
        errors.append(
            f"Selection '{name}' filters by '{selection.filter_by.selection_name}' "
            "which is not declared before it"
        )

    if selection.depends_on and selection.depends_on not in earlier:
        errors.append(
            f"Selection '{name}' depends on '{selection.depends_on}' "
            "which is not declared before it"
        )

    if selection.multi_select:
        ms = selection.multi_select
        if ms.min < 0:
            errors.append(f"Selection '{name}' has negative multiSelect.min")
        if ms.max is not None and ms.max < ms.min:
            errors.append(f"Selection '{name}' has multiSelect.max < multiSelect.min")
        if not selection.is_choice_based:
            errors.append(f"Selection '{name}' is multi-select but kind is {selection.kind.value}")

    if selection.repeat and selection.multi_select:
        errors.append(f"Selection '{name}' cannot be both repeating and multi-select")

    if selection.kind == SelectionKind.NUMBER:
        if selection.min is not None and selection.max is not None and selection.max < selection.min:
            errors.append(f"Selection '{name}' has max < min")

    if selection.kind == SelectionKind.TEXT:
        if (
            selection.min_length is not None
            and selection.max_length is not None
            and selection.max_length < selection.min_length
        ):
            errors.append(f"Selection '{name}' has maxLength < minLength")
        if selection.pattern:
            try:
                re.compile(selection.pattern)
            except re.error as exc:
                errors.append(f"Selection '{name}' has invalid pattern: {exc}")

    # Warnings for selections that can never be answered locally
    if (
        selection.is_choice_based
        and not selection.static_candidates()
        and not selection.has_dependent_candidates
        and not selection.deferred
        and not selection.repeat
    ):
        warnings.append(f"Selection '{name}' declares no candidates")

    if selection.skip_if_only_one and selection.repeat:
        warnings.append(f"Selection '{name}' is repeating; skipIfOnlyOne is ignored")

    return errors, warnings
