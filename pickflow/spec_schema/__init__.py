"""Action metadata schema - declared actions and selections."""

from .action_spec import (
    ActionDefinition,
    Choice,
    ElementRef,
    FilterBy,
    MultiSelect,
    RepeatConfig,
    Selection,
    SelectionKind,
    ValidElement,
)
from .validation import validate_action, validate_actions, SpecValidationError, ValidationResult

__all__ = [
    "ActionDefinition",
    "Choice",
    "ElementRef",
    "FilterBy",
    "MultiSelect",
    "RepeatConfig",
    "Selection",
    "SelectionKind",
    "ValidElement",
    "validate_action",
    "validate_actions",
    "SpecValidationError",
    "ValidationResult",
]
