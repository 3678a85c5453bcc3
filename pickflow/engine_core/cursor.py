"""
Selection Cursor - Which selection needs input next.

Two ordered passes over the declared selections:
1. Required selections, in declaration order
2. Optional selections, in declaration order

A required selection is never left unresolved behind an optional one.
While scanning, a selection with skip_if_only_one and exactly one enabled
candidate is auto-filled and the scan continues past it.

The cursor returns None only when every selection is SKIPPED or SET,
which is the action's ready-to-submit condition.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable
import logging

from ..spec_schema.action_spec import ActionDefinition, Choice, MultiSelect, Selection, SelectionKind
from .arguments import ArgumentStore
from .choice_filter import available_choices, element_identity

logger = logging.getLogger(__name__)

ChoiceProvider = Callable[[Selection], list[Choice]]
MultiSelectProvider = Callable[[Selection], MultiSelect | None]


@dataclass(frozen=True)
class AutoFill:
    """Record of a selection filled without user input."""
    selection_name: str
    value: Any
    display: str


def player_identifier(value: Any) -> Any:
    """Seat/position of a player candidate value."""
    if isinstance(value, Mapping):
        for key in ("position", "seat", "id"):
            if key in value:
                return value[key]
    return value


def bound_value(selection: Selection, choice: Choice) -> Any:
    """The value written to the store when `choice` is picked for `selection`."""
    if selection.kind == SelectionKind.PLAYER:
        return player_identifier(choice.value)
    if selection.kind == SelectionKind.ELEMENT:
        return element_identity(choice.value)
    return choice.value


@dataclass
class SelectionCursor:
    """
    Cursor over one action's selections.

    choices_for / multi_select_for supply the effective candidates and
    multi-select bounds (which depend on sub-protocol and fetched state
    the cursor itself does not own). Selections named in `exempt` are
    under an active sub-protocol and are never auto-filled.
    """
    action: ActionDefinition
    choices_for: ChoiceProvider
    multi_select_for: MultiSelectProvider = lambda selection: selection.multi_select
    auto_fill: bool = True
    exempt: frozenset[str] = field(default_factory=frozenset)

    def next(
        self,
        args: ArgumentStore,
        on_auto_fill: Callable[[AutoFill], None] | None = None,
    ) -> Selection | None:
        for optional_pass in (False, True):
            for selection in self.action.selections:
                if selection.optional != optional_pass:
                    continue
                if not args.needs_input(selection.name):
                    continue

                filled = self.try_auto_fill(selection, args)
                if filled is not None:
                    if on_auto_fill is not None:
                        on_auto_fill(filled)
                    continue

                return selection
        return None

    def can_auto_fill(self, selection: Selection) -> bool:
        return (
            self.auto_fill
            and selection.skip_if_only_one
            and selection.is_choice_based
            and not selection.is_repeating
            and selection.name not in self.exempt
        )

    def try_auto_fill(self, selection: Selection, args: ArgumentStore) -> AutoFill | None:
        """Bind the single enabled candidate of `selection`, if that is all there is."""
        if not self.can_auto_fill(selection):
            return None

        enabled = [c for c in self.choices_for(selection) if c.is_enabled]
        if len(enabled) != 1:
            return None

        choice = enabled[0]
        value = bound_value(selection, choice)

        multi = self.multi_select_for(selection)
        if multi is not None:
            if multi.min > 1:
                return None
            value = [value]

        args.set(selection.name, value)
        logger.debug("Auto-filled %s.%s with %r", self.action.name, selection.name, value)
        return AutoFill(selection_name=selection.name, value=value, display=choice.display)


def next_selection(
    action: ActionDefinition,
    args: ArgumentStore,
    auto_fill: bool = True,
) -> Selection | None:
    """
    Next selection needing input, using static candidates only.

    Convenience wrapper for callers without repeating or fetched state.
    """
    cursor = SelectionCursor(
        action=action,
        choices_for=lambda selection: available_choices(selection, action, args),
        auto_fill=auto_fill,
    )
    return cursor.next(args)


def is_complete(action: ActionDefinition, args: ArgumentStore) -> bool:
    """True when no selection is UNSET. Has no side effects."""
    return all(not args.needs_input(selection.name) for selection in action.selections)
