"""
Multi-Select Accumulator - Collects 0..N values for one selection.

States:
    empty -> accumulating (toggle add/remove, capped at max) -> committed

Nothing reaches the argument store until confirm(), which binds the whole
list as a single SET value.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..exceptions import MultiSelectError
from ..spec_schema.action_spec import MultiSelect
from .arguments import ArgumentStore


class ToggleOutcome(Enum):
    """What a toggle did to the accumulated list."""
    ADDED = "added"
    REMOVED = "removed"
    AT_CAPACITY = "at_capacity"
    REJECTED = "rejected"  # Not a selectable candidate; list unchanged


@dataclass
class MultiSelectState:
    """Transient accumulation for one multi-select selection."""
    selection_name: str
    bounds: MultiSelect
    selected_values: list[Any] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.selected_values)

    @property
    def can_confirm(self) -> bool:
        return self.count >= self.bounds.min

    @property
    def is_full(self) -> bool:
        return not self.bounds.allows_more(self.count)

    def toggle(self, value: Any) -> ToggleOutcome:
        """Remove `value` if present, otherwise append it unless at max."""
        if value in self.selected_values:
            self.selected_values.remove(value)
            return ToggleOutcome.REMOVED
        if self.is_full:
            return ToggleOutcome.AT_CAPACITY
        self.selected_values.append(value)
        return ToggleOutcome.ADDED

    def confirm(self, args: ArgumentStore) -> list[Any]:
        """
        Bind the accumulated list to the store.

        Raises MultiSelectError when fewer than `bounds.min` values are selected;
        the store is left untouched in that case.
        """
        if not self.can_confirm:
            raise MultiSelectError(
                f'Selection "{self.selection_name}" needs at least {self.bounds.min} '
                f"value(s), has {self.count}"
            )
        values = list(self.selected_values)
        args.set(self.selection_name, values)
        return values
