"""
Action Session - Everything held while one action is being configured.

LIFECYCLE:
1. Created when an action is started (explicitly, auto-started, or as a follow-up)
2. Mutated only through the controller's entry points
3. Destroyed, all state cleared at once, on:
   - cancellation
   - submission (success or failure)
   - the server completing the action during a repeating step
   - the action becoming unavailable

At most one session is live at a time.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import time
import uuid

from ..spec_schema.action_spec import ActionDefinition, Choice, MultiSelect, Selection
from ..engine_core.arguments import ArgumentStore
from ..engine_core.choice_filter import ChoiceSnapshot, available_choices, available_elements, effective_multi_select
from ..engine_core.cursor import SelectionCursor
from ..engine_core.display import DisplayCache
from ..engine_core.multi_select import MultiSelectState
from ..engine_core.repeating import RepeatingCoordinator


class SessionPhase(Enum):
    """Phase of the action-session state machine."""
    NO_ACTION = "no_action_selected"
    CONFIGURING = "configuring"
    SUBMITTING = "submitting"


@dataclass
class CollectedSelection:
    """A resolved selection with the label captured when it was picked."""
    name: str
    value: Any
    display: str
    skipped: bool


@dataclass
class ActionSession:
    """
    One action being configured.

    Holds the argument store plus the transient sub-protocol state
    (repeating coordinator, multi-select accumulator), server-fetched
    choice snapshots, queued prefills and the display-label cache.
    """
    action: ActionDefinition
    args: ArgumentStore = field(default_factory=ArgumentStore)
    display: DisplayCache = field(default_factory=DisplayCache)
    phase: SessionPhase = SessionPhase.CONFIGURING

    repeating: RepeatingCoordinator | None = None
    multi_select: MultiSelectState | None = None

    snapshots: dict[str, ChoiceSnapshot] = field(default_factory=dict)
    fetched: set[str] = field(default_factory=set)
    prefills: dict[str, Any] = field(default_factory=dict)

    # Follow-up sessions may configure actions outside the availability view
    follow_up: bool = False

    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: float = field(default_factory=time.time)

    @property
    def action_name(self) -> str:
        return self.action.name

    @property
    def is_configuring(self) -> bool:
        return self.phase == SessionPhase.CONFIGURING

    def is_repeating(self, selection_name: str) -> bool:
        return self.repeating is not None and self.repeating.selection.name == selection_name

    def is_accumulating(self, selection_name: str) -> bool:
        return self.multi_select is not None and self.multi_select.selection_name == selection_name

    # -- derived views -----------------------------------------------------

    def choices_for(self, selection: Selection) -> list[Choice]:
        repeating_choices = None
        if self.is_repeating(selection.name):
            repeating_choices = self.repeating.state.current_choices
        return available_choices(
            selection,
            self.action,
            self.args,
            repeating_choices=repeating_choices,
            snapshot=self.snapshots.get(selection.name),
        )

    def elements_for(self, selection: Selection):
        return available_elements(
            selection, self.action, self.args, snapshot=self.snapshots.get(selection.name)
        )

    def multi_select_for(self, selection: Selection) -> MultiSelect | None:
        return effective_multi_select(selection, self.args, self.snapshots.get(selection.name))

    def cursor(self, auto_fill: bool, awaiting_fetch: frozenset[str] = frozenset()) -> SelectionCursor:
        """Cursor with every selection under a sub-protocol or pending input exempted from auto-fill."""
        exempt = set(self.prefills) | set(awaiting_fetch)
        if self.repeating is not None:
            exempt.add(self.repeating.selection.name)
        if self.multi_select is not None:
            exempt.add(self.multi_select.selection_name)
        return SelectionCursor(
            action=self.action,
            choices_for=self.choices_for,
            multi_select_for=self.multi_select_for,
            auto_fill=auto_fill,
            exempt=frozenset(exempt),
        )

    def prior_args(self) -> dict[str, Any]:
        return self.args.resolved_values()

    def remember(self, selection_name: str, value: Any, label: str) -> None:
        self.display.remember(selection_name, value, label)

    def collected_selections(self) -> list[CollectedSelection]:
        collected = []
        for selection in self.action.selections:
            entry = self.args.get(selection.name)
            if entry.is_unset:
                continue
            if entry.is_skipped:
                collected.append(CollectedSelection(selection.name, None, "", True))
                continue
            collected.append(
                CollectedSelection(
                    name=selection.name,
                    value=entry.value,
                    display=self.display.label_for(selection.name, entry.value),
                    skipped=False,
                )
            )
        return collected

    def invalidate_after(self, selection_name: str) -> None:
        """Drop fetched choices for selections declared after `selection_name`."""
        for later in self.action.selections_after(selection_name):
            self.snapshots.pop(later.name, None)
            self.fetched.discard(later.name)

    def teardown(self) -> None:
        """Clear all state. A still-running repeating step will find nothing to update."""
        if self.repeating is not None:
            self.repeating.cancel()
        self.repeating = None
        self.multi_select = None
        self.args.reset()
        self.display.clear()
        self.snapshots.clear()
        self.fetched.clear()
        self.prefills.clear()
        self.phase = SessionPhase.NO_ACTION
