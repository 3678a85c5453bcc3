"""
Repeating Selection Coordinator - Server-driven, one value at a time.

Some selections cannot compute their next valid choices locally (discard
until done, draft one card at a time). Each pushed value is sent to the
server, which answers with one of:

    ACCUMULATING   more values wanted; optionally a new candidate set
    DONE           this selection is satisfied; the accumulated list
                   becomes its argument value
    ACTION_COMPLETE the server resolved the whole action; the session ends
    (failure)      the pushed value is popped back off and the error is
                   surfaced; state is otherwise unchanged

Only one step may be in flight at a time.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable
import logging

from ..exceptions import StepInFlightError
from ..spec_schema.action_spec import Choice, Selection
from .choice_filter import find_choice
from .display import display_from_value

logger = logging.getLogger(__name__)


class RepeatPhase(Enum):
    """Phase of a repeating selection."""
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    DONE = "done"
    ACTION_COMPLETE = "action_complete"


@dataclass
class StepOutcome:
    """Result of one selection-step round trip."""
    success: bool
    error: str | None = None
    done: bool = False
    next_choices: list[Choice] | None = None
    action_complete: bool = False

    @classmethod
    def failure(cls, error: str) -> StepOutcome:
        return cls(success=False, error=error)


@dataclass
class RepeatingState:
    """Observable state of the active repeating selection."""
    selection_name: str
    accumulated: list[Choice] = field(default_factory=list)
    awaiting_server: bool = False
    current_choices: list[Choice] | None = None

    @property
    def values(self) -> list[Any]:
        return [item.value for item in self.accumulated]


# (player, selection_name, value, action_name, prior_args) -> StepOutcome
StepFunction = Callable[[int, str, Any, str, dict[str, Any]], Awaitable[StepOutcome]]


def coerce_choice(raw: Any) -> Choice:
    """Normalize a server-provided next choice into a Choice."""
    if isinstance(raw, Choice):
        return raw
    if isinstance(raw, Mapping) and "value" in raw and "display" in raw:
        return Choice(value=raw["value"], display=str(raw["display"]))
    return Choice(value=raw, display=display_from_value(raw))


class RepeatingCoordinator:
    """
    Drives one repeating selection through its step protocol.

    The coordinator never touches the argument store itself; the owner
    reads `final_value` once the phase reaches DONE.
    """

    def __init__(
        self,
        selection: Selection,
        action_name: str,
        player: int,
        step: StepFunction,
    ):
        self.selection = selection
        self.action_name = action_name
        self.player = player
        self._step = step
        self.phase = RepeatPhase.IDLE
        self.cancelled = False
        self.last_error: str | None = None
        self.state = RepeatingState(
            selection_name=selection.name,
            current_choices=list(selection.choices) if selection.choices else None,
        )

    @property
    def awaiting_server(self) -> bool:
        return self.state.awaiting_server

    @property
    def final_value(self) -> list[Any]:
        return self.state.values

    def _label_for(self, value: Any) -> str:
        pool = self.state.current_choices or self.selection.choices
        match = find_choice(pool, value)
        return match.display if match else display_from_value(value)

    async def push(self, value: Any, prior_args: dict[str, Any]) -> StepOutcome:
        """
        Send one value to the server and apply its answer.

        prior_args is the snapshot of SET arguments so far. Transport
        exceptions are reported as a failed outcome, never raised.
        """
        if self.state.awaiting_server:
            raise StepInFlightError(self.selection.name)

        self.state.accumulated.append(Choice(value=value, display=self._label_for(value)))
        self.state.awaiting_server = True
        self.phase = RepeatPhase.ACCUMULATING

        try:
            outcome = await self._step(
                self.player,
                self.selection.name,
                value,
                self.action_name,
                dict(prior_args),
            )
        except Exception as exc:
            logger.warning("Selection step for %s failed: %s", self.selection.name, exc)
            outcome = StepOutcome.failure(str(exc) or "Selection step failed")
        finally:
            self.state.awaiting_server = False

        if self.cancelled:
            logger.debug("Discarding step result for cancelled selection %s", self.selection.name)
            return outcome

        self._apply(outcome)
        return outcome

    def _apply(self, outcome: StepOutcome) -> None:
        if not outcome.success:
            self.state.accumulated.pop()
            self.last_error = outcome.error or "Selection step failed"
            logger.warning("Step rejected for %s: %s", self.selection.name, self.last_error)
            return

        self.last_error = None

        if outcome.action_complete:
            self.phase = RepeatPhase.ACTION_COMPLETE
            return

        if outcome.done:
            self.phase = RepeatPhase.DONE
            return

        # Items already applied remotely do not accumulate
        if self.selection.repeat is not None and self.selection.repeat.has_on_each:
            self.state.accumulated.clear()

        if outcome.next_choices is not None:
            self.state.current_choices = [coerce_choice(c) for c in outcome.next_choices]

    def cancel(self) -> None:
        """Mark the coordinator dead; a late step result is then discarded."""
        self.cancelled = True
