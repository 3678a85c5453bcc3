"""
Pytest fixtures for pickflow tests.
"""

import asyncio
from typing import Any

import pytest

from ..api.client import ActionClient
from ..config import ControllerConfig
from ..engine_core.choice_filter import ChoiceFetch, ChoiceSnapshot
from ..engine_core.dispatcher import ActionResult
from ..engine_core.repeating import StepOutcome
from ..session.controller import ActionController
from ..spec_schema.action_spec import (
    ActionDefinition,
    Choice,
    FilterBy,
    RepeatConfig,
    Selection,
    SelectionKind,
    ValidElement,
)


# =============================================================================
# Builders
# =============================================================================

def make_choice(value: Any, display: str | None = None, **kwargs) -> Choice:
    return Choice(value=value, display=display or str(value), **kwargs)


def choice_selection(name: str, values: list[Any], **kwargs) -> Selection:
    return Selection(
        name=name,
        kind=SelectionKind.CHOICE,
        choices=[v if isinstance(v, Choice) else make_choice(v) for v in values],
        **kwargs,
    )


def element_selection(name: str, ids: list[int], **kwargs) -> Selection:
    return Selection(
        name=name,
        kind=SelectionKind.ELEMENT,
        valid_elements=[ValidElement(id=i, display=f"Piece {i}") for i in ids],
        **kwargs,
    )


def destination(piece_id: int, square: str, **kwargs) -> Choice:
    return Choice(value={"pieceId": piece_id, "square": square}, display=square, **kwargs)


# =============================================================================
# Fake remote collaborator
# =============================================================================

class FakeActionClient(ActionClient):
    """
    Scripted ActionClient recording every call.

    Queue StepOutcome / ActionResult values (or exceptions to raise) in
    `steps` and `execute_results`; set `fetch_results[selection_name]`
    for deferred selections. Setting `step_gate` holds every step until
    the event is set.
    """

    def __init__(self):
        self.steps: list[Any] = []
        self.step_calls: list[dict[str, Any]] = []
        self.step_gate: asyncio.Event | None = None

        self.fetch_results: dict[str, Any] = {}
        self.fetch_calls: list[tuple[str, str, dict[str, Any]]] = []

        self.execute_results: list[Any] = []
        self.executed: list[tuple[str, dict[str, Any]]] = []

        self.cancelled: list[tuple[str, str]] = []

    async def selection_step(self, player, selection_name, value, action_name, prior_args):
        self.step_calls.append({
            "player": player,
            "selection_name": selection_name,
            "value": value,
            "action_name": action_name,
            "prior_args": dict(prior_args),
        })
        if self.step_gate is not None:
            await self.step_gate.wait()
        outcome = self.steps.pop(0) if self.steps else StepOutcome(success=True)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def fetch_choices(self, action_name, selection_name, player, current_args):
        self.fetch_calls.append((action_name, selection_name, dict(current_args)))
        result = self.fetch_results.get(selection_name)
        if isinstance(result, Exception):
            raise result
        return result or ChoiceFetch(success=True, snapshot=ChoiceSnapshot())

    async def execute_action(self, action_name, args):
        self.executed.append((action_name, dict(args)))
        result = self.execute_results.pop(0) if self.execute_results else ActionResult(success=True)
        if isinstance(result, Exception):
            raise result
        return result

    async def cancel_selection(self, player, action_name, selection_name):
        self.cancelled.append((action_name, selection_name))


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def client() -> FakeActionClient:
    return FakeActionClient()


@pytest.fixture
def config() -> ControllerConfig:
    return ControllerConfig()


@pytest.fixture
def controller(client: FakeActionClient, config: ControllerConfig) -> ActionController:
    return ActionController(client, config)


@pytest.fixture
def move_action() -> ActionDefinition:
    """Pick one of three pieces, then a destination filtered by that piece."""
    return ActionDefinition(
        name="move",
        selections=[
            element_selection("piece", [7, 8, 9]),
            Selection(
                name="destination",
                kind=SelectionKind.CHOICE,
                choices=[
                    destination(7, "e4"),
                    destination(7, "e5"),
                    destination(8, "d4"),
                    destination(9, "c4"),
                ],
                filter_by=FilterBy(selection_name="piece", key="pieceId"),
            ),
        ],
    )


@pytest.fixture
def draft_action() -> ActionDefinition:
    """Repeating draft pick followed by an ordinary choice."""
    return ActionDefinition(
        name="draft",
        selections=[
            choice_selection("draftPick", ["c1", "c2"], repeat=RepeatConfig()),
            choice_selection("note", ["x", "y"]),
        ],
    )


@pytest.fixture
def actions(move_action: ActionDefinition) -> dict[str, ActionDefinition]:
    return {
        "move": move_action,
        "pass": ActionDefinition(name="pass"),
    }
