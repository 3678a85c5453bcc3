"""
Tests for the repeating selection coordinator.

Tests:
- Accumulate / done / action-complete transitions
- Revert on rejected or failed steps
- One step in flight at a time
- Late results after cancellation are discarded
"""

import asyncio

import pytest

from .conftest import choice_selection, make_choice
from ..engine_core.repeating import RepeatPhase, RepeatingCoordinator, StepOutcome, coerce_choice
from ..exceptions import StepInFlightError
from ..spec_schema.action_spec import RepeatConfig


class ScriptedStep:
    """Step function answering from a queue and recording its calls."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []
        self.gate: asyncio.Event | None = None

    async def __call__(self, player, selection_name, value, action_name, prior_args):
        self.calls.append((player, selection_name, value, action_name, prior_args))
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def coordinator_for(step, **repeat):
    selection = choice_selection("draftPick", ["c1", "c2"], repeat=RepeatConfig(**repeat))
    return RepeatingCoordinator(selection, "draft", player=1, step=step)


class TestStepProtocol:
    """Tests for the step state machine."""

    async def test_accumulate_then_done(self):
        """First step offers new choices, second step finishes the selection."""
        step = ScriptedStep(
            StepOutcome(success=True, next_choices=[make_choice("c3", "Card 3")]),
            StepOutcome(success=True, done=True),
        )
        coordinator = coordinator_for(step)

        await coordinator.push("c1", {})
        assert coordinator.phase == RepeatPhase.ACCUMULATING
        assert [c.value for c in coordinator.state.current_choices] == ["c3"]
        assert coordinator.state.values == ["c1"]

        await coordinator.push("c3", {})
        assert coordinator.phase == RepeatPhase.DONE
        assert coordinator.final_value == ["c1", "c3"]

    async def test_initial_choices_are_declared_ones(self):
        coordinator = coordinator_for(ScriptedStep())
        assert coordinator.phase == RepeatPhase.IDLE
        assert [c.value for c in coordinator.state.current_choices] == ["c1", "c2"]

    async def test_step_request_carries_prior_args(self):
        step = ScriptedStep(StepOutcome(success=True))
        coordinator = coordinator_for(step)
        prior = {"hand": ["x"]}

        await coordinator.push("c1", prior)

        assert step.calls == [(1, "draftPick", "c1", "draft", {"hand": ["x"]})]
        assert step.calls[0][4] is not prior

    async def test_action_complete(self):
        step = ScriptedStep(StepOutcome(success=True, action_complete=True))
        coordinator = coordinator_for(step)
        await coordinator.push("c1", {})
        assert coordinator.phase == RepeatPhase.ACTION_COMPLETE

    async def test_on_each_does_not_accumulate(self):
        """Items applied remotely one by one are not kept locally."""
        step = ScriptedStep(StepOutcome(success=True), StepOutcome(success=True))
        coordinator = coordinator_for(step, has_on_each=True)

        await coordinator.push("c1", {})
        await coordinator.push("c2", {})

        assert coordinator.state.accumulated == []

    async def test_terminator_sent_like_any_value(self):
        step = ScriptedStep(StepOutcome(success=True, done=True))
        coordinator = coordinator_for(step, terminator="done")

        await coordinator.push("done", {})

        assert step.calls[0][2] == "done"
        assert coordinator.phase == RepeatPhase.DONE


class TestStepFailures:
    """Tests for rejected and failed steps."""

    async def test_rejection_reverts_push(self):
        """A rejected step leaves the accumulated list exactly as before."""
        step = ScriptedStep(
            StepOutcome(success=True),
            StepOutcome.failure("Not your card"),
        )
        coordinator = coordinator_for(step)
        await coordinator.push("c1", {})
        before = list(coordinator.state.accumulated)

        outcome = await coordinator.push("c2", {})

        assert not outcome.success
        assert coordinator.state.accumulated == before
        assert coordinator.last_error == "Not your card"
        assert coordinator.phase == RepeatPhase.ACCUMULATING

    async def test_transport_error_is_a_failed_outcome(self):
        step = ScriptedStep(ConnectionError("socket closed"))
        coordinator = coordinator_for(step)

        outcome = await coordinator.push("c1", {})

        assert not outcome.success
        assert outcome.error == "socket closed"
        assert coordinator.state.accumulated == []
        assert not coordinator.awaiting_server

    async def test_retry_after_rejection(self):
        step = ScriptedStep(StepOutcome.failure("Try again"), StepOutcome(success=True, done=True))
        coordinator = coordinator_for(step)

        await coordinator.push("c1", {})
        await coordinator.push("c2", {})

        assert coordinator.final_value == ["c2"]
        assert coordinator.last_error is None


class TestConcurrency:
    """Tests for in-flight steps."""

    async def test_second_push_while_awaiting_raises(self):
        step = ScriptedStep(StepOutcome(success=True))
        step.gate = asyncio.Event()
        coordinator = coordinator_for(step)

        pending = asyncio.create_task(coordinator.push("c1", {}))
        await asyncio.sleep(0)
        assert coordinator.awaiting_server

        with pytest.raises(StepInFlightError):
            await coordinator.push("c2", {})

        step.gate.set()
        await pending
        assert coordinator.state.values == ["c1"]

    async def test_cancelled_result_is_discarded(self):
        step = ScriptedStep(StepOutcome(success=True, next_choices=[make_choice("late")]))
        step.gate = asyncio.Event()
        coordinator = coordinator_for(step)

        pending = asyncio.create_task(coordinator.push("c1", {}))
        await asyncio.sleep(0)
        coordinator.cancel()
        step.gate.set()
        await pending

        assert [c.value for c in coordinator.state.current_choices] == ["c1", "c2"]


class TestCoerceChoice:
    def test_mapping_with_display(self):
        choice = coerce_choice({"value": 5, "display": "Five"})
        assert (choice.value, choice.display) == (5, "Five")

    def test_raw_value(self):
        choice = coerce_choice({"name": "Sword", "id": 2})
        assert choice.value == {"name": "Sword", "id": 2}
        assert choice.display == "Sword"
