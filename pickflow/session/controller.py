"""
Action Controller - Owns the single live action session.

The controller is the only entry point that mutates a session:

    start -> fill / skip / clear / toggle / confirm -> submit
                                                    `-> cancel

After every mutation it recomputes the cursor (auto-filling as it goes),
fetches deferred choices for the new current selection, and, when
nothing is left to answer, submits the action. Listeners registered with
subscribe() are called after every recompute so an outer surface (board
bridge, UI) can re-render.

Remote failures never raise out of the controller; they come back as
FillResult / ActionResult values and are mirrored in `last_error`.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Awaitable, Callable
import inspect
import logging

from ..config import ControllerConfig
from ..exceptions import MultiSelectError, NoActiveActionError, UnknownSelectionError
from ..spec_schema.action_spec import ActionDefinition, Choice, MultiSelect, Selection, SelectionKind, ValidElement
from ..engine_core.arguments import ArgumentChange, ArgumentStore
from ..engine_core.choice_filter import ChoiceSnapshot, available_choices
from ..engine_core.cursor import AutoFill, SelectionCursor, bound_value
from ..engine_core.dispatcher import ActionResult, ExecutionDispatcher, FollowUp
from ..engine_core.display import display_from_value
from ..engine_core.input_validation import FillResult, check_fill, check_values, match_candidate
from ..engine_core.multi_select import MultiSelectState, ToggleOutcome
from ..engine_core.repeating import RepeatPhase, RepeatingCoordinator, RepeatingState
from .action_session import ActionSession, CollectedSelection, SessionPhase

logger = logging.getLogger(__name__)

ControllerListener = Callable[["ActionController"], None]
BeforeExecuteHook = Callable[[str, dict[str, Any]], Awaitable[None] | None]


@dataclass
class WizardCheck:
    """Whether an action must be configured step by step rather than executed directly."""
    needed: bool
    reason: str | None = None
    selection_name: str | None = None


def needs_wizard_mode(action: ActionDefinition | None, provided_args: dict[str, Any]) -> WizardCheck:
    """
    Find the first required selection that cannot be answered up front.

    Element picks need the board, dependent selections need their
    dependency first, and dependent-only choice sets need the server.
    """
    if action is None:
        return WizardCheck(needed=False)

    for selection in action.selections:
        if selection.name in provided_args or selection.optional:
            continue
        if selection.kind == SelectionKind.ELEMENT:
            return WizardCheck(
                needed=True,
                reason=f'Selection "{selection.name}" requires element selection from the game board',
                selection_name=selection.name,
            )
        if selection.depends_on and selection.depends_on not in provided_args:
            return WizardCheck(
                needed=True,
                reason=(
                    f'Selection "{selection.name}" depends on "{selection.depends_on}" '
                    "which must be selected first"
                ),
                selection_name=selection.name,
            )
        if not selection.choices and selection.has_dependent_candidates:
            return WizardCheck(
                needed=True,
                reason=f'Selection "{selection.name}" has dynamic choices that require server interaction',
                selection_name=selection.name,
            )
    return WizardCheck(needed=False)


class ActionController:
    """
    Drives one action at a time from start to submission.

    Usage:
        controller = ActionController(client)
        await controller.update_availability(["move", "pass"], metadata)

        await controller.start("move")
        await controller.fill("piece", 7)
        await controller.fill("destination", {"pieceId": 7, "square": "e4"})
        # every selection resolved -> submitted automatically
    """

    def __init__(
        self,
        client,
        config: ControllerConfig | None = None,
        before_execute: BeforeExecuteHook | None = None,
    ):
        self.client = client
        self.config = config or ControllerConfig()
        self.before_execute = before_execute
        self.dispatcher = ExecutionDispatcher(client.execute_action)

        # Availability view, refreshed by the surrounding game state
        self.available_actions: list[str] = []
        self.action_metadata: dict[str, ActionDefinition] = {}
        self.is_my_turn = True

        self.session: ActionSession | None = None
        self.current_selection: Selection | None = None
        self.last_error: str | None = None
        self.last_result: ActionResult | None = None
        self.is_executing = False
        self.is_loading_choices = False

        self._available_at_submit: frozenset[str] = frozenset()
        self._listeners: list[ControllerListener] = []
        self._arg_listeners: list[Callable[[ArgumentChange], None]] = []
        self._arg_unsubscribe: Callable[[], None] | None = None

    # =========================================================================
    # Observation
    # =========================================================================

    def subscribe(self, listener: ControllerListener) -> Callable[[], None]:
        """Call `listener(controller)` after every recompute. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def subscribe_args(self, listener: Callable[[ArgumentChange], None]) -> Callable[[], None]:
        """Receive every argument write of whichever session is live."""
        self._arg_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._arg_listeners:
                self._arg_listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _forward_arg_change(self, change: ArgumentChange) -> None:
        for listener in list(self._arg_listeners):
            listener(change)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def phase(self) -> SessionPhase:
        return self.session.phase if self.session is not None else SessionPhase.NO_ACTION

    @property
    def current_action(self) -> str | None:
        return self.session.action_name if self.session is not None else None

    @property
    def current_args(self) -> dict[str, Any]:
        return self.session.prior_args() if self.session is not None else {}

    @property
    def is_ready(self) -> bool:
        """Every selection is SKIPPED or SET and no sub-protocol is mid-flight."""
        session = self.session
        if session is None or not session.is_configuring:
            return False
        if session.multi_select is not None:
            return False
        if session.repeating is not None and session.repeating.awaiting_server:
            return False
        return all(not session.args.needs_input(s.name) for s in session.action.selections)

    @property
    def repeating_state(self) -> RepeatingState | None:
        if self.session is None or self.session.repeating is None:
            return None
        return self.session.repeating.state

    @property
    def selected_values(self) -> list[Any]:
        """Values toggled into the active multi-select, in toggle order."""
        if self.session is None or self.session.multi_select is None:
            return []
        return list(self.session.multi_select.selected_values)

    @property
    def current_multi_select(self) -> MultiSelect | None:
        if self.session is None or self.current_selection is None:
            return None
        return self.session.multi_select_for(self.current_selection)

    def get_choices(self, selection_name: str) -> list[Choice]:
        session = self._require_session("get choices")
        return session.choices_for(self._require_selection(session, selection_name))

    def current_choices(self) -> list[Choice]:
        if self.session is None or self.current_selection is None:
            return []
        return self.session.choices_for(self.current_selection)

    def valid_elements(self, selection_name: str | None = None) -> list[ValidElement]:
        """Selectable elements for `selection_name` (default: the current selection)."""
        session = self.session
        if session is None:
            return []
        if selection_name is None:
            selection = self.current_selection
        else:
            selection = self._require_selection(session, selection_name)
        if selection is None:
            return []
        return session.elements_for(selection)

    def collected_selections(self) -> list[CollectedSelection]:
        if self.session is None:
            return []
        return self.session.collected_selections()

    def _require_session(self, operation: str) -> ActionSession:
        if self.session is None:
            raise NoActiveActionError(operation)
        return self.session

    @staticmethod
    def _require_selection(session: ActionSession, selection_name: str) -> Selection:
        selection = session.action.get_selection(selection_name)
        if selection is None:
            raise UnknownSelectionError(session.action_name, selection_name)
        return selection

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    def _open_session(self, action: ActionDefinition, follow_up: bool) -> ActionSession:
        session = ActionSession(action=action, follow_up=follow_up)
        self._arg_unsubscribe = session.args.subscribe(self._forward_arg_change)
        self.session = session
        logger.info("Started action %s (session %s)", action.name, session.session_id)
        return session

    def _end_session(self, session: ActionSession, reason: str) -> None:
        """Tear `session` down; a no-op if it is no longer the live one."""
        if session is not self.session:
            return
        session.teardown()
        if self._arg_unsubscribe is not None:
            self._arg_unsubscribe()
            self._arg_unsubscribe = None
        self.session = None
        self.current_selection = None
        logger.info("Ended action %s: %s", session.action_name, reason)
        self._notify()

    async def start(
        self,
        action_name: str,
        args: dict[str, Any] | None = None,
        prefill: dict[str, Any] | None = None,
        metadata: ActionDefinition | None = None,
        display: dict[str, str] | None = None,
        follow_up: bool = False,
    ) -> None:
        """
        Begin configuring `action_name`, replacing any session in progress.

        `args` are bound immediately (with `display` overriding their labels);
        `prefill` values are applied when their selection becomes current.
        An action without selections is submitted straight away.
        """
        if metadata is None and not follow_up and action_name not in self.available_actions:
            self.last_error = f'Action "{action_name}" is not available'
            self._notify()
            return

        action = metadata or self.action_metadata.get(action_name)
        if action is None:
            if not follow_up:
                self.last_error = f'No metadata for action "{action_name}"'
                self._notify()
                return
            logger.warning("No metadata for follow-up action %s; submitting without selections", action_name)
            action = ActionDefinition(name=action_name)

        if self.session is not None:
            await self.cancel()

        self.last_error = None
        session = self._open_session(action, follow_up)

        labels = display or {}
        for name, value in (args or {}).items():
            session.args.set(name, value)
            session.remember(name, value, labels.get(name) or display_from_value(value))

        for name, value in (prefill or {}).items():
            if session.args.needs_input(name):
                session.prefills[name] = value

        if not action.selections:
            await self._submit_session(session)
            return

        await self._advance()

    async def cancel(self) -> None:
        """
        Abandon the action in progress.

        An active repeating selection is reported to the server first and
        the session is torn down once that notice settles. The coordinator
        is marked cancelled before the notice goes out, so an in-flight
        step is discarded whenever it returns.
        """
        session = self.session
        if session is None:
            return

        coordinator = session.repeating
        if coordinator is not None and not coordinator.cancelled:
            coordinator.cancel()
            try:
                await self.client.cancel_selection(
                    self.config.player_seat, session.action_name, coordinator.selection.name
                )
            except Exception as exc:
                logger.warning("Cancel notification for %s failed: %s", coordinator.selection.name, exc)

        self._end_session(session, "cancelled")
        self.last_error = None

    # =========================================================================
    # Cursor
    # =========================================================================

    def _awaiting_fetch(self, session: ActionSession) -> frozenset[str]:
        return frozenset(
            s.name for s in session.action.selections
            if s.deferred and s.name not in session.fetched
        )

    def _cursor(self, session: ActionSession) -> SelectionCursor:
        return session.cursor(
            auto_fill=self.config.auto_fill and not self.is_executing,
            awaiting_fetch=self._awaiting_fetch(session),
        )

    def recompute(self) -> Selection | None:
        """
        Re-run the cursor, auto-filling eligible selections, and notify listeners.

        Returns the selection now awaiting input, or None when every
        selection is resolved (or there is no session).
        """
        session = self.session
        if session is None or not session.is_configuring:
            self.current_selection = None
            self._notify()
            return None

        def remember(fill: AutoFill) -> None:
            session.remember(fill.selection_name, fill.value, fill.display)

        self.current_selection = self._cursor(session).next(session.args, on_auto_fill=remember)
        self._notify()
        return self.current_selection

    async def _advance(self) -> None:
        """Move to the next selection needing a person, or submit."""
        session = self.session
        while session is not None and session is self.session and session.is_configuring:
            selection = self.recompute()

            if selection is None:
                if self.config.auto_execute:
                    await self._auto_execute(session)
                return

            if selection.deferred and selection.name not in session.fetched:
                await self._fetch_choices(session, selection)
                continue

            if selection.name in session.prefills:
                self._apply_prefill(session, selection)
                continue

            return

    async def _fetch_choices(self, session: ActionSession, selection: Selection) -> None:
        # Marked before the await so a concurrent recompute does not fetch twice
        session.fetched.add(selection.name)
        self.is_loading_choices = True
        self._notify()
        try:
            fetch = await self.client.fetch_choices(
                session.action_name,
                selection.name,
                self.config.player_seat,
                session.prior_args(),
            )
        except Exception as exc:
            fetch = None
            error = str(exc) or "Failed to fetch choices"
        else:
            error = None if fetch.success else (fetch.error or "Failed to fetch choices")
        finally:
            self.is_loading_choices = False

        if session is not self.session:
            logger.debug("Discarding choices for %s: session ended", selection.name)
            return

        if error is not None:
            self.last_error = error
            logger.warning("Fetching choices for %s.%s failed: %s", session.action_name, selection.name, error)
            return

        session.snapshots[selection.name] = fetch.snapshot or ChoiceSnapshot()

    def _apply_prefill(self, session: ActionSession, selection: Selection) -> bool:
        value = session.prefills.pop(selection.name)
        result = self._validate(session, selection, value)
        if not result.valid:
            logger.debug("Dropping prefill for %s: %s", selection.name, result.error)
            return False
        self._bind(session, selection, value, result.choice)
        return True

    # =========================================================================
    # Filling selections
    # =========================================================================

    def _validate(self, session: ActionSession, selection: Selection, value: Any) -> FillResult:
        choices = session.choices_for(selection)
        bounds = session.multi_select_for(selection)
        if bounds is None or selection.is_repeating:
            return check_fill(selection, choices, value)

        values = value if isinstance(value, list) else [value]
        if len(values) < bounds.min:
            return FillResult.invalid(f'Select at least {bounds.min} for "{selection.name}"')
        if bounds.max is not None and len(values) > bounds.max:
            return FillResult.invalid(f'Select at most {bounds.max} for "{selection.name}"')
        return check_values(selection, choices, values)

    def _bind(self, session: ActionSession, selection: Selection, value: Any, choice: Choice | None) -> None:
        """Write an already validated value and remember how it was labelled."""
        if session.multi_select_for(selection) is not None and not selection.is_repeating:
            choices = session.choices_for(selection)
            bound = []
            for item in value if isinstance(value, list) else [value]:
                match = match_candidate(selection, choices, item)
                item_value = bound_value(selection, match) if match else item
                session.remember(selection.name, item_value, match.display if match else display_from_value(item))
                bound.append(item_value)
            if session.is_accumulating(selection.name):
                session.multi_select = None
            session.args.set(selection.name, bound)
        else:
            bound = bound_value(selection, choice) if choice else value
            session.remember(selection.name, bound, choice.display if choice else display_from_value(value))
            session.args.set(selection.name, bound)
        session.invalidate_after(selection.name)

    async def fill(self, selection_name: str, value: Any) -> FillResult:
        """
        Answer `selection_name` with `value`.

        Invalid values are rejected without touching the store. Repeating
        selections send the value to the server instead. Multi-select
        selections take the whole list at once.
        """
        session = self._require_session("fill")
        selection = self._require_selection(session, selection_name)
        if not session.is_configuring:
            return FillResult.invalid("Action is already being submitted")

        if selection.is_repeating:
            return await self._repeating_fill(session, selection, value)

        result = self._validate(session, selection, value)
        if not result.valid:
            self.last_error = result.error
            self._notify()
            return result

        self.last_error = None
        self._bind(session, selection, value, result.choice)
        await self._advance()
        return result

    async def skip(self, selection_name: str) -> bool:
        """Skip an optional selection. Required selections cannot be skipped."""
        session = self._require_session("skip")
        selection = self._require_selection(session, selection_name)
        if not selection.optional or not session.is_configuring:
            return False

        if session.is_accumulating(selection_name):
            session.multi_select = None
        session.prefills.pop(selection_name, None)
        session.display.forget(selection_name)
        session.args.skip(selection_name)
        session.invalidate_after(selection_name)
        await self._advance()
        return True

    def clear(self, selection_name: str) -> None:
        """Return a selection to unanswered and drop choices fetched after it."""
        session = self._require_session("clear")
        self._require_selection(session, selection_name)

        if session.is_accumulating(selection_name):
            session.multi_select = None
        if session.is_repeating(selection_name):
            session.repeating.cancel()
            session.repeating = None
        session.args.unset(selection_name)
        session.display.forget(selection_name)
        session.invalidate_after(selection_name)
        self.recompute()

    # =========================================================================
    # Multi-select
    # =========================================================================

    def toggle(self, value: Any) -> ToggleOutcome:
        """Add or remove `value` in the current multi-select selection."""
        session = self._require_session("toggle")
        selection = self.current_selection
        if selection is None:
            raise MultiSelectError("No selection is awaiting input")

        bounds = session.multi_select_for(selection)
        if bounds is None or selection.is_repeating:
            raise MultiSelectError(f'Selection "{selection.name}" does not accept multiple values')

        if not session.is_accumulating(selection.name):
            session.multi_select = MultiSelectState(selection_name=selection.name, bounds=bounds)
        state = session.multi_select

        choices = session.choices_for(selection)
        match = match_candidate(selection, choices, value)
        if choices and (match is None or not match.is_enabled):
            self.last_error = f'Invalid selection for "{selection.name}"'
            self._notify()
            return ToggleOutcome.REJECTED

        item = bound_value(selection, match) if match else value
        outcome = state.toggle(item)
        if outcome == ToggleOutcome.ADDED:
            session.remember(selection.name, item, match.display if match else display_from_value(item))
        self.last_error = None
        self.recompute()
        return outcome

    async def confirm(self) -> list[Any]:
        """
        Commit the toggled values as the selection's answer.

        Raises MultiSelectError when nothing is being accumulated or
        fewer than the minimum are selected.
        """
        session = self._require_session("confirm")
        state = session.multi_select
        if state is None:
            raise MultiSelectError("No multi-select in progress")

        values = state.confirm(session.args)
        session.multi_select = None
        session.invalidate_after(state.selection_name)
        await self._advance()
        return values

    # =========================================================================
    # Repeating selections
    # =========================================================================

    async def _repeating_fill(self, session: ActionSession, selection: Selection, value: Any) -> FillResult:
        coordinator = session.repeating
        if coordinator is None or coordinator.selection.name != selection.name:
            coordinator = RepeatingCoordinator(
                selection=selection,
                action_name=session.action_name,
                player=self.config.player_seat,
                step=self.client.selection_step,
            )
            session.repeating = coordinator

        if coordinator.cancelled:
            return FillResult.invalid("Action was cancelled")

        outcome = await coordinator.push(value, session.prior_args())

        if coordinator.cancelled or session is not self.session:
            return FillResult.invalid("Action was cancelled")

        if not outcome.success:
            self.last_error = coordinator.last_error
            self._notify()
            return FillResult.invalid(coordinator.last_error)

        self.last_error = None

        if coordinator.phase == RepeatPhase.ACTION_COMPLETE:
            self.dispatcher.last_executed = session.action_name
            self._available_at_submit = frozenset(self.available_actions)
            self._end_session(session, "completed by server")
            return FillResult.ok()

        if coordinator.phase == RepeatPhase.DONE:
            for item in coordinator.state.accumulated:
                session.remember(selection.name, item.value, item.display)
            session.repeating = None
            session.args.set(selection.name, coordinator.final_value)
            session.invalidate_after(selection.name)
            await self._advance()
            return FillResult.ok()

        self.recompute()
        return FillResult.ok()

    # =========================================================================
    # Submission
    # =========================================================================

    async def _auto_execute(self, session: ActionSession) -> None:
        if self.before_execute is not None:
            pending = self.before_execute(session.action_name, session.prior_args())
            if inspect.isawaitable(pending):
                await pending
        if session is self.session and session.is_configuring:
            await self._submit_session(session)

    async def _submit_session(self, session: ActionSession) -> ActionResult:
        session.phase = SessionPhase.SUBMITTING
        self.current_selection = None
        self.is_executing = True
        self._available_at_submit = frozenset(self.available_actions)
        self._notify()

        try:
            result = await self.dispatcher.submit(
                session.action_name,
                session.args,
                teardown=lambda: self._end_session(session, "submitted"),
            )
        finally:
            self.is_executing = False

        return await self._finish(result)

    async def _finish(self, result: ActionResult) -> ActionResult:
        self.last_result = result
        self.last_error = None if result.success else result.error
        self._notify()
        if result.success and result.follow_up is not None:
            await self._start_follow_up(result.follow_up)
        return result

    async def submit(self) -> ActionResult:
        """Submit the action in progress. Unanswered optional selections are omitted."""
        session = self._require_session("submit")
        if not session.is_configuring or self.is_executing:
            return ActionResult.failure("Action is already being submitted")

        for selection in session.action.selections:
            if session.args.needs_input(selection.name) and not selection.optional:
                return ActionResult.failure(f'Missing required selection: "{selection.name}"')

        return await self._submit_session(session)

    async def execute(self, action_name: str, args: dict[str, Any] | None = None) -> ActionResult:
        """
        Execute an action directly with the given arguments, without a session.

        Missing selections with a single candidate are auto-filled and
        missing optional ones are left out.
        """
        if not self.is_my_turn:
            return ActionResult.failure("Not your turn")
        if action_name not in self.available_actions:
            return ActionResult.failure(f'Action "{action_name}" is not available')
        if self.is_executing:
            return ActionResult.failure("Another action is executing")

        action = self.action_metadata.get(action_name)
        store = ArgumentStore(args)

        if action is not None:
            wizard = needs_wizard_mode(action, dict(args or {}))
            if wizard.needed:
                logger.debug("execute(%s) may need step-by-step configuration: %s", action_name, wizard.reason)

            for selection in action.selections:
                # Dependent candidates are resolved server-side
                if selection.filter_by is not None or selection.depends_on is not None:
                    continue
                if not store.is_set(selection.name):
                    continue
                result = self._check_direct(action, store, selection)
                if not result.valid:
                    self.last_error = result.error
                    return ActionResult.failure(result.error)

            cursor = SelectionCursor(
                action=action,
                choices_for=lambda selection: available_choices(selection, action, store),
                auto_fill=self.config.auto_fill,
            )
            missing = cursor.next(store)
            while missing is not None and missing.optional:
                store.skip(missing.name)
                missing = cursor.next(store)
            if missing is not None:
                error = f'Missing required selection: "{missing.name}"'
                self.last_error = error
                return ActionResult.failure(error)

        self.is_executing = True
        self._available_at_submit = frozenset(self.available_actions)
        try:
            result = await self.dispatcher.submit(action_name, store)
        finally:
            self.is_executing = False
        return await self._finish(result)

    @staticmethod
    def _check_direct(action: ActionDefinition, store: ArgumentStore, selection: Selection) -> FillResult:
        value = store.value_of(selection.name)
        choices = available_choices(selection, action, store)
        if selection.multi_select is not None and isinstance(value, list):
            return check_values(selection, choices, value)
        return check_fill(selection, choices, value)

    async def _start_follow_up(self, follow_up: FollowUp) -> None:
        action = follow_up.metadata or self.action_metadata.get(follow_up.action)
        logger.info("Starting follow-up action %s", follow_up.action)
        await self.start(
            follow_up.action,
            args=follow_up.args,
            metadata=action,
            display=follow_up.display,
            follow_up=True,
        )

    # =========================================================================
    # Availability
    # =========================================================================

    async def update_availability(
        self,
        actions: list[str],
        metadata: dict[str, ActionDefinition] | None = None,
        is_my_turn: bool | None = None,
        new_turn: bool = False,
    ) -> None:
        """
        Apply a new view of which actions the player may take.

        A configuring session whose action disappeared, or any session when
        the whole set was replaced, is torn down silently. With exactly one
        action left the controller may start it on its own.

        The action submitted last is not auto-started again until the view
        moves on: the available set changes, the turn comes back to this
        player, or the caller passes new_turn=True.
        """
        previous = set(self.available_actions)
        self.available_actions = list(actions)
        if metadata is not None:
            self.action_metadata = dict(metadata)
        if is_my_turn is not None:
            new_turn = new_turn or (is_my_turn and not self.is_my_turn)
            self.is_my_turn = is_my_turn

        current = set(self.available_actions)
        if self.dispatcher.last_executed is not None and (new_turn or current != self._available_at_submit):
            self.dispatcher.forget_last_executed()

        session = self.session
        if session is not None and session.is_configuring and not session.follow_up:
            gone = session.action_name not in current
            replaced = bool(previous) and bool(current) and not previous & current
            if gone or replaced:
                logger.info("Action %s is no longer available; discarding selections", session.action_name)
                self._end_session(session, "no longer available")

        await self._maybe_auto_start()

    async def _maybe_auto_start(self) -> None:
        if not self.config.auto_start or self.session is not None or self.is_executing:
            return
        if not self.is_my_turn or len(self.available_actions) != 1:
            return

        action_name = self.available_actions[0]
        if action_name == self.dispatcher.last_executed:
            return

        action = self.action_metadata.get(action_name)
        if action is None:
            return
        if not action.selections or action.selections[0].is_spatial():
            logger.info("Auto-starting %s, the only available action", action_name)
            await self.start(action_name)
