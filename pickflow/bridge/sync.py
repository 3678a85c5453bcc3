"""
Bridge Sync - Keeps a board surface in step with the controller.

After every controller recompute the board is rewritten from scratch:

- no action, or nothing awaiting input: everything released
- Element selection: its valid elements become pickable
- Choice/Player selection whose choices carry board refs: the source
  refs become pickable, the target refs become drop targets, and the
  element bound by the latest earlier element selection is draggable

Board input comes back as ordinary fill / toggle calls, so a click and a
button press for the same value are indistinguishable to the engine.
"""

from __future__ import annotations
from typing import Any
import logging

from ..spec_schema.action_spec import Choice, ElementRef, Selection, SelectionKind, ValidElement
from ..engine_core.choice_filter import element_identity
from ..session.controller import ActionController
from .board import BoardBridge

logger = logging.getLogger(__name__)


class BridgeSync:
    """Subscribes to an ActionController and mirrors it onto a BoardBridge."""

    def __init__(self, controller: ActionController, bridge: BoardBridge):
        self.controller = controller
        self.bridge = bridge
        self._unsubscribe = controller.subscribe(self.sync)
        self.sync(controller)

    def close(self) -> None:
        self._unsubscribe()
        self.bridge.clear()

    # -- engine -> board ---------------------------------------------------

    def sync(self, controller: ActionController | None = None) -> None:
        controller = controller or self.controller
        selection = controller.current_selection
        if controller.session is None or selection is None:
            self.bridge.clear()
            return

        if selection.kind == SelectionKind.ELEMENT:
            self.bridge.set_valid_elements(controller.valid_elements(), self._on_select)
            self.bridge.set_draggable_selected_element(None)
            self.bridge.set_drop_targets([], None)
            return

        choices = [c for c in controller.current_choices() if c.is_enabled]
        if not selection.is_choice_based or not any(c.has_board_refs for c in choices):
            self.bridge.clear()
            return

        self.bridge.set_valid_elements(self._pickable_sources(choices), self._on_select)
        targets = [c.target_ref for c in choices if c.target_ref is not None]
        if targets:
            self.bridge.set_drop_targets(targets, self._on_drop)
            self.bridge.set_draggable_selected_element(self._dragged_source(selection))
        else:
            self.bridge.set_drop_targets([], None)
            self.bridge.set_draggable_selected_element(None)

    @staticmethod
    def _pickable_sources(choices: list[Choice]) -> list[ValidElement]:
        elements = []
        for choice in choices:
            ref = choice.source_ref
            if ref is not None and ref.id is not None:
                elements.append(ValidElement(id=ref.id, display=choice.display, ref=ref))
        return elements

    def _dragged_source(self, selection: Selection) -> ElementRef | None:
        """Element bound by the nearest earlier element selection."""
        session = self.controller.session
        for earlier in reversed(session.action.selections_before(selection.name)):
            if earlier.kind != SelectionKind.ELEMENT:
                continue
            value = session.args.value_of(earlier.name)
            if value is None or isinstance(value, list):
                return None
            return ElementRef(id=element_identity(value))
        return None

    def hover(self, choice: Choice | None) -> None:
        self.bridge.set_hovered_choice(choice)

    # -- board -> engine ---------------------------------------------------

    def _choice_for_ref(self, ref: ElementRef, target: bool) -> Choice | None:
        for choice in self.controller.current_choices():
            candidate = choice.target_ref if target else choice.source_ref
            if candidate is not None and candidate.matches(ref):
                return choice
        return None

    async def _on_select(self, element_id: int) -> Any:
        selection = self.controller.current_selection
        if selection is None:
            return None

        if selection.kind == SelectionKind.ELEMENT:
            value = element_id
        else:
            choice = self._choice_for_ref(ElementRef(id=element_id), target=False)
            if choice is None:
                logger.debug("No choice of %s refers to element %s", selection.name, element_id)
                return None
            value = choice.value

        if self.controller.current_multi_select is not None:
            return self.controller.toggle(value)
        return await self.controller.fill(selection.name, value)

    async def _on_drop(self, target: ElementRef) -> Any:
        selection = self.controller.current_selection
        if selection is None:
            return None
        choice = self._choice_for_ref(target, target=True)
        if choice is None:
            return None
        return await self.controller.fill(selection.name, choice.value)

    async def handle_drag_start(self, ref: ElementRef) -> bool:
        """
        The board reports that `ref` was picked up.

        When an element selection is current the drag itself answers it,
        so the drop targets of the next selection are published before
        the drop arrives.
        """
        selection = self.controller.current_selection
        if selection is None or selection.kind != SelectionKind.ELEMENT or ref.id is None:
            return False
        if self.controller.current_multi_select is not None:
            return False
        result = await self.controller.fill(selection.name, ref.id)
        return result.valid
