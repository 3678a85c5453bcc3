"""
Board Bridge - The spatial picking surface the engine writes to.

The engine never owns the board. It tells the board what may be picked
or dropped and hands it callbacks; the board reports clicks and drags
back through those callbacks, which funnel into the same controller
entry points as button input.

    engine writes              board reports
    -------------              -------------
    set_valid_elements         selected_element
    set_draggable_selected...  is_dragging / dragged_element
    set_drop_targets
    set_hovered_choice
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable
import logging

from ..spec_schema.action_spec import Choice, ElementRef, ValidElement

logger = logging.getLogger(__name__)

SelectCallback = Callable[[int], Awaitable[Any]]
DropCallback = Callable[[ElementRef], Awaitable[Any]]


class BoardBridge(ABC):
    """Interface between the selection engine and a board surface."""

    @abstractmethod
    def set_valid_elements(self, elements: list[ValidElement], on_select: SelectCallback | None) -> None:
        """Mark `elements` as pickable; `on_select(element_id)` is awaited on a pick."""

    @abstractmethod
    def set_draggable_selected_element(self, ref: ElementRef | None) -> None:
        """Element that may be dragged to answer the current selection."""

    @abstractmethod
    def set_drop_targets(self, targets: list[ElementRef], on_drop: DropCallback | None) -> None:
        """Mark `targets` as droppable; `on_drop(target)` is awaited on a drop."""

    @abstractmethod
    def set_hovered_choice(self, choice: Choice | None) -> None:
        """Highlight the board refs of the choice the pointer is over."""

    def clear(self) -> None:
        """Release every selection, drag and highlight."""
        self.set_valid_elements([], None)
        self.set_draggable_selected_element(None)
        self.set_drop_targets([], None)
        self.set_hovered_choice(None)

    @property
    @abstractmethod
    def selected_element(self) -> ElementRef | None:
        """Last element the player picked on the board."""

    @property
    @abstractmethod
    def is_dragging(self) -> bool:
        """Whether a drag is in progress."""

    @property
    @abstractmethod
    def dragged_element(self) -> ElementRef | None:
        """Element being dragged, if any."""


class BoardInteraction(BoardBridge):
    """
    In-memory board surface.

    Holds what the engine published and simulates player input with
    trigger_element_select / start_drag / trigger_drop. Useful for
    headless clients and tests.
    """

    def __init__(self) -> None:
        self.valid_elements: list[ValidElement] = []
        self.draggable_element: ElementRef | None = None
        self.drop_targets: list[ElementRef] = []
        self.hovered_choice: Choice | None = None
        self._on_select: SelectCallback | None = None
        self._on_drop: DropCallback | None = None
        self._selected_element: ElementRef | None = None
        self._dragged_element: ElementRef | None = None

    # -- engine side -------------------------------------------------------

    def set_valid_elements(self, elements, on_select):
        self.valid_elements = list(elements)
        self._on_select = on_select

    def set_draggable_selected_element(self, ref):
        self.draggable_element = ref

    def set_drop_targets(self, targets, on_drop):
        self.drop_targets = list(targets)
        self._on_drop = on_drop

    def set_hovered_choice(self, choice):
        self.hovered_choice = choice

    def clear(self) -> None:
        super().clear()
        self._selected_element = None
        self._dragged_element = None

    # -- observed signals --------------------------------------------------

    @property
    def selected_element(self) -> ElementRef | None:
        return self._selected_element

    @property
    def is_dragging(self) -> bool:
        return self._dragged_element is not None

    @property
    def dragged_element(self) -> ElementRef | None:
        return self._dragged_element

    # -- queries -----------------------------------------------------------

    def is_selectable_element(self, element_id: int) -> bool:
        return any(el.id == element_id for el in self.valid_elements)

    def is_drop_target(self, ref: ElementRef) -> bool:
        return any(target.matches(ref) for target in self.drop_targets)

    def is_highlighted(self, ref: ElementRef) -> bool:
        choice = self.hovered_choice
        if choice is None:
            return False
        return any(r is not None and r.matches(ref) for r in (choice.source_ref, choice.target_ref))

    # -- player input ------------------------------------------------------

    async def trigger_element_select(self, element_id: int) -> bool:
        """Click an element. Returns False when it is not pickable."""
        if not self.is_selectable_element(element_id) or self._on_select is None:
            logger.debug("Ignoring click on non-selectable element %s", element_id)
            return False
        self._selected_element = ElementRef(id=element_id)
        await self._on_select(element_id)
        return True

    def start_drag(self, ref: ElementRef) -> bool:
        """Pick an element up. Only the draggable element or a pickable one may be dragged."""
        draggable = self.draggable_element is not None and self.draggable_element.matches(ref)
        if not draggable and not (ref.id is not None and self.is_selectable_element(ref.id)):
            return False
        self._dragged_element = ref
        return True

    def end_drag(self) -> None:
        self._dragged_element = None

    async def trigger_drop(self, target: ElementRef) -> bool:
        """Drop the dragged element on `target`. The drag ends either way."""
        try:
            if not self.is_dragging or not self.is_drop_target(target) or self._on_drop is None:
                return False
            await self._on_drop(target)
            return True
        finally:
            self.end_drag()
