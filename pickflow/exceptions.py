"""Exception classes for protocol misuse of the selection engine.

Remote failures (rejected steps, failed fetches, failed executions) are not
exceptions; they come back as result values. These are raised when the
caller drives the engine in a way its state cannot accept.
"""

from __future__ import annotations


class PickflowError(Exception):
    """Base exception for all pickflow errors."""


class NoActiveActionError(PickflowError):
    """Raised when an operation needs a live action session and none exists."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot {operation}: no action in progress")


class UnknownSelectionError(PickflowError):
    """Raised when a selection name is not declared by the current action."""

    def __init__(self, action_name: str, selection_name: str) -> None:
        self.action_name = action_name
        self.selection_name = selection_name
        super().__init__(f'Unknown selection "{selection_name}" for action "{action_name}"')


class StepInFlightError(PickflowError):
    """Raised when a repeating selection receives a push while awaiting the server."""

    def __init__(self, selection_name: str) -> None:
        self.selection_name = selection_name
        super().__init__(f'Selection "{selection_name}" is still awaiting the server')


class MultiSelectError(PickflowError):
    """Raised when toggle/confirm is used without a matching accumulator."""


__all__ = [
    "MultiSelectError",
    "NoActiveActionError",
    "PickflowError",
    "StepInFlightError",
    "UnknownSelectionError",
]
