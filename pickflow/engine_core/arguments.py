"""
Argument Store - Tri-state storage of selection answers.

Every selection of the current action is in exactly one state:
- UNSET: not answered yet (the only state that needs input)
- SKIPPED: explicitly skipped; satisfies the selection, never submitted
- SET: bound to a value

Writes are published to subscribers so an external surface can mirror
the arguments without sharing a mutable dict with the engine.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator


class ArgStatus(Enum):
    """State of one selection's argument."""
    UNSET = "unset"
    SKIPPED = "skipped"
    SET = "set"


@dataclass(frozen=True)
class ArgValue:
    """A tagged argument value. `value` is meaningful only when status is SET."""
    status: ArgStatus
    value: Any = None

    @classmethod
    def of(cls, value: Any) -> ArgValue:
        return cls(status=ArgStatus.SET, value=value)

    @property
    def is_unset(self) -> bool:
        return self.status == ArgStatus.UNSET

    @property
    def is_skipped(self) -> bool:
        return self.status == ArgStatus.SKIPPED

    @property
    def is_set(self) -> bool:
        return self.status == ArgStatus.SET


UNSET = ArgValue(ArgStatus.UNSET)
SKIPPED = ArgValue(ArgStatus.SKIPPED)


@dataclass(frozen=True)
class ArgumentChange:
    """Published after every write to the store."""
    name: str
    previous: ArgValue
    current: ArgValue


ArgumentListener = Callable[[ArgumentChange], None]


class ArgumentStore:
    """
    Mapping of selection name -> ArgValue.

    Missing names read as UNSET. Listeners are notified synchronously,
    in subscription order, after the write has been applied.
    """

    def __init__(self, initial: dict[str, Any] | None = None):
        self._entries: dict[str, ArgValue] = {}
        self._listeners: list[ArgumentListener] = []
        for name, value in (initial or {}).items():
            self._entries[name] = ArgValue.of(value)

    # -- reads -------------------------------------------------------------

    def get(self, name: str) -> ArgValue:
        return self._entries.get(name, UNSET)

    def value_of(self, name: str, default: Any = None) -> Any:
        entry = self.get(name)
        return entry.value if entry.is_set else default

    def needs_input(self, name: str) -> bool:
        return self.get(name).is_unset

    def is_set(self, name: str) -> bool:
        return self.get(name).is_set

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> list[tuple[str, ArgValue]]:
        return list(self._entries.items())

    def resolved_values(self) -> dict[str, Any]:
        """
        Values of SET entries only.

        Used both as `priorArgs` for remote calls and as the submission
        payload: SKIPPED and UNSET entries are never sent.
        """
        return {
            name: entry.value
            for name, entry in self._entries.items()
            if entry.is_set
        }

    # -- writes ------------------------------------------------------------

    def set(self, name: str, value: Any) -> None:
        self._write(name, ArgValue.of(value))

    def skip(self, name: str) -> None:
        self._write(name, SKIPPED)

    def unset(self, name: str) -> None:
        if name in self._entries:
            self._write(name, UNSET)

    def reset(self) -> None:
        """Return every entry to UNSET."""
        for name in list(self._entries):
            self.unset(name)

    def _write(self, name: str, new: ArgValue) -> None:
        previous = self.get(name)
        if new.is_unset:
            self._entries.pop(name, None)
        else:
            self._entries[name] = new
        change = ArgumentChange(name=name, previous=previous, current=new)
        for listener in list(self._listeners):
            listener(change)

    # -- change channel ----------------------------------------------------

    def subscribe(self, listener: ArgumentListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
