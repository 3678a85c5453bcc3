"""
Execution Dispatcher - Submits a completed argument set.

Submission:
1. Drops SKIPPED (and UNSET) entries; the executor only sees provided values
2. Calls the remote executor
3. Tears the session down whether the call succeeded or failed
4. Remembers the action as last executed, so a stale "only available
   action" notice does not immediately auto-start it again
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, TYPE_CHECKING
import logging

from .arguments import ArgumentStore, ArgValue

if TYPE_CHECKING:
    from ..spec_schema.action_spec import ActionDefinition

logger = logging.getLogger(__name__)


@dataclass
class FollowUp:
    """An action the server asks the client to start right after this one."""
    action: str
    args: dict[str, Any] = field(default_factory=dict)
    display: dict[str, str] = field(default_factory=dict)
    metadata: ActionDefinition | None = None


@dataclass
class ActionResult:
    """Outcome of executing an action."""
    success: bool
    error: str | None = None
    data: Any | None = None
    message: str | None = None
    follow_up: FollowUp | None = None

    @classmethod
    def failure(cls, error: str) -> ActionResult:
        return cls(success=False, error=error)


# (action_name, args) -> ActionResult
ExecuteFunction = Callable[[str, dict[str, Any]], Awaitable[ActionResult]]


def sanitize_args(args: ArgumentStore | dict[str, Any]) -> dict[str, Any]:
    """Only explicitly provided values; skip markers never leave the engine."""
    if isinstance(args, ArgumentStore):
        return args.resolved_values()
    clean: dict[str, Any] = {}
    for name, value in args.items():
        if isinstance(value, ArgValue):
            if value.is_set:
                clean[name] = value.value
        else:
            clean[name] = value
    return clean


class ExecutionDispatcher:
    """Sends actions to the executor and owns the last-executed marker."""

    def __init__(self, execute: ExecuteFunction):
        self._execute = execute
        self.last_executed: str | None = None

    async def submit(
        self,
        action_name: str,
        args: ArgumentStore | dict[str, Any],
        teardown: Callable[[], None] | None = None,
    ) -> ActionResult:
        """
        Execute `action_name` with sanitized `args`.

        `teardown` runs after the call resolves, success or failure.
        Transport exceptions come back as a failed ActionResult.
        """
        payload = sanitize_args(args)
        self.last_executed = action_name
        logger.info("Submitting action %s with %d argument(s)", action_name, len(payload))

        try:
            result = await self._execute(action_name, payload)
        except Exception as exc:
            result = ActionResult.failure(str(exc) or "Action failed")
        finally:
            if teardown is not None:
                teardown()

        if not result.success:
            logger.warning("Action %s failed: %s", action_name, result.error)
        return result

    def forget_last_executed(self) -> None:
        self.last_executed = None
