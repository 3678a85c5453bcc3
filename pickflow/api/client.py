"""
Action Client - The remote collaborator the engine talks to.

The engine never owns transport. Whatever carries the calls (HTTP,
WebSocket, an in-process game server) implements ActionClient:

1. selection_step    one value of a repeating selection
2. fetch_choices     candidates for a deferred selection
3. execute_action    submit a completed action
4. cancel_selection  best-effort notice that a repeating selection was abandoned

JsonActionClient implements all four on top of a single
request(operation, payload) -> dict method, encoding and decoding with the
wire schemas.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any
import logging

from .schemas import (
    ActionResultModel,
    CancelSelectionRequest,
    ExecuteActionRequest,
    PickChoicesRequest,
    PickChoicesResponse,
    SelectionStepRequest,
    SelectionStepResponse,
)
from ..engine_core.choice_filter import ChoiceFetch
from ..engine_core.dispatcher import ActionResult
from ..engine_core.repeating import StepOutcome

logger = logging.getLogger(__name__)


class ActionClient(ABC):
    """Async interface to the game server."""

    @abstractmethod
    async def selection_step(
        self,
        player: int,
        selection_name: str,
        value: Any,
        action_name: str,
        prior_args: dict[str, Any],
    ) -> StepOutcome:
        """Send one value of a repeating selection."""

    @abstractmethod
    async def fetch_choices(
        self,
        action_name: str,
        selection_name: str,
        player: int,
        current_args: dict[str, Any],
    ) -> ChoiceFetch:
        """Ask for the candidates of a deferred selection."""

    @abstractmethod
    async def execute_action(self, action_name: str, args: dict[str, Any]) -> ActionResult:
        """Execute a fully configured action."""

    async def cancel_selection(self, player: int, action_name: str, selection_name: str) -> None:
        """Tell the server a repeating selection was abandoned. Optional."""
        return None


class JsonActionClient(ActionClient):
    """
    ActionClient speaking the camelCase JSON wire format.

    Subclasses provide `request`; operation names are
    "selectionStep", "pickChoices", "executeAction" and "cancelSelection".
    """

    @abstractmethod
    async def request(self, operation: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Send one JSON request and return the decoded response body."""

    async def selection_step(self, player, selection_name, value, action_name, prior_args):
        request = SelectionStepRequest(
            player=player,
            selection_name=selection_name,
            value=value,
            action_name=action_name,
            prior_args=prior_args,
        )
        body = await self.request("selectionStep", request.model_dump(by_alias=True))
        return SelectionStepResponse.model_validate(body).to_outcome()

    async def fetch_choices(self, action_name, selection_name, player, current_args):
        request = PickChoicesRequest(
            action_name=action_name,
            selection_name=selection_name,
            player=player,
            current_args=current_args,
        )
        body = await self.request("pickChoices", request.model_dump(by_alias=True))
        return PickChoicesResponse.model_validate(body).to_fetch()

    async def execute_action(self, action_name, args):
        request = ExecuteActionRequest(action_name=action_name, args=args)
        body = await self.request("executeAction", request.model_dump(by_alias=True))
        return ActionResultModel.model_validate(body).to_result()

    async def cancel_selection(self, player, action_name, selection_name):
        request = CancelSelectionRequest(
            player=player,
            action_name=action_name,
            selection_name=selection_name,
        )
        try:
            await self.request("cancelSelection", request.model_dump(by_alias=True))
        except Exception as exc:
            logger.debug("Cancel notification for %s failed: %s", selection_name, exc)
