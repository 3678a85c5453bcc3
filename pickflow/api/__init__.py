"""
API Module - Wire contract with the game server.

The engine calls the server for:
1. Repeating selection steps
2. Deferred choice lists
3. Action execution
4. Cancellation notices

Transport is supplied by the host application through ActionClient.
"""

from .schemas import (
    # Metadata
    ActionMetadataModel,
    SelectionModel,
    ChoiceModel,
    ValidElementModel,
    ElementRefModel,
    MultiSelectModel,
    parse_action_metadata,
    # Requests
    SelectionStepRequest,
    PickChoicesRequest,
    ExecuteActionRequest,
    CancelSelectionRequest,
    # Responses
    SelectionStepResponse,
    PickChoicesResponse,
    ActionResultModel,
    FollowUpModel,
)
from .client import ActionClient, JsonActionClient

__all__ = [
    # Metadata
    "ActionMetadataModel",
    "SelectionModel",
    "ChoiceModel",
    "ValidElementModel",
    "ElementRefModel",
    "MultiSelectModel",
    "parse_action_metadata",
    # Requests
    "SelectionStepRequest",
    "PickChoicesRequest",
    "ExecuteActionRequest",
    "CancelSelectionRequest",
    # Responses
    "SelectionStepResponse",
    "PickChoicesResponse",
    "ActionResultModel",
    "FollowUpModel",
    # Client
    "ActionClient",
    "JsonActionClient",
]
