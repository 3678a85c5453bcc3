"""
Session Module - The single action being configured.

A session represents one action from start to submission:
- Created when the player (or the controller) starts an action
- Holds the arguments answered so far and any sub-protocol state
- Destroyed on submit, cancel, server completion or stale availability

Sessions are EPHEMERAL:
- Exactly one may be live at a time
- Teardown clears everything at once
"""

from .action_session import ActionSession, CollectedSelection, SessionPhase
from .controller import ActionController, WizardCheck, needs_wizard_mode

__all__ = [
    "ActionSession",
    "CollectedSelection",
    "SessionPhase",
    "ActionController",
    "WizardCheck",
    "needs_wizard_mode",
]
