"""
Engine Core - Deterministic resolution of an action's selections.

The engine is the runtime that:
1. Stores answers as UNSET / SKIPPED / SET
2. Computes each selection's candidates from earlier answers
3. Finds the next selection needing input, auto-filling single candidates
4. Drives multi-select and server-coordinated repeating selections
5. Submits the completed arguments
"""

from .arguments import ArgStatus, ArgValue, ArgumentChange, ArgumentStore, SKIPPED, UNSET
from .choice_filter import ChoiceFetch, ChoiceSnapshot, available_choices, available_elements, find_choice
from .cursor import AutoFill, SelectionCursor, is_complete, next_selection
from .display import DisplayCache, display_from_value
from .dispatcher import ActionResult, ExecutionDispatcher, FollowUp, sanitize_args
from .input_validation import FillResult, check_fill
from .multi_select import MultiSelectState, ToggleOutcome
from .repeating import RepeatPhase, RepeatingCoordinator, RepeatingState, StepOutcome

__all__ = [
    "ArgStatus",
    "ArgValue",
    "ArgumentChange",
    "ArgumentStore",
    "SKIPPED",
    "UNSET",
    "ChoiceFetch",
    "ChoiceSnapshot",
    "available_choices",
    "available_elements",
    "find_choice",
    "AutoFill",
    "SelectionCursor",
    "is_complete",
    "next_selection",
    "DisplayCache",
    "display_from_value",
    "ActionResult",
    "ExecutionDispatcher",
    "FollowUp",
    "sanitize_args",
    "FillResult",
    "check_fill",
    "MultiSelectState",
    "ToggleOutcome",
    "RepeatPhase",
    "RepeatingCoordinator",
    "RepeatingState",
    "StepOutcome",
]
