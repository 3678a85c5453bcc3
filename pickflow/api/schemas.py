"""
Pydantic Schemas for the wire protocol.

These models define the exact contract between the selection engine and
the game server. Field names use the server's camelCase on the wire and
snake_case in Python (populate_by_name is enabled everywhere).

Remote calls:
- Selection step (repeating selections)
- Deferred choices (candidates computed server-side on demand)
- Action execution
"""

from typing import Any, Literal, Optional, Union
from pydantic import BaseModel, Field

from ..spec_schema.action_spec import (
    ActionDefinition,
    Choice,
    ElementRef,
    FilterBy,
    MultiSelect,
    RepeatConfig,
    Selection,
    SelectionKind,
    ValidElement,
)
from ..engine_core.choice_filter import ChoiceFetch, ChoiceSnapshot
from ..engine_core.dispatcher import ActionResult, FollowUp
from ..engine_core.repeating import StepOutcome, coerce_choice


_WIRE = {"populate_by_name": True}


# =============================================================================
# Shared Models
# =============================================================================

class ElementRefModel(BaseModel):
    """Reference to a board element."""
    id: Optional[int] = None
    name: Optional[str] = None
    notation: Optional[str] = None
    class_name: Optional[str] = Field(None, alias="className")

    model_config = _WIRE

    def to_ref(self) -> ElementRef:
        return ElementRef(id=self.id, name=self.name, notation=self.notation, class_name=self.class_name)


def _ref(model: Optional[ElementRefModel]) -> Optional[ElementRef]:
    return model.to_ref() if model is not None else None


class ChoiceModel(BaseModel):
    """A candidate value with display text and optional board refs."""
    value: Any = None
    display: str
    source_ref: Optional[ElementRefModel] = Field(None, alias="sourceRef")
    target_ref: Optional[ElementRefModel] = Field(None, alias="targetRef")
    disabled: Optional[str] = Field(None, description="Reason the choice is not selectable")

    model_config = _WIRE

    def to_choice(self) -> Choice:
        return Choice(
            value=self.value,
            display=self.display,
            source_ref=_ref(self.source_ref),
            target_ref=_ref(self.target_ref),
            disabled=self.disabled,
        )


class ValidElementModel(BaseModel):
    """An element that may be picked for an element selection."""
    id: int
    display: Optional[str] = None
    ref: Optional[ElementRefModel] = None
    disabled: Optional[str] = None

    model_config = _WIRE

    def to_element(self) -> ValidElement:
        return ValidElement(id=self.id, display=self.display, ref=_ref(self.ref), disabled=self.disabled)


class FilterByModel(BaseModel):
    key: str
    selection_name: str = Field(..., alias="selectionName")

    model_config = _WIRE


class RepeatModel(BaseModel):
    has_on_each: bool = Field(False, alias="hasOnEach")
    terminator: Any = None

    model_config = _WIRE


class MultiSelectModel(BaseModel):
    min: int = Field(1, ge=0)
    max: Optional[int] = Field(None, ge=0)

    model_config = _WIRE

    def to_bounds(self) -> MultiSelect:
        return MultiSelect(min=self.min, max=self.max)


def _bounds(model: Optional[MultiSelectModel]) -> Optional[MultiSelect]:
    return model.to_bounds() if model is not None else None


# =============================================================================
# Action Metadata
# =============================================================================

class SelectionModel(BaseModel):
    """Wire form of one declared selection."""
    name: str
    type: Literal["choice", "player", "element", "elements", "number", "text"]
    prompt: Optional[str] = None
    optional: Union[bool, str] = False
    choices: Optional[list[ChoiceModel]] = None
    valid_elements: Optional[list[ValidElementModel]] = Field(None, alias="validElements")
    filter_by: Optional[FilterByModel] = Field(None, alias="filterBy")
    depends_on: Optional[str] = Field(None, alias="dependsOn")
    choices_by_dependent_value: Optional[dict[str, list[ChoiceModel]]] = Field(
        None, alias="choicesByDependentValue"
    )
    elements_by_dependent_value: Optional[dict[str, list[ValidElementModel]]] = Field(
        None, alias="elementsByDependentValue"
    )
    multi_select_by_dependent_value: Optional[dict[str, Optional[MultiSelectModel]]] = Field(
        None, alias="multiSelectByDependentValue"
    )
    repeat: Optional[RepeatModel] = None
    multi_select: Optional[MultiSelectModel] = Field(None, alias="multiSelect")
    skip_if_only_one: bool = Field(False, alias="skipIfOnlyOne")
    deferred: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    integer: bool = False
    min_length: Optional[int] = Field(None, alias="minLength")
    max_length: Optional[int] = Field(None, alias="maxLength")
    pattern: Optional[str] = None

    model_config = _WIRE

    def to_selection(self) -> Selection:
        kind = SelectionKind.ELEMENT if self.type == "elements" else SelectionKind(self.type)
        multi_select = _bounds(self.multi_select)
        if self.type == "elements" and multi_select is None:
            multi_select = MultiSelect(min=1)

        return Selection(
            name=self.name,
            kind=kind,
            prompt=self.prompt,
            optional=bool(self.optional),
            skip_label=self.optional if isinstance(self.optional, str) else None,
            choices=[c.to_choice() for c in self.choices or []],
            valid_elements=[e.to_element() for e in self.valid_elements or []],
            filter_by=(
                FilterBy(selection_name=self.filter_by.selection_name, key=self.filter_by.key)
                if self.filter_by else None
            ),
            depends_on=self.depends_on,
            choices_by_dependent_value={
                key: [c.to_choice() for c in choices]
                for key, choices in (self.choices_by_dependent_value or {}).items()
            },
            elements_by_dependent_value={
                key: [e.to_element() for e in elements]
                for key, elements in (self.elements_by_dependent_value or {}).items()
            },
            multi_select_by_dependent_value={
                key: _bounds(bounds)
                for key, bounds in (self.multi_select_by_dependent_value or {}).items()
            },
            repeat=(
                RepeatConfig(has_on_each=self.repeat.has_on_each, terminator=self.repeat.terminator)
                if self.repeat else None
            ),
            multi_select=multi_select,
            skip_if_only_one=self.skip_if_only_one,
            deferred=self.deferred,
            min=self.min,
            max=self.max,
            integer=self.integer,
            min_length=self.min_length,
            max_length=self.max_length,
            pattern=self.pattern,
        )


class ActionMetadataModel(BaseModel):
    """Wire form of an action and its selections."""
    name: str
    prompt: Optional[str] = None
    selections: list[SelectionModel] = Field(default_factory=list)

    model_config = _WIRE

    def to_definition(self) -> ActionDefinition:
        return ActionDefinition(
            name=self.name,
            prompt=self.prompt,
            selections=[s.to_selection() for s in self.selections],
        )


def parse_action_metadata(data: dict[str, Any]) -> dict[str, ActionDefinition]:
    """Parse a {name: metadata} mapping into action definitions."""
    definitions = {}
    for name, raw in data.items():
        payload = {"name": name, **raw} if "name" not in raw else raw
        definitions[name] = ActionMetadataModel.model_validate(payload).to_definition()
    return definitions


# =============================================================================
# Selection Step (repeating selections)
# =============================================================================

class SelectionStepRequest(BaseModel):
    player: int
    selection_name: str = Field(..., alias="selectionName")
    value: Any = None
    action_name: str = Field(..., alias="actionName")
    prior_args: dict[str, Any] = Field(default_factory=dict, alias="priorArgs")

    model_config = _WIRE


class SelectionStepResponse(BaseModel):
    success: bool
    error: Optional[str] = None
    done: bool = False
    next_choices: Optional[list[Any]] = Field(None, alias="nextChoices")
    action_complete: bool = Field(False, alias="actionComplete")

    model_config = _WIRE

    def to_outcome(self) -> StepOutcome:
        return StepOutcome(
            success=self.success,
            error=self.error,
            done=self.done,
            next_choices=(
                [coerce_choice(c) for c in self.next_choices]
                if self.next_choices is not None else None
            ),
            action_complete=self.action_complete,
        )


# =============================================================================
# Deferred Choices
# =============================================================================

class PickChoicesRequest(BaseModel):
    action_name: str = Field(..., alias="actionName")
    selection_name: str = Field(..., alias="selectionName")
    player: int
    current_args: dict[str, Any] = Field(default_factory=dict, alias="currentArgs")

    model_config = _WIRE


class PickChoicesResponse(BaseModel):
    success: bool
    error: Optional[str] = None
    choices: Optional[list[ChoiceModel]] = None
    valid_elements: Optional[list[ValidElementModel]] = Field(None, alias="validElements")
    multi_select: Optional[MultiSelectModel] = Field(None, alias="multiSelect")

    model_config = _WIRE

    def to_fetch(self) -> ChoiceFetch:
        if not self.success:
            return ChoiceFetch.failure(self.error or "Failed to fetch choices")
        return ChoiceFetch(
            success=True,
            snapshot=ChoiceSnapshot(
                choices=[c.to_choice() for c in self.choices] if self.choices is not None else None,
                valid_elements=(
                    [e.to_element() for e in self.valid_elements]
                    if self.valid_elements is not None else None
                ),
                multi_select=_bounds(self.multi_select),
            ),
        )


# =============================================================================
# Action Execution
# =============================================================================

class ExecuteActionRequest(BaseModel):
    action_name: str = Field(..., alias="actionName")
    args: dict[str, Any] = Field(default_factory=dict)

    model_config = _WIRE


class FollowUpModel(BaseModel):
    action: str
    args: dict[str, Any] = Field(default_factory=dict)
    display: dict[str, str] = Field(default_factory=dict)
    metadata: Optional[ActionMetadataModel] = None

    model_config = _WIRE


class ActionResultModel(BaseModel):
    success: bool
    error: Optional[str] = None
    data: Optional[Any] = None
    message: Optional[str] = None
    follow_up: Optional[FollowUpModel] = Field(None, alias="followUp")

    model_config = _WIRE

    def to_result(self) -> ActionResult:
        follow_up = None
        if self.follow_up is not None:
            follow_up = FollowUp(
                action=self.follow_up.action,
                args=dict(self.follow_up.args),
                display=dict(self.follow_up.display),
                metadata=self.follow_up.metadata.to_definition() if self.follow_up.metadata else None,
            )
        return ActionResult(
            success=self.success,
            error=self.error,
            data=self.data,
            message=self.message,
            follow_up=follow_up,
        )


class CancelSelectionRequest(BaseModel):
    player: int
    action_name: str = Field(..., alias="actionName")
    selection_name: str = Field(..., alias="selectionName")

    model_config = _WIRE
