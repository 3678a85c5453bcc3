"""
Tests for the wire schemas and the JSON client.
"""

import pytest
from pydantic import ValidationError

from ..api.client import JsonActionClient
from ..api.schemas import (
    ActionResultModel,
    PickChoicesResponse,
    SelectionModel,
    SelectionStepRequest,
    SelectionStepResponse,
    parse_action_metadata,
)
from ..spec_schema.action_spec import ElementRef, MultiSelect, SelectionKind


class TestSelectionModel:
    """Tests for declared selections on the wire."""

    def test_camel_case_fields(self):
        selection = SelectionModel.model_validate({
            "name": "destination",
            "type": "choice",
            "choices": [
                {"value": {"pieceId": 7, "square": "e4"}, "display": "e4", "targetRef": {"id": 104}},
            ],
            "filterBy": {"key": "pieceId", "selectionName": "piece"},
            "skipIfOnlyOne": True,
        }).to_selection()

        assert selection.kind == SelectionKind.CHOICE
        assert selection.filter_by.selection_name == "piece"
        assert selection.skip_if_only_one
        assert selection.choices[0].target_ref == ElementRef(id=104)

    def test_elements_type_is_multi_element(self):
        selection = SelectionModel.model_validate({
            "name": "pieces",
            "type": "elements",
            "validElements": [{"id": 1}, {"id": 2, "display": "Rook"}],
        }).to_selection()

        assert selection.kind == SelectionKind.ELEMENT
        assert selection.multi_select == MultiSelect(min=1)
        assert [el.label for el in selection.valid_elements] == ["Element 1", "Rook"]

    def test_disabled_element_kept(self):
        selection = SelectionModel.model_validate({
            "name": "piece",
            "type": "element",
            "skipIfOnlyOne": True,
            "validElements": [{"id": 1, "disabled": "Pinned"}],
        }).to_selection()

        assert selection.valid_elements[0].disabled == "Pinned"
        assert selection.static_candidates()[0].disabled == "Pinned"

    def test_optional_label(self):
        selection = SelectionModel.model_validate({
            "name": "bonus", "type": "choice", "optional": "No bonus",
        }).to_selection()
        assert selection.optional
        assert selection.skip_label == "No bonus"

    def test_dependent_candidates(self):
        selection = SelectionModel.model_validate({
            "name": "unit",
            "type": "choice",
            "dependsOn": "tier",
            "choicesByDependentValue": {"1": [{"value": "squire", "display": "Squire"}]},
            "multiSelectByDependentValue": {"1": {"min": 1, "max": 2}, "2": None},
        }).to_selection()

        assert selection.has_dependent_candidates
        assert selection.choices_by_dependent_value["1"][0].value == "squire"
        assert selection.multi_select_by_dependent_value == {"1": MultiSelect(min=1, max=2), "2": None}

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            SelectionModel.model_validate({"name": "x", "type": "slider"})

    def test_negative_multi_select_rejected(self):
        with pytest.raises(ValidationError):
            SelectionModel.model_validate({"name": "x", "type": "choice", "multiSelect": {"min": -1}})


class TestActionMetadata:
    def test_name_taken_from_key(self):
        definitions = parse_action_metadata({
            "move": {
                "prompt": "Move a piece",
                "selections": [{"name": "piece", "type": "element", "validElements": [{"id": 7}]}],
            },
            "pass": {},
        })

        assert definitions["move"].name == "move"
        assert [s.name for s in definitions["move"].selections] == ["piece"]
        assert definitions["pass"].selections == []


class TestResponses:
    """Tests for converting server answers."""

    def test_step_response(self):
        outcome = SelectionStepResponse.model_validate({
            "success": True,
            "nextChoices": [{"value": "c3", "display": "Card 3"}, "c4"],
        }).to_outcome()

        assert outcome.success and not outcome.done
        assert [(c.value, c.display) for c in outcome.next_choices] == [("c3", "Card 3"), ("c4", "c4")]

    def test_step_response_action_complete(self):
        outcome = SelectionStepResponse.model_validate({"success": True, "actionComplete": True}).to_outcome()
        assert outcome.action_complete
        assert outcome.next_choices is None

    def test_pick_choices_failure(self):
        fetch = PickChoicesResponse.model_validate({"success": False}).to_fetch()
        assert not fetch.success
        assert fetch.error == "Failed to fetch choices"

    def test_pick_choices_snapshot(self):
        fetch = PickChoicesResponse.model_validate({
            "success": True,
            "validElements": [{"id": 3}],
            "multiSelect": {"min": 0, "max": 1},
        }).to_fetch()

        assert fetch.snapshot.choices is None
        assert [c.value for c in fetch.snapshot.candidates()] == [3]
        assert fetch.snapshot.multi_select == MultiSelect(min=0, max=1)

    def test_pick_choices_disabled_element(self):
        fetch = PickChoicesResponse.model_validate({
            "success": True,
            "validElements": [{"id": 1, "disabled": "Pinned"}, {"id": 2}],
        }).to_fetch()

        candidates = fetch.snapshot.candidates()
        assert [(c.value, c.disabled) for c in candidates] == [(1, "Pinned"), (2, None)]
        assert not candidates[0].is_enabled

    def test_action_result_follow_up(self):
        result = ActionResultModel.model_validate({
            "success": True,
            "followUp": {
                "action": "place",
                "args": {"piece": 7},
                "display": {"piece": "Knight"},
                "metadata": {"name": "place", "selections": [{"name": "spot", "type": "text"}]},
            },
        }).to_result()

        assert result.follow_up.action == "place"
        assert result.follow_up.display == {"piece": "Knight"}
        assert result.follow_up.metadata.get_selection("spot").kind == SelectionKind.TEXT

    def test_request_dumps_camel_case(self):
        request = SelectionStepRequest(
            player=1, selection_name="draftPick", value="c1", action_name="draft", prior_args={"a": 1},
        )
        assert request.model_dump(by_alias=True) == {
            "player": 1,
            "selectionName": "draftPick",
            "value": "c1",
            "actionName": "draft",
            "priorArgs": {"a": 1},
        }


class RecordingJsonClient(JsonActionClient):
    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    async def request(self, operation, payload):
        self.requests.append((operation, payload))
        response = self.responses[operation]
        if isinstance(response, Exception):
            raise response
        return response


class TestJsonActionClient:
    """Tests for the JSON transport adapter."""

    async def test_execute_action(self):
        client = RecordingJsonClient({"executeAction": {"success": False, "error": "Illegal move"}})

        result = await client.execute_action("move", {"piece": 7})

        assert client.requests == [("executeAction", {"actionName": "move", "args": {"piece": 7}})]
        assert result.error == "Illegal move"

    async def test_fetch_choices(self):
        client = RecordingJsonClient({
            "pickChoices": {"success": True, "choices": [{"value": "knight", "display": "Knight"}]},
        })

        fetch = await client.fetch_choices("recruit", "unit", 0, {"tier": 1})

        assert client.requests[0][1] == {
            "actionName": "recruit", "selectionName": "unit", "player": 0, "currentArgs": {"tier": 1},
        }
        assert [c.display for c in fetch.snapshot.choices] == ["Knight"]

    async def test_selection_step(self):
        client = RecordingJsonClient({"selectionStep": {"success": True, "done": True}})
        outcome = await client.selection_step(0, "draftPick", "c1", "draft", {})
        assert outcome.done

    async def test_cancel_failure_is_not_raised(self):
        client = RecordingJsonClient({"cancelSelection": ConnectionError("offline")})
        await client.cancel_selection(0, "draft", "draftPick")
        assert client.requests == [
            ("cancelSelection", {"player": 0, "actionName": "draft", "selectionName": "draftPick"}),
        ]
