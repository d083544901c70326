import json

import pytest

from neuronote.exceptions import MalformedResponseError
from neuronote.models.study_pack import StudyPack, MindMapNode
from neuronote.utils.llm_client import parse_study_pack


def test_parse_valid_pack(sample_pack_dict):
    pack = parse_study_pack(json.dumps(sample_pack_dict))
    assert pack.title == "Photosynthesis"
    assert pack.summary.key_points[0] == "Happens in chloroplasts"
    assert pack.mind_map.children[0].children[1].label == "ATP"
    assert pack.quiz.multiple_choice[0].correct_index == 2
    assert pack.quiz.total_questions == 3


def test_round_trip_is_stable(sample_pack_dict):
    pack = StudyPack.model_validate(sample_pack_dict)
    again = StudyPack.model_validate_json(pack.model_dump_json())
    assert again == pack
    assert again.model_dump() == pack.model_dump()


def test_camel_case_and_flat_quiz_are_accepted():
    raw = {
        "title": "Order of operations",
        "summary": {"coreConcept": "Do brackets first.", "keyPoints": ["PEMDAS"]},
        "mindMap": {"label": "Math"},
        "flashcards": [],
        "mnemonics": [{"type": "Analogy", "content": "Brackets are VIPs", "emoji": "💡"}],
        "quiz": [{"question": "First?", "options": ["+", "()"], "correctIndex": 1}],
    }
    pack = parse_study_pack(json.dumps(raw))
    assert pack.summary.core_concept == "Do brackets first."
    assert pack.mind_map.children == []
    assert pack.mnemonics[0].explanation == ""
    assert pack.quiz.multiple_choice[0].correct_index == 1
    assert pack.quiz.true_false == []


def test_code_fence_is_stripped(sample_pack_dict):
    text = "```json\n" + json.dumps(sample_pack_dict) + "\n```"
    assert parse_study_pack(text).title == "Photosynthesis"


def test_single_item_array_is_unwrapped(sample_pack_dict):
    assert parse_study_pack(json.dumps([sample_pack_dict])).title == "Photosynthesis"


@pytest.mark.parametrize("text", ["", "   ", "not json", "{\"title\": ", "[1, 2]", "42"])
def test_unparseable_replies(text):
    with pytest.raises(MalformedResponseError):
        parse_study_pack(text)


def test_schema_mismatch(sample_pack_dict):
    del sample_pack_dict["summary"]
    with pytest.raises(MalformedResponseError):
        parse_study_pack(json.dumps(sample_pack_dict))


def test_correct_index_out_of_range(sample_pack_dict):
    sample_pack_dict["quiz"]["multiple_choice"][0]["correct_index"] = 4
    with pytest.raises(MalformedResponseError):
        parse_study_pack(json.dumps(sample_pack_dict))


def test_true_false_accepts_question_key(sample_pack_dict):
    sample_pack_dict["quiz"]["true_false"] = [{"question": "Sky is green.", "answer": False}]
    pack = parse_study_pack(json.dumps(sample_pack_dict))
    assert pack.quiz.true_false[0].statement == "Sky is green."


def test_null_fields_fall_back_to_defaults(sample_pack_dict):
    sample_pack_dict["mind_map"]["children"][1]["children"] = None
    sample_pack_dict["mnemonics"][0]["explanation"] = None
    sample_pack_dict["summary"]["key_points"] = None
    sample_pack_dict["diagram"] = {"type": "flow", "steps": None}
    sample_pack_dict["quiz"]["true_false"] = None

    pack = parse_study_pack(json.dumps(sample_pack_dict))
    assert pack.mind_map.children[1].children == []
    assert pack.mnemonics[0].explanation == ""
    assert pack.summary.key_points == []
    assert pack.diagram.steps == []
    assert pack.quiz.true_false == []
    assert pack.quiz.total_questions == 2


def test_null_required_field_is_still_rejected(sample_pack_dict):
    sample_pack_dict["title"] = None
    with pytest.raises(MalformedResponseError):
        parse_study_pack(json.dumps(sample_pack_dict))


def test_mind_map_depth_and_count(sample_pack_dict):
    node = MindMapNode.model_validate(sample_pack_dict["mind_map"])
    assert node.depth() == 3
    assert node.count() == 6
