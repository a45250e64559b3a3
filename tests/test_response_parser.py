import pytest

from chemlab.ai.response_parser import ResponseParseError, parse_quiz, parse_reaction_steps, parse_study_guide
from chemlab.domain.enums import QuestionType


def quiz_payload(*questions):
    return {"topic": "Alcohols", "questions": list(questions)}


MCQ = {"id": 1, "type": "mcq", "question": "Which is an alcohol?",
       "options": ["Ethanol", "Ethane"], "correctAnswer": "Ethanol", "explanation": "-OH"}
FITB = {"id": 2, "type": "fitb", "question": "CH3OH is ____.", "correctAnswer": "Methanol"}


def test_parse_quiz():
    quiz = parse_quiz(quiz_payload(MCQ, FITB))
    assert quiz.topic == "Alcohols"
    assert [q.type for q in quiz.questions] == [QuestionType.MCQ, QuestionType.FITB]
    assert quiz.questions[0].options == ("Ethanol", "Ethane")
    assert quiz.questions[1].options is None


def test_empty_options_count_as_absent():
    q = dict(FITB, options=[])
    assert parse_quiz(quiz_payload(q)).questions[0].options is None


def test_missing_id_falls_back_to_position():
    q = dict(FITB)
    del q["id"]
    assert parse_quiz(quiz_payload(MCQ, q)).questions[1].id == 2


def test_topic_fallback():
    assert parse_quiz({"questions": [FITB]}, fallback_topic="Alkanes").topic == "Alkanes"


@pytest.mark.parametrize("payload", [
    {"questions": []},
    {"topic": "x"},
    quiz_payload(dict(MCQ, correctAnswer="Methane")),
    quiz_payload(dict(MCQ, options=None)),
    quiz_payload(dict(FITB, options=["a", "b"])),
    quiz_payload(dict(FITB, type="essay")),
    quiz_payload(dict(FITB, question="  ")),
    quiz_payload("not a question"),
])
def test_invalid_quiz_payloads(payload):
    with pytest.raises(ResponseParseError):
        parse_quiz(payload)


def test_parse_reaction_steps():
    data = parse_reaction_steps({
        "name": "SN2",
        "steps": [{"keyConcept": "Attack", "description": "OH- attacks."},
                  {"step": 7, "description": "Br- leaves."}],
        "references": ["Clayden ch. 15", ""],
    })
    assert [s.step for s in data.steps] == [1, 7]
    assert data.steps[1].key_concept == ""
    assert data.references == ("Clayden ch. 15",)


def test_reaction_steps_require_at_least_one_step():
    with pytest.raises(ResponseParseError):
        parse_reaction_steps({"name": "SN2", "steps": []})


def test_parse_study_guide():
    guide = parse_study_guide({
        "summary": "R-OH compounds.",
        "keyPoints": ["H-bonding"],
        "resources": [{"title": "Alcohols", "url": "https://example.org/v", "source": "YouTube"}, 42],
    }, fallback_topic="Alcohols")
    assert guide.topic == "Alcohols"
    assert guide.common_mistakes == ()
    assert len(guide.resources) == 1
    assert guide.resources[0].source == "YouTube"


def test_study_guide_requires_summary():
    with pytest.raises(ResponseParseError):
        parse_study_guide({"keyPoints": []})


def test_accessory_text_of_wrong_type_is_dropped():
    q = dict(FITB, explanation=42)
    assert parse_quiz(quiz_payload(q)).questions[0].explanation == ""


def test_null_lists_fall_back_to_defaults():
    guide = parse_study_guide({"summary": "R-OH compounds.", "resources": None})
    assert guide.resources == ()
    with pytest.raises(ResponseParseError):
        parse_quiz({"questions": None})
