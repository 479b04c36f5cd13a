import pytest

from quizme.core.errors import NoValidQuestionsError
from quizme.services.question_validator import check_candidate, validate_questions, DEFAULT_EXPLANATION
from tests.helpers import candidate

ALL_TYPES = ["mcq", "true-false", "multiple-correct"]


@pytest.mark.parametrize("question", [
    candidate("mcq", ["a", "b", "c", "d"], [0]),
    candidate("true-false", ["True", "False"], [1]),
    candidate("multiple-correct", ["a", "b", "c", "d"], [0, 3]),
])
def test_accepts_minimal_valid_question_of_each_type(question):
    assert check_candidate(question, ALL_TYPES) is None


@pytest.mark.parametrize("question, reason", [
    (candidate("mcq", ["Paris", " paris ", "Rome", "Oslo"], [0]), "contains duplicate options"),
    (candidate("mcq", ["a", "", "c", "d"], [0]), "contains empty options"),
    (candidate("mcq", ["a", "   ", "c", "d"], [0]), "contains empty options"),
    (candidate("true-false", ["True", "False", "Maybe"], [0]), "true/false must have exactly 2 options"),
    (candidate("mcq", ["a", "b", "c", "d"], [0, 1]), "mcq must have exactly 1 correct answer"),
    (candidate("multiple-correct", ["a", "b", "c", "d"], [2]), "multiple-correct must have at least 2 correct answers"),
    (candidate("mcq", ["a", "b", "c", "d"], [4]), "invalid answer indices"),
    (candidate("mcq", ["a", "b", "c", "d"], [-1]), "invalid answer indices"),
    (candidate("mcq", ["a", "b", "c", "d"], []), "invalid correct answers"),
    (candidate("mcq", ["a"], [0]), "invalid options count"),
    (candidate("essay", ["a", "b"], [0]), "invalid question type 'essay'"),
    (candidate("multiple-correct", ["a", "b", "c", "d"], [1, 1]), "repeated answer indices"),
    (candidate("mcq", ["a", "b", "c", "d"], [True]), "invalid answer indices"),
    (candidate("mcq", ["a", "b", "c", "d"], [0], text="  "), "missing question text"),
    ("not a question", "candidate is not an object"),
])
def test_rejects_invalid_candidates(question, reason):
    assert check_candidate(question, ALL_TYPES) == reason


def test_rejects_type_outside_requested_types():
    question = candidate("true-false", ["True", "False"], [0])
    assert check_candidate(question, ["mcq"]) == "question type true-false not in requested types"


def test_validate_keeps_only_valid_questions_in_order():
    questions = [
        candidate("mcq", ["a", "b", "c", "d"], [0], text="first"),
        candidate("mcq", ["a", "a", "c", "d"], [0], text="duplicate"),
        candidate("true-false", ["True", "False"], [1], text="second"),
    ]

    valid = validate_questions(questions, ALL_TYPES)

    assert [q.question_text for q in valid] == ["first", "second"]


def test_validate_trims_and_defaults_explanation():
    question = candidate("mcq", [" a ", "b", "c", "d"], [0], text="  Trim me?  ", explanation="")

    [valid] = validate_questions([question], ["mcq"])

    assert valid.question_text == "Trim me?"
    assert valid.options[0] == "a"
    assert valid.explanation == DEFAULT_EXPLANATION


def test_validate_raises_when_nothing_survives():
    with pytest.raises(NoValidQuestionsError):
        validate_questions([candidate("mcq", ["a", "b"], [0, 1])], ["mcq"])


def test_validate_raises_on_empty_input():
    with pytest.raises(NoValidQuestionsError):
        validate_questions([], ALL_TYPES)
