"""Gatekeeper between raw generator output and persisted quiz questions.

Candidates arrive as loosely-typed JSON values. Every rule is checked in a
fixed order and the first failing rule rejects the candidate; rejections are
logged, never raised, unless nothing survives.
"""

import logging
from typing import Any, Iterable, List, Optional

from quizme.core.errors import NoValidQuestionsError
from quizme.schemas.quiz.quiz_base import QuestionIn
from quizme.services.question_types import QuestionType, QUESTION_TYPE_VALUES

logger = logging.getLogger(__name__)

DEFAULT_EXPLANATION = "No explanation provided."


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_candidate(candidate: Any, permitted_types: Iterable[str]) -> Optional[str]:
    """Return the reason ``candidate`` is rejected, or ``None`` when it is valid."""
    if not isinstance(candidate, dict):
        return "candidate is not an object"

    question_type = candidate.get("questionType")
    if question_type not in QUESTION_TYPE_VALUES:
        return f"invalid question type {question_type!r}"
    if question_type not in set(permitted_types):
        return f"question type {question_type} not in requested types"

    options = candidate.get("options")
    if not isinstance(options, list) or len(options) < 2:
        return "invalid options count"
    if any(not isinstance(option, str) or not option.strip() for option in options):
        return "contains empty options"
    if len({option.strip().lower() for option in options}) != len(options):
        return "contains duplicate options"

    correct_answers = candidate.get("correctAnswers")
    if not isinstance(correct_answers, list) or not correct_answers:
        return "invalid correct answers"
    if any(not _is_int(index) or index < 0 or index >= len(options) for index in correct_answers):
        return "invalid answer indices"
    if len(set(correct_answers)) != len(correct_answers):
        return "repeated answer indices"

    if question_type == QuestionType.true_false.value and len(options) != 2:
        return "true/false must have exactly 2 options"
    if question_type == QuestionType.mcq.value and len(correct_answers) != 1:
        return "mcq must have exactly 1 correct answer"
    if question_type == QuestionType.multiple_correct.value and len(correct_answers) < 2:
        return "multiple-correct must have at least 2 correct answers"

    question_text = candidate.get("questionText")
    if not isinstance(question_text, str) or not question_text.strip():
        return "missing question text"

    return None


def _format(candidate: dict) -> QuestionIn:
    explanation = candidate.get("explanation")
    if not isinstance(explanation, str) or not explanation.strip():
        explanation = DEFAULT_EXPLANATION
    return QuestionIn(
        question_text=candidate["questionText"].strip(),
        question_type=QuestionType(candidate["questionType"]),
        options=[option.strip() for option in candidate["options"]],
        correct_answers=list(candidate["correctAnswers"]),
        explanation=explanation.strip(),
    )


def validate_questions(candidates: List[Any], permitted_types: Iterable[str]) -> List[QuestionIn]:
    permitted = {QuestionType(t).value for t in permitted_types}
    valid: List[QuestionIn] = []

    for index, candidate in enumerate(candidates):
        reason = check_candidate(candidate, permitted)
        if reason:
            logger.warning("Skipping question %d: %s", index, reason)
            continue
        valid.append(_format(candidate))

    if not valid:
        raise NoValidQuestionsError("No valid questions generated. Please try again.")

    logger.info("Accepted %d of %d generated questions", len(valid), len(candidates))
    return valid
