"""Grading of attempts against set-valued correct answers.

A question is correct only when the selected indices equal the correct
indices as sets. There is no partial credit and an unanswered question is
never correct.
"""

import logging
from typing import Dict, List, Sequence, Tuple

from quizme.schemas.result.result_base import GradedAnswer

logger = logging.getLogger(__name__)


def is_correct(selected: Sequence[int], correct: Sequence[int]) -> bool:
    return len(selected) == len(correct) and sorted(selected) == sorted(correct)


def score(questions: List[dict], submitted: Dict[int, List[int]]) -> Tuple[int, List[GradedAnswer]]:
    """Grade every question index in ``[0, len(questions))``.

    Args:
        questions: Stored question dicts, each with ``correct_answers``.
        submitted: Mapping of question index to selected option indices.

    Returns:
        The number of correct questions and one graded answer per question.
    """
    total = 0
    graded: List[GradedAnswer] = []

    for index, question in enumerate(questions):
        selected = list(submitted.get(index, []))
        correct = list(question["correct_answers"])
        answered_correctly = bool(selected) and is_correct(selected, correct)
        if answered_correctly:
            total += 1
        graded.append(
            GradedAnswer(
                question_index=index,
                selected_answers=selected,
                correct_answers=correct,
                is_correct=answered_correctly,
            )
        )

    return total, graded


def percentage(correct: int, declared_total: int, live_total: int) -> float:
    """Percentage over the quiz's declared question count.

    A declared count that disagrees with the stored questions means the quiz
    was altered after creation; it is logged and the result capped at 100.
    """
    if declared_total != live_total:
        logger.error(
            "Quiz declares %d questions but holds %d; grading against the declared count",
            declared_total,
            live_total,
        )
    if declared_total <= 0:
        return 0.0
    return min(100.0, correct / declared_total * 100)
