"""Turns a graded result into the parameters of a follow-up quiz."""

import logging
import math
from typing import List

from pydantic import BaseModel

from quizme.prompts.quiz_prompts import WEAK_AREAS_TEMPLATE, REINFORCEMENT_TEMPLATE
from quizme.schemas.result.result_base import WrongAnswer
from quizme.services.adaptive_kind import AdaptiveKind
from quizme.services.difficulty import Difficulty, next_difficulty
from quizme.services.question_types import QuestionType
from quizme.services.weak_topics import extract_weak_topics

logger = logging.getLogger(__name__)

WEAK_AREA_SHARE = 0.75


def weak_question_count(number_of_questions: int) -> int:
    return math.ceil(WEAK_AREA_SHARE * number_of_questions)


def classify(use_harder_difficulty: bool, focus_on_weak_areas: bool, weak_topics: List[str]) -> AdaptiveKind:
    if use_harder_difficulty:
        return AdaptiveKind.harder
    if focus_on_weak_areas and weak_topics:
        return AdaptiveKind.weak_focus
    return AdaptiveKind.same_level_reinforcement


class AdaptiveGenerationRequest(BaseModel):
    original_topic: str
    target_difficulty: Difficulty
    question_types: List[QuestionType]
    number_of_questions: int
    wrong_answers: List[WrongAnswer]
    # already reduced to "requested and there is something to focus on"
    focus_on_weak_areas: bool
    use_harder_difficulty: bool
    weak_topics: List[str] = []

    @property
    def targets_weak_topics(self) -> bool:
        return self.focus_on_weak_areas and bool(self.weak_topics)

    @property
    def weak_question_count(self) -> int:
        if not self.targets_weak_topics:
            return 0
        return weak_question_count(self.number_of_questions)

    @property
    def kind(self) -> AdaptiveKind:
        return classify(self.use_harder_difficulty, self.focus_on_weak_areas, self.weak_topics)


def build_adaptive_request(
    generator,
    original_topic: str,
    original_difficulty: Difficulty,
    question_types: List[QuestionType],
    number_of_questions: int,
    wrong_answers: List[WrongAnswer],
    focus_on_weak_areas: bool,
    use_harder_difficulty: bool,
) -> AdaptiveGenerationRequest:
    effective_focus = focus_on_weak_areas and bool(wrong_answers)
    if focus_on_weak_areas and not effective_focus:
        logger.info("Weak-area focus requested with no wrong answers; generating without focus")

    weak_topics = extract_weak_topics(generator, wrong_answers, original_topic) if effective_focus else []
    logger.info("Extracted weak topics: %s", ", ".join(weak_topics) or "none")

    return AdaptiveGenerationRequest(
        original_topic=original_topic,
        target_difficulty=next_difficulty(original_difficulty, use_harder_difficulty),
        question_types=question_types,
        number_of_questions=number_of_questions,
        wrong_answers=wrong_answers,
        focus_on_weak_areas=effective_focus,
        use_harder_difficulty=use_harder_difficulty,
        weak_topics=weak_topics,
    )


def focus_context(request: AdaptiveGenerationRequest) -> str:
    """The prompt paragraph that skews (or does not skew) the new questions."""
    if request.targets_weak_topics:
        weak_count = request.weak_question_count
        return WEAK_AREAS_TEMPLATE.format(
            weak_topics=", ".join(request.weak_topics),
            weak_count=weak_count,
            other_count=request.number_of_questions - weak_count,
            topic=request.original_topic,
        )
    if request.wrong_answers:
        return REINFORCEMENT_TEMPLATE.format(topic=request.original_topic)
    return ""
