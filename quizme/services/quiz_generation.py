"""Quiz generation pipelines: prompt, call the generator, validate, commit.

Questions are validated before anything is written, so a failed generation
never leaves a partial quiz behind.
"""

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from quizme.core.config import settings
from quizme.core.errors import UpstreamFailureError
from quizme.models.quiz_db.quiz_crud import create_quiz
from quizme.models.quiz_db.quiz_db import Quiz
from quizme.models.result_db.result_crud import get_owned_result, wrong_answers
from quizme.prompts.quiz_prompts import (
    QUIZ_SYSTEM_PROMPT,
    ADAPTIVE_SYSTEM_PROMPT,
    QUIZ_GENERATION_TEMPLATE,
    FRESHNESS_NOTE,
    TYPE_INSTRUCTIONS,
)
from quizme.schemas.quiz.quiz_base import QuizGenerate, AdaptiveQuizGenerate, QuestionIn
from quizme.services.adaptive import AdaptiveGenerationRequest, build_adaptive_request, focus_context
from quizme.services.difficulty import Difficulty, DIFFICULTY_DESCRIPTIONS
from quizme.services.generator import parse_json_payload
from quizme.services.question_types import QuestionType
from quizme.services.question_validator import validate_questions

logger = logging.getLogger(__name__)


def build_quiz_prompt(
    topic: str,
    difficulty: Difficulty,
    question_types: List[QuestionType],
    number_of_questions: int,
    focus: str = "",
    fresh: bool = False,
) -> str:
    types = [QuestionType(t).value for t in question_types]
    return QUIZ_GENERATION_TEMPLATE.format(
        n=number_of_questions,
        difficulty_description=DIFFICULTY_DESCRIPTIONS[Difficulty(difficulty)],
        topic=topic,
        focus_context=focus,
        type_instructions=", ".join(TYPE_INSTRUCTIONS[t] for t in types),
        type_list=", ".join(types),
        freshness=FRESHNESS_NOTE if fresh else "",
    )


def build_adaptive_prompt(request: AdaptiveGenerationRequest) -> str:
    return build_quiz_prompt(
        request.original_topic,
        request.target_difficulty,
        request.question_types,
        request.number_of_questions,
        focus=focus_context(request),
        fresh=True,
    )


def request_questions(generator, system_prompt: str, prompt: str, question_types: List[QuestionType], purpose: str) -> List[QuestionIn]:
    raw = generator.complete(system_prompt, prompt, temperature=settings.QUIZ_TEMPERATURE, purpose=purpose)
    candidates = parse_json_payload(raw).get("questions", [])
    if not isinstance(candidates, list):
        raise UpstreamFailureError("The question generator returned an unexpected payload.")
    return validate_questions(candidates, [QuestionType(t).value for t in question_types])


def generate_quiz(db: Session, generator, user_id: str, params: QuizGenerate) -> Quiz:
    logger.info("Generating quiz for topic: %s, difficulty: %s", params.topic, params.difficulty.value)
    prompt = build_quiz_prompt(params.topic, params.difficulty, params.question_types, params.number_of_questions)
    questions = request_questions(generator, QUIZ_SYSTEM_PROMPT, prompt, params.question_types, "generate_quiz")
    return create_quiz(
        db,
        creator_id=user_id,
        topic=params.topic,
        difficulty=params.difficulty,
        question_types=params.question_types,
        requested_questions=params.number_of_questions,
        questions=questions,
    )


def generate_adaptive_quiz(db: Session, generator, user_id: str, params: AdaptiveQuizGenerate) -> Tuple[Quiz, AdaptiveGenerationRequest]:
    result = get_owned_result(db, params.result_slug, user_id)
    source = result.quiz
    root_quiz_id = source.parent_quiz_id or source.id
    result_slug = result.slug
    topic = source.topic
    difficulty = Difficulty(source.difficulty)
    question_types = [QuestionType(t) for t in source.question_types]
    number_of_questions = source.requested_questions
    mistakes = wrong_answers(result)
    # no transaction stays open while the generator is working
    db.commit()

    request = build_adaptive_request(
        generator,
        original_topic=topic,
        original_difficulty=difficulty,
        question_types=question_types,
        number_of_questions=number_of_questions,
        wrong_answers=mistakes,
        focus_on_weak_areas=params.focus_on_weak_areas,
        use_harder_difficulty=params.use_harder_difficulty,
    )
    logger.info(
        "Generating adaptive quiz: topic=%s, difficulty=%s, focusOnWeakAreas=%s",
        topic,
        request.target_difficulty.value,
        request.focus_on_weak_areas,
    )
    questions = request_questions(
        generator,
        ADAPTIVE_SYSTEM_PROMPT,
        build_adaptive_prompt(request),
        question_types,
        "generate_adaptive_quiz",
    )
    quiz = create_quiz(
        db,
        creator_id=user_id,
        topic=topic,
        difficulty=request.target_difficulty,
        question_types=question_types,
        requested_questions=number_of_questions,
        questions=questions,
        parent_quiz_id=root_quiz_id,
        source_result_slug=result_slug,
        adaptive_kind=request.kind,
    )
    return quiz, request
