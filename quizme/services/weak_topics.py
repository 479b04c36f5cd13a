import logging
from typing import List

from quizme.core.config import settings
from quizme.prompts.quiz_prompts import WEAK_TOPICS_SYSTEM_PROMPT, WEAK_TOPICS_TEMPLATE, WRONG_ANSWER_TEMPLATE
from quizme.schemas.result.result_base import WrongAnswer
from quizme.services.generator import parse_json_payload

logger = logging.getLogger(__name__)

MAX_TOPICS = 5


def build_weak_topics_prompt(wrong_answers: List[WrongAnswer], original_topic: str) -> str:
    context = "\n\n".join(
        WRONG_ANSWER_TEMPLATE.format(
            number=number,
            question_text=answer.question_text,
            question_type=answer.question_type.value,
            explanation=answer.explanation or "",
        )
        for number, answer in enumerate(wrong_answers, start=1)
    )
    return WEAK_TOPICS_TEMPLATE.format(topic=original_topic, wrong_answers=context)


def extract_weak_topics(generator, wrong_answers: List[WrongAnswer], original_topic: str) -> List[str]:
    """Ask the generator for the concepts behind ``wrong_answers``.

    Never raises: any failure is logged and yields no topics, so quiz
    generation can go on without a weak-area skew.
    """
    if not wrong_answers:
        return []

    prompt = build_weak_topics_prompt(wrong_answers, original_topic)
    try:
        raw = generator.complete(
            WEAK_TOPICS_SYSTEM_PROMPT,
            prompt,
            temperature=settings.TOPICS_TEMPERATURE,
            purpose="extract_weak_topics",
        )
        topics = parse_json_payload(raw).get("topics")
    except Exception as e:
        logger.warning("Failed to extract weak topics: %s, continuing anyway", e)
        return []

    if not isinstance(topics, list):
        logger.warning("Weak topic response has no topics list, continuing anyway")
        return []

    cleaned: List[str] = []
    for topic in topics:
        if isinstance(topic, str) and topic.strip() and topic.strip() not in cleaned:
            cleaned.append(topic.strip())
    return cleaned[:MAX_TOPICS]
