"""Boundary to the text-generation model.

The generator is trusted for nothing: it receives a system instruction and a
prompt and returns raw text. Callers parse that text with
``parse_json_payload`` and hand the result to the question validator.
"""

import json
import logging
import re
import time
from functools import lru_cache
from typing import Any, Dict, Optional

from openai import OpenAI, OpenAIError

from quizme.core.config import settings
from quizme.core.errors import UpstreamFailureError

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


class QuizGenerator:
    def __init__(self, client: Optional[OpenAI] = None, model: Optional[str] = None):
        self.client = client or OpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.OPENAI_TIMEOUT_SECONDS,
            max_retries=settings.OPENAI_MAX_RETRIES,
        )
        self.model = model or settings.OPENAI_MODEL

    def complete(self, system_instruction: str, prompt: str, temperature: float = 0.7, purpose: str = "generate_quiz") -> str:
        messages = [
            {"role": "system", "content": system_instruction},
            {"role": "user", "content": prompt},
        ]
        started = time.monotonic()
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            logger.error("Generator call %s failed: %s", purpose, e)
            raise UpstreamFailureError("The question generator is unavailable. Please try again.") from e

        usage = response.usage
        logger.info(
            "LLM generation: %s | model=%s | tokens=%s->%s | latency=%.2fs",
            purpose,
            response.model,
            usage.prompt_tokens if usage else 0,
            usage.completion_tokens if usage else 0,
            time.monotonic() - started,
        )

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise UpstreamFailureError("The question generator returned an empty response.")
        return content


def parse_json_payload(raw: str) -> Dict[str, Any]:
    cleaned = _FENCE.sub("", raw.strip())
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Unparsable generator output: %.200s", raw)
        raise UpstreamFailureError("The question generator returned invalid JSON.") from e
    if not isinstance(data, dict):
        raise UpstreamFailureError("The question generator returned an unexpected payload.")
    return data


@lru_cache()
def get_generator() -> QuizGenerator:
    return QuizGenerator()
