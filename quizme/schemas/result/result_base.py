from datetime import datetime

from pydantic import BaseModel, ConfigDict
from typing import List, Optional

from quizme.services.difficulty import Difficulty
from quizme.services.question_types import QuestionType


class GradedAnswer(BaseModel):
    question_index: int
    selected_answers: List[int]
    correct_answers: List[int]
    is_correct: bool


class DetailedAnswer(GradedAnswer):
    question_text: str
    question_type: QuestionType
    options: List[str]
    explanation: str


class ResultListItem(BaseModel):
    slug: str
    user_id: str
    quiz_slug: str
    quiz_topic: str
    quiz_difficulty: Difficulty
    attempt_slug: str
    score: int
    total_questions: int
    percentage: float
    completed_at: datetime
    is_result_public: bool

    model_config = ConfigDict(from_attributes=True)


class ResultOut(ResultListItem):
    answers: List[GradedAnswer]


class ResultDetailOut(ResultListItem):
    answers: List[DetailedAnswer]


class ResultVisibilityOut(BaseModel):
    slug: str
    is_result_public: bool

    model_config = ConfigDict(from_attributes=True)


class WrongAnswer(BaseModel):
    question_text: str
    question_type: QuestionType
    options: List[str]
    selected_answers: List[int]
    correct_answers: List[int]
    explanation: Optional[str] = None
