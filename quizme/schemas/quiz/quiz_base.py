from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from typing import Annotated, List, Optional

from quizme.services.adaptive_kind import AdaptiveKind
from quizme.services.difficulty import Difficulty
from quizme.services.question_types import QuestionType


class QuestionIn(BaseModel):
    question_text: str
    question_type: QuestionType
    options: List[str]
    correct_answers: List[int]
    explanation: str


class QuestionPublic(BaseModel):
    question_text: str
    question_type: QuestionType
    options: List[str]


class QuizGenerate(BaseModel):
    topic: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    difficulty: Difficulty
    question_types: List[QuestionType] = Field(..., min_length=1)
    number_of_questions: int = Field(..., ge=1, le=20)


class AdaptiveQuizGenerate(BaseModel):
    result_slug: str = Field(..., min_length=1)
    focus_on_weak_areas: bool
    use_harder_difficulty: bool


class QuizSummary(BaseModel):
    slug: str
    creator_id: str
    topic: str
    difficulty: Difficulty
    question_types: List[QuestionType]
    number_of_questions: int
    is_public: bool
    parent_quiz_slug: Optional[str] = None
    source_result_slug: Optional[str] = None
    adaptive_kind: Optional[AdaptiveKind] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuizOut(QuizSummary):
    questions: List[QuestionIn]


class QuizPublicOut(QuizSummary):
    questions: List[QuestionPublic]


class AdaptiveQuizOut(BaseModel):
    quiz: QuizOut
    weak_topics: List[str]
    adaptive_kind: AdaptiveKind


class HasCompletedOut(BaseModel):
    has_completed: bool
