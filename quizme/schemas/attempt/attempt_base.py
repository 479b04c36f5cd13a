from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from quizme.services.attempt_status import AttemptStatus


class AttemptStart(BaseModel):
    quiz_slug: str = Field(..., min_length=1)
    time_limit_seconds: Optional[int] = Field(None, ge=1)


class AnswerSubmission(BaseModel):
    question_index: int = Field(..., ge=0)
    selected_answers: List[int] = Field(..., min_length=1)


class SubmittedAnswer(BaseModel):
    question_index: int
    selected_answers: List[int]
    answered_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AttemptOut(BaseModel):
    slug: str
    user_id: str
    quiz_slug: str
    status: AttemptStatus
    answers: List[SubmittedAnswer]
    started_at: datetime
    last_updated_at: datetime
    completed_at: Optional[datetime] = None
    time_limit_seconds: Optional[int] = None
    is_overtime: bool

    model_config = ConfigDict(from_attributes=True)


class MessageOut(BaseModel):
    message: str
