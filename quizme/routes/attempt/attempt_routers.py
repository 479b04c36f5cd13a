from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from quizme.core.database import get_db
from quizme.core.security import get_current_user_id
from quizme.models.attempt_db.attempt_crud import start_attempt, get_my_attempts, get_owned_attempt, \
    submit_answer, submit_attempt, abandon_attempt
from quizme.schemas.attempt.attempt_base import AttemptStart, AnswerSubmission, AttemptOut, MessageOut
from quizme.schemas.result.result_base import ResultOut

attempt_router = APIRouter(prefix="/attempts", tags=["Attempts"])


@attempt_router.post("/start", response_model=AttemptOut, status_code=status.HTTP_201_CREATED)
def start(params: AttemptStart, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return start_attempt(db, user_id, params.quiz_slug, params.time_limit_seconds)


@attempt_router.get("/my-attempts", response_model=List[AttemptOut])
def my_attempts(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return get_my_attempts(db, user_id)


@attempt_router.get("/{slug}", response_model=AttemptOut)
def get_attempt(slug: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return get_owned_attempt(db, slug, user_id)


@attempt_router.post("/{slug}/answer", response_model=AttemptOut)
def answer(
    slug: str,
    submission: AnswerSubmission,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return submit_answer(db, slug, user_id, submission.question_index, submission.selected_answers)


@attempt_router.post("/{slug}/submit", response_model=ResultOut)
def submit(slug: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return submit_attempt(db, slug, user_id)


@attempt_router.delete("/{slug}", response_model=MessageOut)
def abandon(slug: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    abandon_attempt(db, slug, user_id)
    return MessageOut(message="Attempt abandoned successfully")
