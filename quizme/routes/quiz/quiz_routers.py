from typing import List, Optional, Union

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from quizme.core.database import get_db
from quizme.core.security import get_current_user_id, get_optional_user_id
from quizme.models.quiz_db.quiz_crud import get_quiz_by_slug, ensure_quiz_access, get_my_quizzes, \
    get_public_quizzes, toggle_quiz_visibility, has_user_completed_quiz, get_adaptive_children, delete_quiz
from quizme.schemas.attempt.attempt_base import MessageOut
from quizme.schemas.quiz.quiz_base import QuizGenerate, AdaptiveQuizGenerate, QuizOut, QuizPublicOut, \
    QuizSummary, AdaptiveQuizOut, HasCompletedOut
from quizme.services.generator import get_generator
from quizme.services.quiz_generation import generate_quiz, generate_adaptive_quiz

quiz_router = APIRouter(prefix="/quizzes", tags=["Quizzes"])


@quiz_router.post("/generate", response_model=QuizOut, status_code=status.HTTP_201_CREATED)
def generate(
    params: QuizGenerate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    generator=Depends(get_generator),
):
    return generate_quiz(db, generator, user_id, params)


@quiz_router.post("/adaptive", response_model=AdaptiveQuizOut, status_code=status.HTTP_201_CREATED)
def generate_adaptive(
    params: AdaptiveQuizGenerate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    generator=Depends(get_generator),
):
    quiz, request = generate_adaptive_quiz(db, generator, user_id, params)
    return AdaptiveQuizOut(
        quiz=QuizOut.model_validate(quiz),
        weak_topics=request.weak_topics,
        adaptive_kind=request.kind,
    )


@quiz_router.get("/my-quizzes", response_model=List[QuizSummary])
def my_quizzes(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return get_my_quizzes(db, user_id)


@quiz_router.get("/public", response_model=List[QuizSummary])
def public_quizzes(db: Session = Depends(get_db)):
    return get_public_quizzes(db)


@quiz_router.get("/{slug}", response_model=Union[QuizOut, QuizPublicOut])
def get_quiz(slug: str, db: Session = Depends(get_db), user_id: Optional[str] = Depends(get_optional_user_id)):
    quiz = get_quiz_by_slug(db, slug)
    ensure_quiz_access(quiz, user_id)
    if quiz.creator_id == user_id:
        return QuizOut.model_validate(quiz)
    return QuizPublicOut.model_validate(quiz)


@quiz_router.delete("/{slug}", response_model=MessageOut)
def remove_quiz(slug: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    delete_quiz(db, slug, user_id)
    return MessageOut(message="Quiz deleted successfully")


@quiz_router.patch("/{slug}/visibility", response_model=QuizSummary)
def toggle_visibility(slug: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return toggle_quiz_visibility(db, slug, user_id)


@quiz_router.get("/{slug}/has-completed", response_model=HasCompletedOut)
def has_completed(slug: str, db: Session = Depends(get_db), user_id: Optional[str] = Depends(get_optional_user_id)):
    if user_id is None:
        return HasCompletedOut(has_completed=False)
    return HasCompletedOut(has_completed=has_user_completed_quiz(db, slug, user_id))


@quiz_router.get("/{slug}/adaptive-children", response_model=List[QuizSummary])
def adaptive_children(slug: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return get_adaptive_children(db, slug, user_id)
