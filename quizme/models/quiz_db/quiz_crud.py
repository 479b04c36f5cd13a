import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quizme.core.errors import NotFoundError, ForbiddenError, InvalidStateError
from quizme.models.attempt_db.attempt_db import QuizAttempt
from quizme.models.quiz_db.quiz_db import Quiz
from quizme.models.result_db.result_db import QuizResult
from quizme.schemas.quiz.quiz_base import QuestionIn
from quizme.services.adaptive_kind import AdaptiveKind
from quizme.services.difficulty import Difficulty
from quizme.services.slugs import generate_quiz_slug

logger = logging.getLogger(__name__)


def get_quiz_by_slug(db: Session, slug: str) -> Quiz:
    quiz = db.query(Quiz).filter(Quiz.slug == slug).first()
    if not quiz:
        raise NotFoundError("Quiz not found")
    return quiz


def ensure_quiz_access(quiz: Quiz, user_id: Optional[str]):
    if quiz.is_public:
        return
    if user_id is None or quiz.creator_id != user_id:
        raise ForbiddenError("You do not have access to this quiz")


def ensure_quiz_owner(quiz: Quiz, user_id: str, action: str = "modify"):
    if quiz.creator_id != user_id:
        raise ForbiddenError(f"You can only {action} your own quizzes")


def create_quiz(
    db: Session,
    creator_id: str,
    topic: str,
    difficulty: Difficulty,
    question_types: List[str],
    requested_questions: int,
    questions: List[QuestionIn],
    parent_quiz_id: Optional[int] = None,
    source_result_slug: Optional[str] = None,
    adaptive_kind: Optional[AdaptiveKind] = None,
) -> Quiz:
    """Persist an already-validated quiz in one commit.

    Adaptive quizzes (those with a parent) are always created private.
    """
    quiz = Quiz(
        slug=generate_quiz_slug(topic),
        creator_id=creator_id,
        topic=topic.strip(),
        difficulty=Difficulty(difficulty).value,
        question_types=[str(getattr(t, "value", t)) for t in question_types],
        requested_questions=requested_questions,
        number_of_questions=len(questions),
        questions=[q.model_dump(mode="json") for q in questions],
        is_public=False,
        parent_quiz_id=parent_quiz_id,
        source_result_slug=source_result_slug,
        adaptive_kind=adaptive_kind.value if adaptive_kind else None,
    )
    db.add(quiz)
    db.commit()
    db.refresh(quiz)
    logger.info("Created quiz %s with %d questions", quiz.slug, quiz.number_of_questions)
    return quiz


def get_my_quizzes(db: Session, user_id: str) -> List[Quiz]:
    return db.query(Quiz).filter(Quiz.creator_id == user_id).order_by(Quiz.created_at.desc(), Quiz.id.desc()).all()


def get_public_quizzes(db: Session) -> List[Quiz]:
    return db.query(Quiz).filter(Quiz.is_public.is_(True)).order_by(Quiz.created_at.desc(), Quiz.id.desc()).all()


def toggle_quiz_visibility(db: Session, slug: str, user_id: str) -> Quiz:
    quiz = get_quiz_by_slug(db, slug)
    ensure_quiz_owner(quiz, user_id)

    if quiz.is_adaptive and not quiz.is_public:
        raise ForbiddenError("Adaptive quizzes cannot be made public")

    quiz.is_public = not quiz.is_public
    db.commit()
    db.refresh(quiz)
    return quiz


def has_user_completed_quiz(db: Session, slug: str, user_id: str) -> bool:
    quiz = db.query(Quiz).filter(Quiz.slug == slug).first()
    if not quiz:
        return False
    return db.query(QuizResult).filter(
        QuizResult.quiz_id == quiz.id,
        QuizResult.user_id == user_id,
    ).first() is not None


def get_adaptive_children(db: Session, slug: str, user_id: str) -> List[Quiz]:
    parent = get_quiz_by_slug(db, slug)
    ensure_quiz_access(parent, user_id)
    return db.query(Quiz).filter(
        Quiz.parent_quiz_id == parent.id,
        Quiz.creator_id == user_id,
    ).order_by(Quiz.created_at.desc(), Quiz.id.desc()).all()


def delete_quiz(db: Session, slug: str, user_id: str):
    """Delete a quiz that nothing graded depends on.

    Results outlive their attempts, so a quiz with results (or with adaptive
    follow-ups, which are generated from results) cannot be removed. Its
    unsubmitted attempts go with it.
    """
    quiz = get_quiz_by_slug(db, slug)
    ensure_quiz_owner(quiz, user_id, action="delete")

    if db.query(QuizResult).filter(QuizResult.quiz_id == quiz.id).first():
        raise InvalidStateError("Quizzes with results cannot be deleted")
    if db.query(Quiz).filter(Quiz.parent_quiz_id == quiz.id).first():
        raise InvalidStateError("Quizzes with adaptive follow-ups cannot be deleted")

    for attempt in db.query(QuizAttempt).filter(QuizAttempt.quiz_id == quiz.id).all():
        db.delete(attempt)
    db.delete(quiz)
    try:
        db.commit()
    except IntegrityError:
        # an attempt or result was written for this quiz in the meantime
        db.rollback()
        raise InvalidStateError("This quiz is in use and cannot be deleted")
    logger.info("Deleted quiz %s", slug)
