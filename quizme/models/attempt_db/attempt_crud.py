"""Lifecycle of a single user's pass through one quiz.

``in-progress`` is the only state that accepts answers; ``completed`` and
``abandoned`` are terminal. Every transition is a compare-and-swap on the
attempt's status so that concurrent retries observe a single winner.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quizme.core.errors import NotFoundError, ForbiddenError, InvalidStateError, OutOfRangeError
from quizme.models.attempt_db.attempt_db import QuizAttempt, AttemptAnswer
from quizme.models.quiz_db.quiz_crud import get_quiz_by_slug, ensure_quiz_access
from quizme.models.result_db.result_db import QuizResult
from quizme.services.attempt_status import AttemptStatus
from quizme.services.scoring import score, percentage
from quizme.services.slugs import generate_attempt_slug, generate_result_slug

logger = logging.getLogger(__name__)

IN_PROGRESS = AttemptStatus.in_progress.value


def get_attempt_by_slug(db: Session, slug: str) -> QuizAttempt:
    attempt = db.query(QuizAttempt).filter(QuizAttempt.slug == slug).first()
    if not attempt:
        raise NotFoundError("Attempt not found")
    return attempt


def get_owned_attempt(db: Session, slug: str, user_id: str) -> QuizAttempt:
    attempt = get_attempt_by_slug(db, slug)
    if attempt.user_id != user_id:
        raise ForbiddenError("You do not have access to this attempt")
    return attempt


def _ensure_in_progress(attempt: QuizAttempt):
    if attempt.status != IN_PROGRESS:
        raise InvalidStateError("This attempt has already been completed or abandoned")


def _transition(db: Session, attempt: QuizAttempt, values: dict) -> bool:
    """Apply ``values`` only while the attempt is still in progress."""
    updated = db.query(QuizAttempt).filter(
        QuizAttempt.id == attempt.id,
        QuizAttempt.status == IN_PROGRESS,
    ).update(values, synchronize_session=False)
    return updated == 1


def find_in_progress_attempt(db: Session, user_id: str, quiz_id: int) -> Optional[QuizAttempt]:
    return db.query(QuizAttempt).filter(
        QuizAttempt.user_id == user_id,
        QuizAttempt.quiz_id == quiz_id,
        QuizAttempt.status == IN_PROGRESS,
    ).first()


def start_attempt(db: Session, user_id: str, quiz_slug: str, time_limit_seconds: Optional[int] = None) -> QuizAttempt:
    quiz = get_quiz_by_slug(db, quiz_slug)
    ensure_quiz_access(quiz, user_id)

    existing = find_in_progress_attempt(db, user_id, quiz.id)
    if existing:
        logger.info("Resuming attempt %s for quiz %s", existing.slug, quiz.slug)
        return existing

    now = datetime.utcnow()
    attempt = QuizAttempt(
        slug=generate_attempt_slug(),
        user_id=user_id,
        quiz_id=quiz.id,
        status=IN_PROGRESS,
        started_at=now,
        last_updated_at=now,
        time_limit_seconds=time_limit_seconds,
    )
    db.add(attempt)
    try:
        db.commit()
    except IntegrityError:
        # lost the race against a concurrent start for the same (user, quiz)
        db.rollback()
        existing = find_in_progress_attempt(db, user_id, quiz.id)
        if existing is None:
            raise
        logger.info("Concurrent start resolved to attempt %s", existing.slug)
        return existing

    db.refresh(attempt)
    logger.info("Started attempt %s for quiz %s", attempt.slug, quiz.slug)
    return attempt


def get_my_attempts(db: Session, user_id: str) -> List[QuizAttempt]:
    return db.query(QuizAttempt).filter(QuizAttempt.user_id == user_id).order_by(
        QuizAttempt.started_at.desc(), QuizAttempt.id.desc()
    ).all()


def submit_answer(db: Session, slug: str, user_id: str, question_index: int, selected_answers: List[int]) -> QuizAttempt:
    attempt = get_owned_attempt(db, slug, user_id)
    _ensure_in_progress(attempt)

    questions = attempt.quiz.questions
    if question_index < 0 or question_index >= len(questions):
        raise OutOfRangeError("Invalid question index")
    option_count = len(questions[question_index]["options"])
    if any(index < 0 or index >= option_count for index in selected_answers):
        raise OutOfRangeError("Invalid answer index")

    now = datetime.utcnow()
    if not _transition(db, attempt, {QuizAttempt.last_updated_at: now}):
        db.rollback()
        raise InvalidStateError("This attempt has already been completed or abandoned")

    answer = db.query(AttemptAnswer).filter(
        AttemptAnswer.attempt_id == attempt.id,
        AttemptAnswer.question_index == question_index,
    ).first()
    if answer:
        answer.selected_answers = list(selected_answers)
        answer.answered_at = now
    else:
        db.add(AttemptAnswer(
            attempt_id=attempt.id,
            question_index=question_index,
            selected_answers=list(selected_answers),
            answered_at=now,
        ))

    try:
        db.commit()
    except IntegrityError:
        # a concurrent write inserted this index first; last writer wins
        db.rollback()
        if not _transition(db, attempt, {QuizAttempt.last_updated_at: now}):
            db.rollback()
            raise InvalidStateError("This attempt has already been completed or abandoned")
        db.query(AttemptAnswer).filter(
            AttemptAnswer.attempt_id == attempt.id,
            AttemptAnswer.question_index == question_index,
        ).update(
            {AttemptAnswer.selected_answers: list(selected_answers), AttemptAnswer.answered_at: now},
            synchronize_session=False,
        )
        db.commit()

    db.refresh(attempt)
    return attempt


def get_result_for_attempt(db: Session, attempt: QuizAttempt) -> Optional[QuizResult]:
    return db.query(QuizResult).filter(QuizResult.attempt_id == attempt.id).first()


def submit_attempt(db: Session, slug: str, user_id: str) -> QuizResult:
    """Grade an attempt, persist its result and complete it.

    The result insert and the status flip share one transaction. The result
    is unique per attempt, so a retry that finds one already stored only
    completes the attempt and never grades it again.
    """
    attempt = get_owned_attempt(db, slug, user_id)
    _ensure_in_progress(attempt)

    existing = get_result_for_attempt(db, attempt)
    if existing:
        logger.warning("Attempt %s already has result %s; completing without regrading", attempt.slug, existing.slug)
        if not _transition(db, attempt, {
            QuizAttempt.status: AttemptStatus.completed.value,
            QuizAttempt.completed_at: existing.completed_at,
            QuizAttempt.last_updated_at: datetime.utcnow(),
        }):
            db.rollback()
            raise InvalidStateError("This attempt has already been completed or abandoned")
        db.commit()
        return existing

    quiz = attempt.quiz
    submitted = {answer.question_index: answer.selected_answers for answer in attempt.answers}
    correct, graded = score(quiz.questions, submitted)

    now = datetime.utcnow()
    result = QuizResult(
        slug=generate_result_slug(quiz.topic),
        user_id=attempt.user_id,
        quiz_id=quiz.id,
        attempt_id=attempt.id,
        answers=[answer.model_dump() for answer in graded],
        score=correct,
        total_questions=quiz.number_of_questions,
        percentage=percentage(correct, quiz.number_of_questions, len(quiz.questions)),
        completed_at=now,
        is_result_public=True,
    )

    try:
        db.add(result)
        db.flush()
        if not _transition(db, attempt, {
            QuizAttempt.status: AttemptStatus.completed.value,
            QuizAttempt.completed_at: now,
            QuizAttempt.last_updated_at: now,
        }):
            db.rollback()
            raise InvalidStateError("This attempt has already been completed or abandoned")
        db.commit()
    except IntegrityError:
        # a concurrent submit stored the result first
        db.rollback()
        existing = db.query(QuizResult).filter(QuizResult.attempt_id == attempt.id).first()
        if existing is None:
            raise
        logger.info("Concurrent submit of %s resolved to result %s", slug, existing.slug)
        return existing

    db.refresh(result)
    logger.info("Attempt %s completed: %d/%d", attempt.slug, result.score, result.total_questions)
    return result


def abandon_attempt(db: Session, slug: str, user_id: str) -> QuizAttempt:
    """Abandon an in-progress attempt. Abandoning twice is a no-op."""
    attempt = get_owned_attempt(db, slug, user_id)
    if attempt.status == AttemptStatus.abandoned.value:
        return attempt
    _ensure_in_progress(attempt)

    if not _transition(db, attempt, {
        QuizAttempt.status: AttemptStatus.abandoned.value,
        QuizAttempt.last_updated_at: datetime.utcnow(),
    }):
        db.rollback()
        attempt = get_attempt_by_slug(db, slug)
        if attempt.status == AttemptStatus.abandoned.value:
            return attempt
        raise InvalidStateError("This attempt has already been completed")

    db.commit()
    db.refresh(attempt)
    logger.info("Abandoned attempt %s", attempt.slug)
    return attempt
