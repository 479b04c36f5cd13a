from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from quizme.core.errors import NotFoundError, ForbiddenError
from quizme.models.quiz_db.quiz_db import Quiz
from quizme.models.result_db.result_db import QuizResult
from quizme.schemas.result.result_base import DetailedAnswer, WrongAnswer


def get_result_by_slug(db: Session, slug: str) -> QuizResult:
    result = db.query(QuizResult).filter(QuizResult.slug == slug).first()
    if not result:
        raise NotFoundError("Result not found")
    return result


def ensure_result_access(result: QuizResult, user_id: Optional[str]):
    if result.is_result_public:
        return
    if user_id is None or result.user_id != user_id:
        raise ForbiddenError("You do not have access to this result")


def get_owned_result(db: Session, slug: str, user_id: str) -> QuizResult:
    result = get_result_by_slug(db, slug)
    if result.user_id != user_id:
        raise ForbiddenError("You do not have permission to access this result")
    return result


def detailed_answers(result: QuizResult) -> List[DetailedAnswer]:
    questions = result.quiz.questions
    detailed = []
    for answer in result.answers:
        question = questions[answer["question_index"]]
        detailed.append(DetailedAnswer(
            question_index=answer["question_index"],
            selected_answers=answer["selected_answers"],
            correct_answers=answer["correct_answers"],
            is_correct=answer["is_correct"],
            question_text=question["question_text"],
            question_type=question["question_type"],
            options=question["options"],
            explanation=question["explanation"],
        ))
    return detailed


def wrong_answers(result: QuizResult) -> List[WrongAnswer]:
    return [
        WrongAnswer(
            question_text=answer.question_text,
            question_type=answer.question_type,
            options=answer.options,
            selected_answers=answer.selected_answers,
            correct_answers=answer.correct_answers,
            explanation=answer.explanation,
        )
        for answer in detailed_answers(result)
        if not answer.is_correct
    ]


def get_my_results(db: Session, user_id: str, skip: int = 0, limit: int = 10) -> Tuple[int, List[QuizResult]]:
    query = db.query(QuizResult).filter(QuizResult.user_id == user_id)
    total = query.count()
    results = query.order_by(QuizResult.completed_at.desc(), QuizResult.id.desc()).offset(skip).limit(limit).all()
    return total, results


def get_results_for_quiz(db: Session, quiz_slug: str, user_id: str) -> List[QuizResult]:
    quiz = db.query(Quiz).filter(Quiz.slug == quiz_slug).first()
    if not quiz:
        raise NotFoundError("Quiz not found")
    return db.query(QuizResult).filter(
        QuizResult.quiz_id == quiz.id,
        QuizResult.user_id == user_id,
    ).order_by(QuizResult.completed_at.desc(), QuizResult.id.desc()).all()


def toggle_result_visibility(db: Session, slug: str, user_id: str) -> QuizResult:
    result = get_owned_result(db, slug, user_id)
    result.is_result_public = not result.is_result_public
    db.commit()
    db.refresh(result)
    return result
