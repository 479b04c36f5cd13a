from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from quizme.core.errors import NotFoundError, ForbiddenError, InvalidStateError, OutOfRangeError
from quizme.models.attempt_db import attempt_crud
from quizme.models.attempt_db.attempt_crud import start_attempt, submit_answer, submit_attempt, abandon_attempt
from quizme.models.attempt_db.attempt_db import QuizAttempt
from quizme.models.result_db.result_db import QuizResult
from quizme.services.attempt_status import AttemptStatus


def answer_all(db, attempt, user_id="student"):
    submit_answer(db, attempt.slug, user_id, 0, [1])
    submit_answer(db, attempt.slug, user_id, 1, [0])
    submit_answer(db, attempt.slug, user_id, 2, [0])
    submit_answer(db, attempt.slug, user_id, 3, [2, 0])


def test_start_requires_existing_quiz(db):
    with pytest.raises(NotFoundError):
        start_attempt(db, "student", "missing-quiz")


def test_start_on_private_quiz_of_someone_else_is_forbidden(db, make_quiz):
    quiz = make_quiz(creator_id="owner")

    with pytest.raises(ForbiddenError):
        start_attempt(db, "student", quiz.slug)


def test_start_is_idempotent_while_in_progress(db, make_quiz):
    quiz = make_quiz(is_public=True)

    first = start_attempt(db, "student", quiz.slug)
    second = start_attempt(db, "student", quiz.slug)

    assert first.slug == second.slug
    assert first.status == AttemptStatus.in_progress.value
    assert db.query(QuizAttempt).count() == 1


def test_concurrent_start_resolves_to_the_stored_attempt(db, make_quiz, monkeypatch):
    quiz = make_quiz(is_public=True)
    first = start_attempt(db, "student", quiz.slug)
    first_slug = first.slug

    real_find = attempt_crud.find_in_progress_attempt
    calls = []

    def racing_find(session, user_id, quiz_id):
        # the first lookup misses, as if the other start had not committed yet
        calls.append(quiz_id)
        if len(calls) == 1:
            return None
        return real_find(session, user_id, quiz_id)

    monkeypatch.setattr(attempt_crud, "find_in_progress_attempt", racing_find)

    second = start_attempt(db, "student", quiz.slug)

    assert second.slug == first_slug
    assert db.query(QuizAttempt).count() == 1


def test_storage_rejects_second_in_progress_attempt(db, make_quiz):
    quiz = make_quiz(is_public=True)
    start_attempt(db, "student", quiz.slug)

    db.add(QuizAttempt(slug="attempt-duplicate", user_id="student", quiz_id=quiz.id,
                       status=AttemptStatus.in_progress.value))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_new_attempt_allowed_after_completion(db, make_quiz):
    quiz = make_quiz(is_public=True)
    first = start_attempt(db, "student", quiz.slug)
    first_slug = first.slug
    submit_attempt(db, first_slug, "student")

    second = start_attempt(db, "student", quiz.slug)

    assert second.slug != first_slug


def test_resubmitting_an_answer_overwrites_it(db, make_quiz):
    quiz = make_quiz(is_public=True)
    attempt = start_attempt(db, "student", quiz.slug)

    submit_answer(db, attempt.slug, "student", 0, [0])
    attempt = submit_answer(db, attempt.slug, "student", 0, [1])

    assert len(attempt.answers) == 1
    assert attempt.answers[0].selected_answers == [1]


@pytest.mark.parametrize("index, selected", [(4, [0]), (-1, [0]), (0, [4]), (1, [2])])
def test_submit_answer_rejects_out_of_range(db, make_quiz, index, selected):
    quiz = make_quiz(is_public=True)
    attempt = start_attempt(db, "student", quiz.slug)

    with pytest.raises(OutOfRangeError):
        submit_answer(db, attempt.slug, "student", index, selected)


def test_only_the_owner_may_answer(db, make_quiz):
    quiz = make_quiz(is_public=True)
    attempt = start_attempt(db, "student", quiz.slug)

    with pytest.raises(ForbiddenError):
        submit_answer(db, attempt.slug, "intruder", 0, [1])


def test_submit_scores_and_completes(db, make_quiz):
    quiz = make_quiz(is_public=True)
    attempt = start_attempt(db, "student", quiz.slug)
    answer_all(db, attempt)

    result = submit_attempt(db, attempt.slug, "student")

    assert result.score == 3
    assert result.total_questions == 4
    assert result.percentage == 75.0
    assert [a["is_correct"] for a in result.answers] == [True, True, False, True]
    db.refresh(attempt)
    assert attempt.status == AttemptStatus.completed.value
    assert attempt.completed_at is not None


def test_submit_with_unanswered_questions_counts_them_wrong(db, make_quiz):
    quiz = make_quiz(is_public=True)
    attempt = start_attempt(db, "student", quiz.slug)
    submit_answer(db, attempt.slug, "student", 0, [1])

    result = submit_attempt(db, attempt.slug, "student")

    assert result.score == 1
    assert result.answers[3]["selected_answers"] == []


def test_completed_attempt_rejects_further_operations(db, make_quiz):
    quiz = make_quiz(is_public=True)
    attempt = start_attempt(db, "student", quiz.slug)
    slug = attempt.slug
    submit_attempt(db, slug, "student")

    with pytest.raises(InvalidStateError):
        submit_answer(db, slug, "student", 0, [1])
    with pytest.raises(InvalidStateError):
        submit_attempt(db, slug, "student")
    with pytest.raises(InvalidStateError):
        abandon_attempt(db, slug, "student")
    assert db.query(QuizResult).count() == 1


def test_submit_recovers_a_result_persisted_before_the_state_flip(db, make_quiz):
    quiz = make_quiz(is_public=True)
    attempt = start_attempt(db, "student", quiz.slug)
    answer_all(db, attempt)
    stored = QuizResult(
        slug="result-stored",
        user_id="student",
        quiz_id=quiz.id,
        attempt_id=attempt.id,
        answers=[],
        score=2,
        total_questions=4,
        percentage=50.0,
    )
    db.add(stored)
    db.commit()

    result = submit_attempt(db, attempt.slug, "student")

    assert result.slug == "result-stored"
    assert result.score == 2
    assert db.query(QuizResult).count() == 1
    db.refresh(attempt)
    assert attempt.status == AttemptStatus.completed.value


def test_abandon_is_idempotent(db, make_quiz):
    quiz = make_quiz(is_public=True)
    attempt = start_attempt(db, "student", quiz.slug)

    abandon_attempt(db, attempt.slug, "student")
    again = abandon_attempt(db, attempt.slug, "student")

    assert again.status == AttemptStatus.abandoned.value
    with pytest.raises(InvalidStateError):
        submit_answer(db, attempt.slug, "student", 0, [1])
    with pytest.raises(InvalidStateError):
        submit_attempt(db, attempt.slug, "student")


def test_overtime_is_reported_not_enforced(db, make_quiz):
    quiz = make_quiz(is_public=True)
    attempt = start_attempt(db, "student", quiz.slug, time_limit_seconds=60)
    assert attempt.is_overtime is False

    attempt.started_at = attempt.started_at - timedelta(minutes=5)
    db.commit()

    attempt = submit_answer(db, attempt.slug, "student", 0, [1])
    assert attempt.is_overtime is True
