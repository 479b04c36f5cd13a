from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, UniqueConstraint, text
from sqlalchemy.orm import relationship
from quizme.core.database import Base, JSONType
from quizme.services.attempt_status import AttemptStatus

IN_PROGRESS_CLAUSE = text("status = 'in-progress'")


class QuizAttempt(Base):
    __tablename__ = "attempts"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    user_id = Column(String, nullable=False)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False)

    status = Column(String, nullable=False, default=AttemptStatus.in_progress.value, index=True)
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    last_updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)
    time_limit_seconds = Column(Integer, nullable=True)

    quiz = relationship("Quiz")
    answers = relationship(
        "AttemptAnswer",
        back_populates="attempt",
        order_by="AttemptAnswer.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_attempts_user_quiz", "user_id", "quiz_id"),
        # at most one in-progress attempt per (user, quiz)
        Index(
            "uq_attempts_in_progress",
            "user_id",
            "quiz_id",
            unique=True,
            postgresql_where=IN_PROGRESS_CLAUSE,
            sqlite_where=IN_PROGRESS_CLAUSE,
        ),
    )

    @property
    def quiz_slug(self) -> str:
        return self.quiz.slug

    @property
    def is_overtime(self) -> bool:
        if not self.time_limit_seconds:
            return False
        end = self.completed_at or datetime.utcnow()
        return (end - self.started_at).total_seconds() > self.time_limit_seconds


class AttemptAnswer(Base):
    __tablename__ = "attempt_answers"

    id = Column(Integer, primary_key=True, index=True)
    attempt_id = Column(Integer, ForeignKey("attempts.id"), nullable=False, index=True)
    question_index = Column(Integer, nullable=False)
    selected_answers = Column(JSONType, nullable=False)
    answered_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    attempt = relationship("QuizAttempt", back_populates="answers")

    __table_args__ = (
        UniqueConstraint("attempt_id", "question_index", name="uq_attempt_answer_question"),
    )
