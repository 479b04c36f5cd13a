from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, ForeignKey
from sqlalchemy.orm import relationship
from quizme.core.database import Base, JSONType


class QuizResult(Base):
    __tablename__ = "results"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False, index=True)
    # one result per attempt; a duplicate submit can never score twice
    attempt_id = Column(Integer, ForeignKey("attempts.id"), nullable=False, unique=True)

    answers = Column(JSONType, nullable=False)  # [{ question_index, selected_answers, correct_answers, is_correct }]
    score = Column(Integer, nullable=False)
    total_questions = Column(Integer, nullable=False)
    percentage = Column(Float, nullable=False)
    completed_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    is_result_public = Column(Boolean, nullable=False, default=True)

    quiz = relationship("Quiz", foreign_keys=[quiz_id])
    attempt = relationship("QuizAttempt")

    @property
    def quiz_slug(self) -> str:
        return self.quiz.slug

    @property
    def attempt_slug(self) -> str:
        return self.attempt.slug

    @property
    def quiz_topic(self) -> str:
        return self.quiz.topic

    @property
    def quiz_difficulty(self) -> str:
        return self.quiz.difficulty
