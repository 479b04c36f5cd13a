from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from quizme.core.database import Base, JSONType


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    creator_id = Column(String, nullable=False, index=True)

    topic = Column(String, nullable=False)
    difficulty = Column(String, nullable=False)
    question_types = Column(JSONType, nullable=False)  # ["mcq", "true-false", ...]
    requested_questions = Column(Integer, nullable=False)
    # fixed at creation to len(questions); questions are never edited afterwards
    number_of_questions = Column(Integer, nullable=False)
    questions = Column(JSONType, nullable=False)  # [{ question_text, question_type, options, correct_answers, explanation }]
    is_public = Column(Boolean, nullable=False, default=False, index=True)

    # adaptive lineage, always pointing at the root quiz
    parent_quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=True, index=True)
    source_result_slug = Column(String, nullable=True)
    adaptive_kind = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    parent_quiz = relationship("Quiz", remote_side=[id], foreign_keys=[parent_quiz_id])

    @property
    def is_adaptive(self) -> bool:
        return self.parent_quiz_id is not None

    @property
    def parent_quiz_slug(self):
        return self.parent_quiz.slug if self.parent_quiz else None
