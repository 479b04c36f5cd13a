import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("OPENAI_API_KEY", "test-key")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from main import app  # noqa: E402
from quizme.core.database import Base, get_db  # noqa: E402
from quizme.models.quiz_db.quiz_crud import create_quiz  # noqa: E402
from quizme.schemas.quiz.quiz_base import QuestionIn  # noqa: E402
from quizme.services.difficulty import Difficulty  # noqa: E402
from quizme.services.generator import get_generator  # noqa: E402
from quizme.services.question_types import QuestionType  # noqa: E402
from tests.helpers import FakeGenerator, FOUR_QUESTIONS  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def client(session_factory, generator):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generator] = lambda: generator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_quiz(db):
    def _make_quiz(creator_id="owner", questions=None, is_public=False):
        items = [
            QuestionIn(
                question_text=q["questionText"],
                question_type=QuestionType(q["questionType"]),
                options=q["options"],
                correct_answers=q["correctAnswers"],
                explanation=q["explanation"],
            )
            for q in (questions or FOUR_QUESTIONS)
        ]
        quiz = create_quiz(
            db,
            creator_id=creator_id,
            topic="General Knowledge",
            difficulty=Difficulty.easy,
            question_types=sorted({q.question_type.value for q in items}),
            requested_questions=len(items),
            questions=items,
        )
        if is_public:
            quiz.is_public = True
            db.commit()
        return quiz

    return _make_quiz
