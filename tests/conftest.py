import itertools
from functools import lru_cache

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import learnlab.models  # noqa: F401
from learnlab.core.config import Settings
from learnlab.core.database import Base, enable_sqlite_foreign_keys, get_db
from learnlab.core.exceptions import ConfigurationError
from learnlab.core.security import create_access_token, hash_password
from learnlab.main import app
from learnlab.models.experiment import Experiment
from learnlab.models.quiz import Option, Question, Quiz
from learnlab.models.user import User
from learnlab.services.ai import AIService, get_ai_service

DEFAULT_PASSWORD = "Password123!"


@lru_cache(maxsize=None)
def _hashed(password: str) -> str:
    # bcrypt is slow; hash each distinct test password once
    return hash_password(password)


class FakeAIService(AIService):
    """AIService whose model calls return queued replies instead of hitting Azure"""

    def __init__(self, configured: bool = True):
        super().__init__(
            Settings(
                AOAI_API_KEY="test-key" if configured else "",
                AOAI_ENDPOINT="https://example.openai.azure.com" if configured else "",
            )
        )
        self.replies = []
        self.prompts = []
        self.transcript = None

    def _complete(self, system_prompt, user_prompt, temperature=0.7, max_tokens=500):
        if not self.is_configured():
            raise ConfigurationError("AI service not configured")
        self.prompts.append((system_prompt, user_prompt))
        reply = self.replies.pop(0) if self.replies else "Tutor answer"
        if isinstance(reply, Exception):
            raise reply
        return reply

    def _fetch_transcript(self, youtube_url):
        return self.transcript


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False}
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fake_ai():
    return FakeAIService()


@pytest.fixture
def client(session_factory, fake_ai):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_service] = lambda: fake_ai
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role="student", email=None, password=DEFAULT_PASSWORD, name=None):
        n = next(counter)
        user = User(
            email=email or f"{role}{n}@school.edu",
            password=_hashed(password),
            name=name or f"{role.title()} {n}",
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers


@pytest.fixture
def make_experiment(db):
    def _make(faculty, name="Titration", explanation="Neutralising an acid with a base."):
        experiment = Experiment(
            name=name,
            youtube_url="https://www.youtube.com/watch?v=abc123XYZ",
            explanation=explanation,
            faculty_id=faculty.id,
        )
        db.add(experiment)
        db.commit()
        db.refresh(experiment)
        return experiment

    return _make


@pytest.fixture
def make_quiz(db):
    """Create a quiz; questions are given as (text, [(option text, is_correct), ...])"""

    def _make(experiment, title="Titration basics", questions=()):
        quiz = Quiz(experiment_id=experiment.id, title=title)
        for text, options in questions:
            question = Question(question_text=text)
            question.options = [
                Option(option_text=option_text, is_correct=is_correct)
                for option_text, is_correct in options
            ]
            quiz.questions.append(question)
        db.add(quiz)
        db.commit()
        db.refresh(quiz)
        return quiz

    return _make
