"""
Pytest configuration and fixtures.

Each test gets its own SQLite database file (aiosqlite) and the app's
get_db dependency is pointed at it, so nothing touches the configured
DATABASE_URL.
"""
import os

# Must be set before quiz_app modules are imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "quiz-app-test-secret"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from quiz_app.auth.jwt import create_access_token
from quiz_app.auth.password_security import hash_password
from quiz_app.database import Base, get_db
from quiz_app.helpers.rate_limiter import FixedWindowRateLimiter
from quiz_app.main import app
from quiz_app.models import User

PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'quiz.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.rate_limiter = FixedWindowRateLimiter()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _make_user(session_factory, name: str, email: str) -> User:
    async with session_factory() as session:
        user = User(name=name, email=email, password_hash=hash_password(PASSWORD))
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


def auth_headers(user: User) -> dict:
    token = create_access_token({"user_id": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def owner(session_factory):
    return await _make_user(session_factory, "Quiz Owner", "owner@example.com")


@pytest_asyncio.fixture
async def other_user(session_factory):
    return await _make_user(session_factory, "Someone Else", "other@example.com")


@pytest.fixture
def owner_headers(owner):
    return auth_headers(owner)


@pytest.fixture
def other_headers(other_user):
    return auth_headers(other_user)


def mcq(text="What is the capital of France?", correct="Paris", wrong=("London",), order=None):
    question = {
        "text": text,
        "type": "MCQ",
        "options": [{"text": correct, "is_correct": True}]
        + [{"text": w, "is_correct": False} for w in wrong],
    }
    if order is not None:
        question["order"] = order
    return question


def true_false(text="The earth is round.", answer=True):
    return {
        "text": text,
        "type": "TRUE_FALSE",
        "options": [
            {"text": "True", "is_correct": answer},
            {"text": "False", "is_correct": not answer},
        ],
    }


def text_question(text="Capital of France?", correct_answer="Paris"):
    return {"text": text, "type": "TEXT", "correct_answer": correct_answer}


def quiz_payload(questions=None, published=True, title="Geography"):
    return {
        "title": title,
        "description": "A short geography quiz",
        "is_published": published,
        "questions": questions if questions is not None else [mcq()],
    }


async def create_quiz(client, headers, payload=None) -> dict:
    response = await client.post("/api/quizzes", json=payload or quiz_payload(), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def correct_option_id(question: dict) -> str:
    return next(opt["id"] for opt in question["options"] if opt["is_correct"])


def wrong_option_id(question: dict) -> str:
    return next(opt["id"] for opt in question["options"] if not opt["is_correct"])
