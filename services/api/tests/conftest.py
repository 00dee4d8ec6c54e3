import json
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Must be set before the settings module is imported
os.environ["AI_MODE"] = "mock"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from todays_meal.main import app, build_pipeline
from todays_meal.db import Base, get_db, get_session_factory
from todays_meal.services.knowledge import seed_knowledge_base

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,  # one shared connection so every session sees the same in-memory DB
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def override_get_session_factory():
    return TestingSessionLocal


# --- Scripted LLM ---

class FakeLLM:
    """LLM double with scripted replies per call purpose.

    `replies` maps a purpose ("intent", "recipe", "summary", ...) to a list
    consumed front to back. Exception instances in the list are raised.
    Purposes with no scripted reply (or an exhausted list) get `default`.
    """

    def __init__(self, replies=None, default="了解しました。"):
        self.replies = {k: list(v) for k, v in (replies or {}).items()}
        self.default = default
        self.calls = []
        self.model = "fake"
        self.last_error = None

    async def complete(self, instruction, *, system_prompt=None, history=(), purpose="reply"):
        self.calls.append({
            "purpose": purpose,
            "instruction": instruction,
            "system_prompt": system_prompt,
            "history": list(history),
        })
        queue = self.replies.get(purpose)
        if not queue:
            return self.default
        reply = queue.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def calls_for(self, purpose):
        return [c for c in self.calls if c["purpose"] == purpose]


def recipe_reply(name, steps=5, cooking_time=15, calories=400, ingredients=None, prose=True):
    """An LLM-style recipe reply: JSON wrapped in chatter."""
    payload = {
        "recipe": {
            "name": name,
            "ingredients": ingredients or [{"name": "豚肉", "amount": "200g"}, {"name": "キャベツ", "amount": "1/4個"}],
            "steps": [f"手順{i + 1}: 工程{i + 1}を行う。" for i in range(steps)],
            "cookingTime": cooking_time,
            "calories": calories,
            "nutrition": {"protein": 20, "fat": 15.5, "carbs": 30},
        }
    }
    body = json.dumps(payload, ensure_ascii=False)
    return f"こちらのレシピはいかがでしょう。\n```json\n{body}\n```" if prose else body


def intent_reply(**fields):
    payload = {"isValid": True, "newIngredients": [], "requestType": "ingredients"}
    payload.update(fields)
    return json.dumps(payload, ensure_ascii=False)


# --- Fixtures ---

@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Direct database session for setup."""
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def seeded_db(db_session):
    seed_knowledge_base(db_session)
    return db_session


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def client(fake_llm):
    """Test client with DB override and the scripted LLM behind the pipeline."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = override_get_session_factory
    with TestClient(app) as c:
        app.state.pipeline = build_pipeline(fake_llm, fake_llm)
        yield c
    app.dependency_overrides.clear()


def parse_sse(text):
    """Split an event-stream body into decoded frames."""
    frames = []
    for chunk in text.split("\n\n"):
        chunk = chunk.strip()
        if chunk.startswith("data: "):
            frames.append(json.loads(chunk[len("data: "):]))
    return frames
