"""Shared fixtures: in-memory database, seeded catalog, fake LLM and HTTP client."""
import json
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTO_CREATE_SCHEMA"] = "false"

from datetime import date
from typing import Callable

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.db.database import Base, get_db
from app.db.seed import seed_workouts
from app.llm import LLMConfig, LLMProvider, LLMResponse, Message
from app.models.user import User, UserProfile
from app.security import get_password_hash


def prescribe_all(workouts: list[dict]) -> str:
    """Reply prescribing 3x10 at 20 kg for every workout in the prompt."""
    return json.dumps(
        [
            {"id": w["id"], "sets": 3, "reps": 10, "weight_value": 20, "weight_unit": "kg"}
            for w in workouts
        ]
    )


class FakeLLMProvider(LLMProvider):
    """Answers chat requests from a function of the prompt's workout list."""

    def __init__(self, reply: Callable[[list[dict]], str] | str = prescribe_all, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[list[Message], LLMConfig]] = []

    async def chat(self, messages: list[Message], config: LLMConfig) -> LLMResponse:
        self.calls.append((messages, config))
        if self.error is not None:
            raise self.error
        if isinstance(self.reply, str):
            return LLMResponse(content=self.reply)
        payload = json.loads(messages[-1].content)
        return LLMResponse(content=self.reply(payload["workouts"]))

    async def health_check(self) -> bool:
        return True

    @property
    def last_payload(self) -> dict:
        return json.loads(self.calls[-1][0][-1].content)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def catalog(session):
    """Starter catalog; enough rows per category and type for every template day."""
    await seed_workouts(session)


@pytest_asyncio.fixture
async def user(session):
    user = User(
        email="lifter@example.com",
        hashed_password=get_password_hash("barbell123"),
        name="Lifter",
        is_active=True,
    )
    session.add(user)
    await session.commit()
    return user


@pytest_asyncio.fixture
async def profile(session, user):
    profile = UserProfile(
        user_id=user.id,
        birthday=date(1990, 6, 15),
        height=180,
        height_unit="cm",
        weight=82,
        weight_unit="kg",
        background="Played football in college",
        training_goal="muscle_gain",
        training_experience="consistent",
        injury_caution_area="knees",
    )
    session.add(profile)
    await session.commit()
    return profile


@pytest.fixture
def fake_llm():
    return FakeLLMProvider()


@pytest_asyncio.fixture
async def client(session_maker, catalog, fake_llm):
    from app.api.routes.dependencies import get_llm_provider_dep
    from app.main import create_app

    app = create_app()

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_provider_dep] = lambda: fake_llm

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

