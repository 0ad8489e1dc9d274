import os

# Settings are read at import time; point them at throwaway values first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ["FIREBASE_PROJECT_ID"] = ""
os.environ["FIREBASE_CLIENT_EMAIL"] = ""

from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.session import Base, get_db
from app.core.dependencies import get_token_claims
from app.models import User, Profile


@pytest_asyncio.fixture
async def db_session():
    """Fresh in-memory database per test."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def identity():
    """Claims returned for the bearer token. Tests switch users by editing it."""
    return {"uid": "alice", "email": "alice@example.com", "email_verified": True}


@pytest_asyncio.fixture
async def anon_client(db_session):
    """Client without an identity override; requests go through real token checks."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(anon_client, identity):
    """Client authenticated as whoever `identity` names."""
    async def override_claims():
        return dict(identity)

    app.dependency_overrides[get_token_claims] = override_claims
    yield anon_client


@pytest.fixture
def add_user(db_session):
    """Insert a user, and a profile unless profile=False. `account` sets users columns."""
    async def _add_user(user_id, profile=True, account=None, **fields):
        user = User(user_id=user_id, user_email=f"{user_id}@example.com", **(account or {}))
        db_session.add(user)
        if profile:
            values = {
                "profile_username": user_id.title(),
                "profile_birthdate": date(2002, 5, 17),
            }
            values.update(fields)
            db_session.add(Profile(user_id=user_id, **values))
        await db_session.commit()
        return user

    return _add_user
