"""
Shared fixtures: an app wired to a throwaway SQLite database.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from auth.password import PasswordHasher
from config.settings import Settings
from database.helpers import UserStore
from database.session import build_engine, build_session_factory, init_models
from main import create_app

SECRET = "tests-secret-key"


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "jwt_secret": SECRET,
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'auth.sqlite3'}",
        "environment": "development",
        "bcrypt_rounds": 4,
    }
    values.update(overrides)
    return Settings(**values)


def signup_payload(**overrides) -> dict:
    payload = {
        "email": "Ada@Example.com",
        "username": "ada",
        "password": "Sup3r$ecret",
        "firstName": "Ada",
        "lastName": "Lovelace",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.sqlite3'}")
    await init_models(engine)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def store(session_factory):
    async with session_factory() as session:
        yield UserStore(session)
