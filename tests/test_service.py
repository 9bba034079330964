"""
Tests for the registration and login flows.
"""

import asyncio

import pytest
from sqlalchemy import func, select
from unittest.mock import AsyncMock

from auth.exceptions import DuplicateIdentity, InvalidCredentials
from auth.jwt import SessionTokens
from auth.service import check_credentials, login_user, register_user
from auth.validation import LoginInput, SignupInput
from database.exceptions import DuplicateKeyError
from database.helpers import UserStore
from database.models import User

SIGNUP = SignupInput(
    email="ada@example.com",
    username="ada",
    password="Sup3r$ecret",
    first_name="Ada",
    last_name="Lovelace",
)


@pytest.fixture
def tokens():
    return SessionTokens("secret", 15 * 24 * 60 * 60)


class TestRegisterUser:
    @pytest.mark.asyncio
    async def test_creates_user_with_hashed_password(self, store, hasher, tokens):
        user, token = await register_user(SIGNUP, store=store, hasher=hasher, tokens=tokens)

        assert user.password_hash != SIGNUP.password
        assert hasher.verify_sync(SIGNUP.password, user.password_hash)
        assert tokens.verify(token) == str(user.id)

    @pytest.mark.asyncio
    async def test_duplicate_email(self, store, hasher, tokens):
        await register_user(SIGNUP, store=store, hasher=hasher, tokens=tokens)
        again = SignupInput(**{**SIGNUP.__dict__, "username": "grace"})
        with pytest.raises(DuplicateIdentity) as exc_info:
            await register_user(again, store=store, hasher=hasher, tokens=tokens)
        assert exc_info.value.message == "Email is already taken."
        assert await store.find_by_username("grace") is None
        assert (await store.find_by_email("ada@example.com")).username == "ada"

    @pytest.mark.asyncio
    async def test_duplicate_username(self, store, hasher, tokens):
        await register_user(SIGNUP, store=store, hasher=hasher, tokens=tokens)
        again = SignupInput(**{**SIGNUP.__dict__, "email": "grace@example.com"})
        with pytest.raises(DuplicateIdentity) as exc_info:
            await register_user(again, store=store, hasher=hasher, tokens=tokens)
        assert exc_info.value.message == "Username is already taken."
        assert await store.find_by_email("grace@example.com") is None
        assert (await store.find_by_username("ada")).email == "ada@example.com"

    @pytest.mark.asyncio
    async def test_store_duplicate_key_after_precheck(self, hasher, tokens):
        # Simulates a concurrent signup that passes the lookup but loses the insert.
        racing_store = AsyncMock()
        racing_store.find_by_username.return_value = None
        racing_store.find_by_email.return_value = None
        racing_store.create.side_effect = DuplicateKeyError("email")

        with pytest.raises(DuplicateIdentity) as exc_info:
            await register_user(SIGNUP, store=racing_store, hasher=hasher, tokens=tokens)
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Email is already taken."

    @pytest.mark.asyncio
    async def test_concurrent_signups_leave_one_record(self, session_factory, hasher, tokens):
        async def attempt():
            async with session_factory() as session:
                user, _ = await register_user(
                    SIGNUP, store=UserStore(session), hasher=hasher, tokens=tokens
                )
                return user

        results = await asyncio.gather(attempt(), attempt(), return_exceptions=True)

        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], DuplicateIdentity)
        assert errors[0].status_code == 400

        async with session_factory() as session:
            assert (await UserStore(session).find_by_email(SIGNUP.email)) is not None
            result = await session.execute(select(func.count(User.id)))
            assert result.scalar_one() == 1


class TestLoginUser:
    @pytest.mark.asyncio
    async def test_login_success(self, store, hasher, tokens):
        created, _ = await register_user(SIGNUP, store=store, hasher=hasher, tokens=tokens)
        user, token = await login_user(
            LoginInput(email="ada@example.com", password="Sup3r$ecret"),
            store=store,
            hasher=hasher,
            tokens=tokens,
        )
        assert user.id == created.id
        assert tokens.verify(token) == str(created.id)

    @pytest.mark.asyncio
    async def test_check_credentials_reasons(self, store, hasher, tokens):
        await register_user(SIGNUP, store=store, hasher=hasher, tokens=tokens)

        missing = await check_credentials("nobody@example.com", "x", store=store, hasher=hasher)
        wrong = await check_credentials("ada@example.com", "Wr0ng$pass", store=store, hasher=hasher)

        assert (missing.ok, missing.reason) == (False, "not_found")
        assert (wrong.ok, wrong.reason) == (False, "wrong_password")

    @pytest.mark.asyncio
    async def test_failures_share_one_message(self, store, hasher, tokens):
        await register_user(SIGNUP, store=store, hasher=hasher, tokens=tokens)
        messages = []
        for email, password in [
            ("nobody@example.com", "Sup3r$ecret"),
            ("ada@example.com", "Wr0ng$pass"),
        ]:
            with pytest.raises(InvalidCredentials) as exc_info:
                await login_user(
                    LoginInput(email=email, password=password),
                    store=store,
                    hasher=hasher,
                    tokens=tokens,
                )
            messages.append(exc_info.value.message)
        assert messages == ["Invalid email or password."] * 2
