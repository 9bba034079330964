"""
Registration and login flows.

Each flow takes its collaborators explicitly (store, hasher, token
issuer) and returns the user together with a freshly issued session
token; the HTTP layer only moves the token into a cookie.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from auth.exceptions import DuplicateIdentity, InvalidCredentials
from auth.jwt import SessionTokens
from auth.password import PasswordHasher
from auth.validation import LoginInput, SignupInput
from database.exceptions import DuplicateKeyError
from database.helpers import UserStore
from database.models import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CredentialCheck:
    """Outcome of checking an email/password pair."""

    user: Optional[User] = None
    reason: Optional[Literal["not_found", "wrong_password"]] = None

    @property
    def ok(self) -> bool:
        return self.user is not None


async def register_user(
    data: SignupInput,
    *,
    store: UserStore,
    hasher: PasswordHasher,
    tokens: SessionTokens,
) -> Tuple[User, str]:
    """Create a user and issue its first session token."""
    if await store.find_by_username(data.username) is not None:
        raise DuplicateIdentity("username")
    if await store.find_by_email(data.email) is not None:
        raise DuplicateIdentity("email")

    password_hash = await hasher.hash(data.password)

    try:
        user = await store.create(
            username=data.username,
            email=data.email,
            password_hash=password_hash,
            first_name=data.first_name,
            last_name=data.last_name,
        )
    except DuplicateKeyError as exc:
        # A concurrent signup won the race past the pre-check above.
        raise DuplicateIdentity(exc.field or "email") from exc

    token = tokens.issue(str(user.id))
    logger.info("Registered user %s (%s)", user.username, user.id)
    return user, token


async def check_credentials(
    email: str,
    password: str,
    *,
    store: UserStore,
    hasher: PasswordHasher,
) -> CredentialCheck:
    user = await store.find_by_email(email)
    if user is None:
        return CredentialCheck(reason="not_found")
    if not await hasher.verify(password, user.password_hash):
        return CredentialCheck(reason="wrong_password")
    return CredentialCheck(user=user)


async def login_user(
    data: LoginInput,
    *,
    store: UserStore,
    hasher: PasswordHasher,
    tokens: SessionTokens,
) -> Tuple[User, str]:
    """Authenticate by email + password; the failure reason is never exposed."""
    check = await check_credentials(data.email, data.password, store=store, hasher=hasher)
    if not check.ok:
        logger.info("Login rejected for %s: %s", data.email, check.reason)
        raise InvalidCredentials()

    user = check.user
    token = tokens.issue(str(user.id))
    logger.info("Login: %s (%s)", user.username, user.id)
    return user, token
