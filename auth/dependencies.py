"""
FastAPI dependencies for authentication.

Provides the per-request collaborators (DB session, credential store,
hasher, token issuer) pulled from ``app.state``, and ``require_user``,
the session guard used by every protected route.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.exceptions import InvalidToken, NotFound, TokenExpired, Unauthorized
from auth.jwt import SessionTokens
from auth.password import PasswordHasher
from config.settings import Settings
from database.helpers import UserStore
from database.models import User
from database.session import session_scope

logger = logging.getLogger(__name__)


async def db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    async with session_scope(request.app.state.session_factory) as session:
        yield session


def get_user_store(session: AsyncSession = Depends(db_session)) -> UserStore:
    return UserStore(session)


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_tokens(request: Request) -> SessionTokens:
    return request.app.state.tokens


async def require_user(
    request: Request,
    store: UserStore = Depends(get_user_store),
    tokens: SessionTokens = Depends(get_tokens),
    settings: Settings = Depends(get_settings_dep),
) -> User:
    """
    Resolve the session cookie to a user (password excluded) and attach it
    to ``request.state.user``.
    """
    token = request.cookies.get(settings.cookie_name)
    if not token:
        raise Unauthorized("Unauthorized: No Token Provided")

    try:
        user_id = tokens.verify(token)
    except TokenExpired:
        raise Unauthorized("Unauthorized: Token Expired")
    except InvalidToken as exc:
        logger.debug("Rejected session token: %s", exc)
        raise Unauthorized("Unauthorized: Invalid Token")

    user = await store.find_by_id(user_id)
    if user is None:
        raise NotFound("User not found")

    request.state.user = user
    return user
