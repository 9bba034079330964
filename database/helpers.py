"""
Credential store: user lookups and inserts on top of an ``AsyncSession``.

Uniqueness of ``email`` and ``username`` is enforced by the table's unique
constraints; ``create`` turns a constraint violation into
``DuplicateKeyError`` so concurrent signups that both pass the pre-check
still surface as a duplicate, not a server error.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import defer

from database.exceptions import DuplicateKeyError
from database.models import User

logger = logging.getLogger(__name__)


def _to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def _duplicate_field(exc: IntegrityError) -> Optional[str]:
    # SQLite reports "users.email", PostgreSQL the constraint name.
    text = str(exc.orig).lower()
    for field in ("email", "username"):
        if f"uq_users_{field}" in text or f"users.{field}" in text:
            return field
    return None


class UserStore:
    """Persistence for ``User`` rows bound to one request's session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_by_username(self, username: str) -> Optional[User]:
        result = await self._session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def find_by_id(
        self,
        user_id: str | uuid.UUID,
        *,
        include_password: bool = False,
    ) -> Optional[User]:
        """Return the user, or ``None``. The hash is unloadable unless requested."""
        uid = _to_uuid(user_id)
        if uid is None:
            return None
        stmt = select(User).where(User.id == uid)
        if not include_password:
            stmt = stmt.options(defer(User.password_hash, raiseload=True))
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> User:
        user = User(
            id=uuid.uuid4(),
            username=username,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
        )
        self._session.add(user)
        try:
            await self._session.flush()
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            field = _duplicate_field(exc)
            logger.info("Duplicate key rejected on create (%s)", field)
            raise DuplicateKeyError(field) from exc
        return user
