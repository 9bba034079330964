"""
Request / response schemas for the auth routes.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SignupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Defaults let every rule run, so a missing field is reported like an empty one.
    email: str = ""
    username: str = ""
    password: str = ""
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str
    first_name: str = Field(..., serialization_alias="firstName")
    last_name: str = Field(..., serialization_alias="lastName")
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: datetime = Field(..., serialization_alias="updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Some backends (SQLite) hand timestamps back without tzinfo.
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def serialize_user(user) -> dict:
    """Public JSON view of a user; the password hash is never included."""
    return UserOut.model_validate(user).model_dump(mode="json", by_alias=True)
