"""
Exceptions raised by the authentication core.

Hierarchy:
    AuthError (base, carries an HTTP status)
    ├── ValidationError        400  per-field rule violations
    ├── DuplicateIdentity      400  email / username already taken
    ├── InvalidCredentials     400  login mismatch (undifferentiated)
    ├── Unauthorized           401  missing / invalid / expired token
    ├── NotFound               404  token subject no longer exists
    └── InternalError          500

    TokenError
    ├── InvalidToken           bad signature or malformed token
    └── TokenExpired           past its expiry
"""

from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import status

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."
DUPLICATE_MESSAGES = {
    "email": "Email is already taken.",
    "username": "Username is already taken.",
}


class AuthError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    body_key: str = "message"

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> Dict[str, object]:
        return {self.body_key: self.message}


class ValidationError(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        super().__init__("; ".join(e["message"] for e in errors) or "Invalid request.")

    def to_dict(self) -> Dict[str, object]:
        return {"errors": self.errors}


class DuplicateIdentity(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str):
        self.field = field
        super().__init__(DUPLICATE_MESSAGES.get(field, "Email is already taken."))


class InvalidCredentials(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self):
        super().__init__(INVALID_CREDENTIALS_MESSAGE)


class Unauthorized(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    body_key = "error"


class NotFound(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    body_key = "error"


class InternalError(AuthError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# ── Token errors ──────────────────────────────────────────────────────


class TokenError(Exception):
    pass


class InvalidToken(TokenError):
    pass


class TokenExpired(TokenError):
    pass
