"""
Session cookie transport.
"""

from __future__ import annotations

from fastapi import Response

from config.settings import Settings


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=settings.cookie_max_age,
        httponly=True,
        samesite="strict",
        secure=not settings.is_development,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Overwrite the session cookie with an empty, already-expired value."""
    response.set_cookie(
        key=settings.cookie_name,
        value="",
        max_age=0,
        httponly=True,
        samesite="strict",
        secure=not settings.is_development,
    )
