"""
Auth API routes: signup, login, logout, getMe.

Route prefix: /v0/auth
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status

from auth.cookies import clear_session_cookie, set_session_cookie
from auth.dependencies import (
    get_hasher,
    get_settings_dep,
    get_tokens,
    get_user_store,
    require_user,
)
from auth.jwt import SessionTokens
from auth.password import PasswordHasher
from auth.schemas import LoginRequest, SignupRequest, serialize_user
from auth.service import login_user, register_user
from auth.validation import validate_login, validate_signup
from config.settings import Settings
from database.helpers import UserStore
from database.models import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    req: SignupRequest,
    response: Response,
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: SessionTokens = Depends(get_tokens),
    settings: Settings = Depends(get_settings_dep),
) -> Dict[str, Any]:
    """Register a new user and start a session."""
    data = validate_signup(req)
    user, token = await register_user(data, store=store, hasher=hasher, tokens=tokens)
    set_session_cookie(response, token, settings)
    return {"message": "User registered successfully!", "user": serialize_user(user)}


@router.post("/login")
async def login(
    req: LoginRequest,
    response: Response,
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: SessionTokens = Depends(get_tokens),
    settings: Settings = Depends(get_settings_dep),
) -> Dict[str, Any]:
    """Login with email + password."""
    data = validate_login(req)
    user, token = await login_user(data, store=store, hasher=hasher, tokens=tokens)
    set_session_cookie(response, token, settings)
    return {"message": "Logged in successfully.", "user": serialize_user(user)}


@router.post("/logout")
async def logout(
    response: Response,
    settings: Settings = Depends(get_settings_dep),
) -> Dict[str, Any]:
    """Expire the session cookie; there is no server-side session to clear."""
    clear_session_cookie(response, settings)
    return {"message": "Logged out successfully."}


@router.get("/getMe")
async def get_me(user: User = Depends(require_user)) -> Dict[str, Any]:
    return {"user": serialize_user(user)}
