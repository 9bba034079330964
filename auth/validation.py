"""
Input validation for signup and login.

Every rule is checked and all violations are reported together as a
``ValidationError`` whose ``errors`` list holds ``{field, message}``
entries.  Successful validation returns the normalised values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List

from auth.exceptions import ValidationError
from auth.schemas import LoginRequest, SignupRequest

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_SPECIAL_RE = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")
_ALPHA_RE = re.compile(r"[A-Za-z]+")
_BCRYPT_MAX_BYTES = 72

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 8


@dataclass(frozen=True)
class SignupInput:
    email: str
    username: str
    password: str
    first_name: str
    last_name: str


@dataclass(frozen=True)
class LoginInput:
    email: str
    password: str


def normalize_email(email: str) -> str:
    return email.strip().lower()


def password_violations(password: str) -> List[str]:
    """Return one message per password-policy rule ``password`` breaks."""
    problems = []
    if len(password) < PASSWORD_MIN_LENGTH:
        problems.append("Password must be at least 8 characters long.")
    if len(password.encode()) > _BCRYPT_MAX_BYTES:
        problems.append("Password must be at most 72 bytes.")
    if not re.search(r"\d", password):
        problems.append("Password must contain a number.")
    if not re.search(r"[a-z]", password):
        problems.append("Password must contain a lowercase letter.")
    if not re.search(r"[A-Z]", password):
        problems.append("Password must contain an uppercase letter.")
    if not _SPECIAL_RE.search(password):
        problems.append("Password must contain a special character.")
    return problems


def _name_violations(value: str, label: str) -> List[str]:
    if not value:
        return [f"{label} is required."]
    if not _ALPHA_RE.fullmatch(value):
        return [f"{label} should only contain letters."]
    return []


def validate_signup(req: SignupRequest) -> SignupInput:
    errors: List[Dict[str, str]] = []

    def add(field: str, messages: List[str]) -> None:
        errors.extend({"field": field, "message": m} for m in messages)

    email = normalize_email(req.email)
    if not _EMAIL_RE.match(email):
        add("email", ["Please enter a valid email address."])

    username = req.username.strip()
    if not username:
        add("username", ["Username is required."])
    elif len(username) < USERNAME_MIN_LENGTH:
        add("username", ["Username must be at least 3 characters."])

    add("password", password_violations(req.password))

    first_name = req.first_name.strip()
    last_name = req.last_name.strip()
    add("firstName", _name_violations(first_name, "First name"))
    add("lastName", _name_violations(last_name, "Last name"))

    if errors:
        raise ValidationError(errors)

    return SignupInput(
        email=email,
        username=username,
        password=req.password,
        first_name=first_name,
        last_name=last_name,
    )


def validate_login(req: LoginRequest) -> LoginInput:
    errors: List[Dict[str, str]] = []
    email = normalize_email(req.email)
    if not _EMAIL_RE.match(email):
        errors.append({"field": "email", "message": "Please enter a valid email address."})
    if not req.password:
        errors.append({"field": "password", "message": "Password is required."})
    if errors:
        raise ValidationError(errors)
    return LoginInput(email=email, password=req.password)
