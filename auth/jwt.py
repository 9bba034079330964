"""
JWT-style session token creation and verification.

Tokens are urlsafe-base64 JSON payloads signed with HMAC-SHA256:

    <base64(payload)>.<hex signature>

The payload carries ``user_id``, ``iat`` and ``exp`` (epoch seconds).
Nothing is stored server side; a token is valid until ``exp``.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Callable

from auth.exceptions import InvalidToken, TokenExpired


class SessionTokens:
    """Issue and verify signed, self-expiring session tokens."""

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ValueError("A signing secret is required to issue session tokens")
        self._secret = secret.encode()
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def _sign(self, raw: bytes) -> str:
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue(self, user_id: str) -> str:
        """Create a signed token containing ``user_id`` and expiry."""
        now = int(self._clock())
        payload = {
            "user_id": str(user_id),
            "iat": now,
            "exp": now + self.ttl_seconds,
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return urlsafe_b64encode(raw).decode().rstrip("=") + "." + self._sign(raw)

    def verify(self, token: str) -> str:
        """
        Verify ``token`` and return its ``user_id``.

        Raises ``InvalidToken`` for malformed or tampered tokens and
        ``TokenExpired`` once ``exp`` has passed.
        """
        parts = token.split(".") if isinstance(token, str) else []
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise InvalidToken("bad format")

        encoded, signature = parts
        try:
            raw = urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4))
        except (binascii.Error, ValueError) as exc:
            raise InvalidToken("bad encoding") from exc

        if not hmac.compare_digest(signature.encode(), self._sign(raw).encode()):
            raise InvalidToken("bad signature")

        try:
            payload = json.loads(raw)
            user_id = payload["user_id"]
            expires_at = int(payload["exp"])
        except (ValueError, KeyError, TypeError) as exc:
            raise InvalidToken("bad payload") from exc

        if self._clock() >= expires_at:
            raise TokenExpired("token expired")
        return user_id
