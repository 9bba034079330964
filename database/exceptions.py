"""
Errors raised by the credential store.
"""

from __future__ import annotations

from typing import Optional


class DuplicateKeyError(Exception):
    """The store rejected a write because ``field`` must be unique."""

    def __init__(self, field: Optional[str]):
        self.field = field
        super().__init__(f"duplicate key on {field or 'unknown field'}")
