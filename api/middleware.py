"""
Global middleware and exception handlers.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from auth.exceptions import AuthError, InternalError

logger = logging.getLogger(__name__)


def _field_of(loc) -> str:
    # Integer parts are list indexes or JSON byte offsets, not field names.
    parts = [p for p in loc if isinstance(p, str) and p != "body"]
    return ".".join(parts) or "body"


def register_middleware(app: FastAPI) -> None:
    """Attach app-level middleware and error mapping."""

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": _field_of(err.get("loc", ())), "message": err.get("msg", "Invalid value.")}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            error = InternalError("Internal Server Error")
            return JSONResponse(status_code=error.status_code, content=error.to_dict())
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s %.3fs", request.method, request.url.path, elapsed)
        return response
