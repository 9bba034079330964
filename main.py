"""
Authentication service: application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_middleware
from auth.jwt import SessionTokens
from auth.password import PasswordHasher
from auth.routes import router as auth_router
from config.settings import Settings, get_settings
from database.session import build_engine, build_session_factory, init_models

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    engine = build_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Ensuring database schema…")
        await init_models(engine)
        logger.info("Application ready to accept requests.")
        yield
        await engine.dispose()

    app = FastAPI(
        title="Auth Service",
        version="1.0.0",
        description="Username/password authentication with cookie sessions.",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.tokens = SessionTokens(settings.jwt_secret, settings.token_ttl_seconds)

    # Routes
    app.include_router(auth_router, prefix="/v0/auth")

    return app


if __name__ == "__main__":
    config = get_settings()
    configure_logging(config)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level="debug" if config.debug else "info",
    )
