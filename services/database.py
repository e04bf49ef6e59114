"""Async engine and session management for the analysis store.

DATABASE_URL may be any SQLAlchemy async URL. Postgres URLs written for libpq
(`postgres://...?sslmode=require`) are translated for asyncpg.
"""
import os
import ssl
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse

from sqlalchemy.ext.asyncio import (
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
    AsyncEngine,
)
from sqlmodel import SQLModel

# Registers the table models on SQLModel.metadata
import models.db_models  # noqa: F401

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_async_session_maker: async_sessionmaker | None = None

POSTGRES_SCHEMES = ("postgres", "postgresql", "postgresql+asyncpg")
LIBPQ_ONLY_PARAMS = ("sslmode", "channel_binding", "options")
SSL_MODES = ("require", "verify-ca", "verify-full")


def _ssl_context(sslmode: Optional[str]) -> Optional[ssl.SSLContext]:
    """SSL context matching a libpq sslmode, or None when TLS is not requested."""
    if sslmode not in SSL_MODES:
        return None

    context = ssl.create_default_context()
    if sslmode == "require":
        # encrypt only; certificate is not checked
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def get_database_url() -> tuple[str, dict]:
    """Read DATABASE_URL and return (async URL, connect_args).

    Raises:
        ValueError: If DATABASE_URL is not set.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL environment variable is not set")

    parsed = urlparse(database_url)
    if parsed.scheme not in POSTGRES_SCHEMES:
        return database_url, {}

    query_params = parse_qs(parsed.query)
    sslmode = query_params.get("sslmode", [None])[0]
    kept_params = {k: v for k, v in query_params.items() if k not in LIBPQ_ONLY_PARAMS}

    async_url = urlunparse((
        "postgresql+asyncpg",
        parsed.netloc,
        parsed.path,
        parsed.params,
        urlencode(kept_params, doseq=True),
        parsed.fragment,
    ))

    connect_args = {}
    context = _ssl_context(sslmode)
    if context is not None:
        connect_args["ssl"] = context

    return async_url, connect_args


def get_engine() -> AsyncEngine:
    """Return the process-wide AsyncEngine, creating it on first use."""
    global _engine

    if _engine is None:
        database_url, connect_args = get_database_url()

        engine_kwargs = {"echo": False, "connect_args": connect_args}
        if database_url.startswith("postgresql+asyncpg"):
            engine_kwargs.update(
                pool_pre_ping=True,
                pool_size=5,
                max_overflow=10,
                pool_recycle=300,
            )

        _engine = create_async_engine(database_url, **engine_kwargs)
        logger.info(f"Database engine created: driver={_engine.url.drivername}")

    return _engine


def get_session_maker() -> async_sessionmaker:
    global _async_session_maker

    if _async_session_maker is None:
        _async_session_maker = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False
        )

    return _async_session_maker


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Open a session; anything raised inside the block rolls it back.

    Usage:
        async with get_async_session() as session:
            await session.execute(query)
    """
    async with get_session_maker()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create any missing tables."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database schema ready")


async def close_engine() -> None:
    """Dispose of the engine's pool. Called from the app lifespan on shutdown."""
    global _engine, _async_session_maker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_maker = None
        logger.info("Database engine closed")
