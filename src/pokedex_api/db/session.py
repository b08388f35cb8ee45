"""
Database Session Management

Provides the async SQLAlchemy engine, the session factory and helpers for
request-scoped and worker-scoped store access.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
)

from ..config import settings
from .models import Base
from .pokemon_store import PokemonStore

logger = logging.getLogger("pokedex.db")


# Create async engine
async_engine = create_async_engine(
    settings.database_url,
    echo=False,  # Set True for SQL debugging
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
)

# Session factory
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for FastAPI endpoints that need database access.

    Commits when the request succeeds, rolls back on any error.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def pokemon_store_scope() -> AsyncIterator[PokemonStore]:
    """
    Open a dedicated session for work done outside a request (creation
    worker, seed script) and commit it on exit.
    """
    async with AsyncSessionLocal() as session:
        store = PokemonStore(session)
        try:
            yield store
            await store.commit()
        except Exception:
            await session.rollback()
            raise


async def check_connection() -> None:
    """
    Run a trivial query; raises if the database is unreachable.
    """
    async with async_engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def create_tables() -> None:
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")
