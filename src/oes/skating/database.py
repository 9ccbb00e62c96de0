"""Database module."""
from __future__ import annotations

import functools
from contextvars import ContextVar
from typing import Optional

import sqlalchemy.event
from attrs import frozen
from loguru import logger
from oes.skating.entities.base import import_entities, metadata
from rodi import GetServiceContext
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

session_context: ContextVar[Optional[AsyncSession]] = ContextVar(
    "session_context", default=None
)
"""The session of the current request."""


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@frozen
class DBConfig:
    """Database engine and session factory."""

    engine: AsyncEngine
    session_factory: async_sessionmaker

    @classmethod
    def create(cls, url: str) -> DBConfig:
        """Create a :class:`DBConfig` from a database URL.

        Sessions do not expire loaded objects on commit, so responses can be
        built from entities after the transaction ends. SQLite connections
        enforce foreign keys, which SQLite leaves off by default.
        """
        engine = create_async_engine(url)

        if engine.dialect.name == "sqlite":
            sqlalchemy.event.listen(
                engine.sync_engine, "connect", _enable_sqlite_foreign_keys
            )

        session_factory = async_sessionmaker(bind=engine, expire_on_commit=False)
        return cls(engine, session_factory)

    async def close(self):
        """Dispose of the engine's connections."""
        await self.engine.dispose()

    async def create_tables(self):
        """Create any missing tables."""
        import_entities()
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def drop_tables(self):
        """Drop all tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.drop_all)


def db_session_factory(services: GetServiceContext) -> AsyncSession:
    """Provide the request's :class:`AsyncSession`, opening one if needed."""
    session = session_context.get()

    if not session:
        db_config: DBConfig = services.provider[DBConfig]
        session = db_config.session_factory()
        session_context.set(session)

    return session


async def db_session_middleware(request, handler):
    """Middleware to close the request's session."""
    try:
        return await handler(request)
    finally:
        session = session_context.get()
        if session is not None:
            await session.close()
            session_context.set(None)


def transaction(fn):
    """Commit the request's session if ``fn`` returns, roll back if it raises."""

    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            result = await fn(*args, **kwargs)
        except BaseException:
            session = session_context.get()
            if session is not None:
                logger.debug("Rolling back {}", fn.__name__)
                await session.rollback()
            raise

        session = session_context.get()
        if session is not None:
            await session.commit()
        return result

    return wrapper
