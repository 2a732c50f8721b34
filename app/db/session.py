import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


class TimedSession(AsyncSession):
    """AsyncSession that logs every ``execute`` and ``get`` with its duration.

    The last statement is kept on ``last_statement`` so a session held for too
    long can be reported together with what it was doing.
    """

    last_statement: Optional[str] = None

    async def _timed(self, description: str, call: Awaitable[Any]) -> Any:
        self.last_statement = description
        start = time.perf_counter()
        try:
            result = await call
        except Exception:
            logger.error("Database query error: %s", description)
            raise
        duration_ms = (time.perf_counter() - start) * 1000
        logger.debug("Executed query in %.1f ms: %s", duration_ms, description)
        return result

    async def execute(self, statement: Any, *args: Any, **kwargs: Any):
        return await self._timed(str(statement), super().execute(statement, *args, **kwargs))

    async def get(self, entity: Any, ident: Any, *args: Any, **kwargs: Any):
        name = getattr(entity, "__name__", entity)
        return await self._timed(f"get {name} {ident!r}", super().get(entity, ident, *args, **kwargs))


def _warn_long_checkout(session: TimedSession, seconds: float) -> None:
    logger.warning(
        "A database session has been checked out for more than %s seconds. Last statement: %s",
        seconds,
        session.last_statement,
    )


class Database:
    """Owns the engine and session factory; handed to requests through ``get_db``."""

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        checkout_warning_seconds: float = 5.0,
        **engine_kwargs: Any,
    ) -> None:
        # pool_pre_ping: check connection is alive before use (avoids "connection is closed" errors
        # when DB or network closed idle connections).
        # pool_recycle: discard connections after this many seconds to avoid stale connections.
        engine_kwargs.setdefault("pool_pre_ping", True)
        engine_kwargs.setdefault("pool_recycle", 300)
        self.engine = create_async_engine(url, echo=echo, future=True, **engine_kwargs)
        self.sessionmaker = async_sessionmaker(
            bind=self.engine,
            class_=TimedSession,
            expire_on_commit=False,
        )
        self.checkout_warning_seconds = checkout_warning_seconds

    @asynccontextmanager
    async def session(self) -> AsyncIterator[TimedSession]:
        loop = asyncio.get_running_loop()
        async with self.sessionmaker() as session:
            watchdog = loop.call_later(
                self.checkout_warning_seconds,
                _warn_long_checkout,
                session,
                self.checkout_warning_seconds,
            )
            try:
                yield session
            finally:
                watchdog.cancel()

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
