import asyncio
import logging

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from app.auth.models import User
from app.db.session import Base, Database


@pytest.fixture()
async def slow_warning_db(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'watchdog.db'}", checkout_warning_seconds=0.05)
    yield db
    await db.dispose()


@pytest.mark.asyncio
async def test_long_checkout_is_reported(slow_warning_db: Database, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="app.db.session"):
        async with slow_warning_db.session() as session:
            await session.execute(text("SELECT 1"))
            await asyncio.sleep(0.2)

    assert "checked out for more than" in caplog.text
    assert "SELECT 1" in caplog.text


@pytest.mark.asyncio
async def test_short_checkout_is_quiet(slow_warning_db: Database, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="app.db.session"):
        async with slow_warning_db.session() as session:
            await session.execute(text("SELECT 1"))
        await asyncio.sleep(0.2)

    assert "checked out for more than" not in caplog.text


@pytest.mark.asyncio
async def test_failed_statement_is_logged_and_raised(slow_warning_db: Database, caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="app.db.session"):
        async with slow_warning_db.session() as session:
            with pytest.raises(OperationalError):
                await session.execute(text("SELECT * FROM no_such_table"))

    assert "Database query error" in caplog.text
    assert "no_such_table" in caplog.text


@pytest.mark.asyncio
async def test_get_is_timed_and_tracked(slow_warning_db: Database, caplog) -> None:
    async with slow_warning_db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    with caplog.at_level(logging.DEBUG, logger="app.db.session"):
        async with slow_warning_db.session() as session:
            assert await session.get(User, 42) is None
            assert session.last_statement == "get User 42"

    assert "Executed query" in caplog.text
    assert "get User 42" in caplog.text


@pytest.mark.asyncio
async def test_failed_get_is_logged_and_raised(slow_warning_db: Database, caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="app.db.session"):
        async with slow_warning_db.session() as session:
            with pytest.raises(OperationalError):
                await session.get(User, 1)

    assert "Database query error: get User 1" in caplog.text
