"""
Create any missing tables and indexes, then seed the default subjects.

Run once against a fresh database (idempotent afterwards):
  python -m app.db.schema_check
"""
import asyncio
import logging
from typing import List

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine

import app.auth.models  # noqa: F401  registers users on Base.metadata
import app.core.models  # noqa: F401
from app.api.subjects.service import seed_default_subjects
from app.core.config import settings
from app.core.logging import configure_logging
from app.db.session import Base, Database

logger = logging.getLogger(__name__)

REQUIRED_TABLES: List[str] = [
    "users",
    "students",
    "staff",
    "subjects",
    "staff_subjects",
    "staff_attendance",
    "fee_structures",
    "fee_payments",
]


async def ensure_tables(db_engine: AsyncEngine) -> List[str]:
    """Create missing tables (with their indexes and constraints). Returns the names created."""
    async with db_engine.begin() as conn:
        existing = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
        missing = [name for name in REQUIRED_TABLES if name not in existing]
        await conn.run_sync(Base.metadata.create_all)
    return missing


async def main() -> None:
    configure_logging(settings.log_level)
    database = Database(settings.database_url, echo=settings.db_echo)
    try:
        missing = await ensure_tables(database.engine)
        if missing:
            logger.info("Created missing tables: %s", ", ".join(missing))
        else:
            logger.info("All required tables already exist in the database.")

        async with database.session() as db:
            created = await seed_default_subjects(db)
        logger.info("Default subjects inserted: %s", created)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
