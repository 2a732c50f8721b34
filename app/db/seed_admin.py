"""
Seed script to create the first Administrator account.

Signup requires email verification, so the first administrator is created
here already verified. Run once (e.g. after schema_check) with env set:
  ADMIN_EMAIL=admin@school.example
  ADMIN_PASSWORD=YourSecurePassword
"""
import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.auth.security import hash_password
from app.core.config import settings
from app.core.enums import AccountType
from app.core.logging import configure_logging
from app.db.session import Database

logger = logging.getLogger(__name__)


async def seed_admin(db: AsyncSession) -> bool:
    """Create the administrator if missing. Returns True when a user was created."""
    email = settings.admin_email
    password = settings.admin_password
    if not email or not password:
        logger.warning("ADMIN_EMAIL / ADMIN_PASSWORD not set; skipping administrator seed.")
        return False

    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    if result.scalar_one_or_none():
        logger.info("Administrator %s already exists.", email)
        return False

    db.add(
        User(
            full_name=settings.admin_full_name,
            email=email.lower(),
            password_hash=hash_password(password),
            school_name=settings.admin_school_name,
            account_type=AccountType.ADMINISTRATOR.value,
            is_verified=True,
        )
    )
    await db.commit()
    logger.info("Created administrator %s.", email)
    return True


async def main() -> None:
    configure_logging(settings.log_level)
    database = Database(settings.database_url)
    try:
        async with database.session() as db:
            try:
                await seed_admin(db)
            except Exception:
                await db.rollback()
                logger.exception("Error seeding administrator")
                raise
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
