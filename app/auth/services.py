import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import status
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.auth.schemas import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
    UserInfo,
)
from app.auth.security import create_access_token, hash_password, verify_password
from app.core.config import settings
from app.core.exceptions import DuplicateError, NotFoundError, ServiceError

logger = logging.getLogger(__name__)


async def _find_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalar_one_or_none()


def verification_link(token: str) -> str:
    return f"{settings.app_url.rstrip('/')}/api/auth/verify/{token}"


async def signup_user(db: AsyncSession, payload: SignupRequest) -> SignupResponse:
    if await _find_user_by_email(db, payload.email):
        raise DuplicateError("Email already registered")

    verification_token = str(uuid.uuid4())
    user = User(
        full_name=payload.full_name,
        email=payload.email.lower(),
        password_hash=hash_password(payload.password),
        school_name=payload.school_name,
        account_type=payload.account_type.value,
        is_verified=False,
        verification_token=verification_token,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        # Lost a race with a concurrent signup for the same address
        raise DuplicateError("Email already registered") from e
    await db.refresh(user)

    # Outbound mail is not wired up; the link is logged for the operator.
    logger.info("Verification link for %s: %s", user.email, verification_link(verification_token))

    return SignupResponse(
        message="Account created successfully! Please check your email to verify your account.",
        user_id=user.id,
    )


async def verify_email(db: AsyncSession, token: str) -> bool:
    """Mark the user owning ``token`` as verified. False when the token is unknown or already used."""
    result = await db.execute(
        update(User)
        .where(User.verification_token == token)
        .values(is_verified=True, verification_token=None)
        .returning(User.id)
    )
    user_id = result.scalar_one_or_none()
    await db.commit()
    if user_id is None:
        return False
    logger.info("User %s verified their email", user_id)
    return True


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    user = await _find_user_by_email(db, payload.email)
    if not user:
        raise ServiceError("Invalid email or password", status.HTTP_401_UNAUTHORIZED)

    if not verify_password(payload.password, user.password_hash):
        raise ServiceError("Invalid email or password", status.HTTP_401_UNAUTHORIZED)

    if not user.is_verified:
        raise ServiceError("Please verify your email before logging in", status.HTTP_403_FORBIDDEN)

    issued_at = datetime.now(timezone.utc)
    token = create_access_token(
        subject={
            "sub": str(user.id),
            "email": user.email,
            "account_type": user.account_type,
            "iat": int(issued_at.timestamp()),
        }
    )
    return LoginResponse(
        token=token,
        user=UserInfo.model_validate(user),
        issued_at=issued_at,
    )


async def get_user_info(db: AsyncSession, current_user: CurrentUser) -> UserInfo:
    user = await db.get(User, current_user.id)
    if not user:
        raise NotFoundError("User not found")
    return UserInfo.model_validate(user)
