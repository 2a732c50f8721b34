from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.auth.schemas import CurrentUser
from app.auth.security import decode_access_token
from app.core.enums import AccountType
from app.db.session import get_db

TOKEN_COOKIE_NAME = "token"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login-oauth", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    cookie_token: Optional[str] = Cookie(None, alias=TOKEN_COOKIE_NAME),
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Resolve the authenticated user from the session cookie or the bearer token."""
    token = cookie_token or bearer_token
    if not token:
        raise _unauthorized("Access denied. No token provided.")

    try:
        payload = decode_access_token(token)
    except ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except JWTError:
        raise _unauthorized("Invalid token")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token")

    # Role and verification come from the stored user, not from the token claims
    user = await db.get(User, user_id)
    if not user or not user.is_verified:
        raise _unauthorized("Invalid token")

    try:
        account_type = AccountType(user.account_type)
    except ValueError:
        raise _unauthorized("Invalid token")

    return CurrentUser(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        account_type=account_type,
        school_name=user.school_name,
    )
