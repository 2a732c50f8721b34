from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi import status as http_status
from fastapi.responses import HTMLResponse
from fastapi.encoders import jsonable_encoder
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import ValidationError

from app.auth.dependencies import TOKEN_COOKIE_NAME, get_current_user
from app.auth.schemas import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
    SignupResponse,
    UserInfo,
)
from app.auth.services import ServiceError, get_user_info, login_user, signup_user, verify_email
from app.core.config import settings
from app.db.session import get_db

router = APIRouter(prefix="/api/auth", tags=["auth"])

VERIFIED_PAGE = """
<html>
  <head><title>Email verified</title></head>
  <body style="font-family: Arial, sans-serif; text-align: center; padding-top: 80px;">
    <h1>Email Verified Successfully!</h1>
    <p>Your account has been verified. You can now log in to the system.</p>
    <a href="/login.html">Go to Login</a>
  </body>
</html>
"""

INVALID_LINK_PAGE = """
<html>
  <head><title>Invalid link</title></head>
  <body style="font-family: Arial, sans-serif; text-align: center; padding-top: 80px;">
    <h1>Invalid or Expired Link</h1>
    <p>The verification link is invalid or has expired.</p>
  </body>
</html>
"""


def _set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=http_status.HTTP_201_CREATED,
)
async def signup(
    payload: SignupRequest,
    db: AsyncSession = Depends(get_db),
) -> SignupResponse:
    try:
        return await signup_user(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/verify/{token}", response_class=HTMLResponse)
async def verify(
    token: str,
    db: AsyncSession = Depends(get_db),
) -> HTMLResponse:
    if await verify_email(db, token):
        return HTMLResponse(VERIFIED_PAGE)
    return HTMLResponse(INVALID_LINK_PAGE, status_code=http_status.HTTP_400_BAD_REQUEST)


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=http_status.HTTP_200_OK,
)
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    try:
        result = await login_user(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    _set_token_cookie(response, result.token)
    return result


@router.post("/login-oauth")
async def login_oauth(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    try:
        payload = LoginRequest(
            email=form_data.username.strip(),
            password=form_data.password,
        )
    except ValidationError as e:
        # Form fields are validated here, not by FastAPI; report them the same way
        raise HTTPException(
            status_code=http_status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=jsonable_encoder(e.errors(include_url=False, include_context=False)),
        )
    try:
        result = await login_user(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    _set_token_cookie(response, result.token)
    return {
        "access_token": result.token,
        "token_type": "bearer",
    }


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    response.delete_cookie(TOKEN_COOKIE_NAME)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserInfo)
async def me(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> UserInfo:
    try:
        return await get_user_info(db, current_user)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
