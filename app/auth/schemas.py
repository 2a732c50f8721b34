from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.enums import AccountType


class SignupRequest(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)
    school_name: str = Field(..., min_length=1, max_length=255)
    account_type: AccountType

    @field_validator("full_name", "school_name")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class SignupResponse(BaseModel):
    message: str
    user_id: int


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserInfo(BaseModel):
    id: int
    full_name: str
    email: EmailStr
    school_name: str
    account_type: AccountType

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    user: UserInfo
    issued_at: datetime


class MessageResponse(BaseModel):
    message: str


class CurrentUser(BaseModel):
    """Authenticated user as re-loaded from the database on each request."""

    id: int
    email: str
    full_name: str
    account_type: AccountType
    school_name: Optional[str] = None
