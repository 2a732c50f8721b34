from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.core.enums import EnrollmentCategory, Gender, StudentStatus


class StudentBase(BaseModel):
    student_id: str = Field(..., min_length=1, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=255)
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    parent_guardian_name: Optional[str] = Field(None, max_length=255)
    parent_guardian_phone: Optional[str] = Field(None, max_length=50)
    parent_guardian_email: Optional[EmailStr] = None
    enrollment_category: Optional[EnrollmentCategory] = None
    enrollment_date: Optional[date] = None


class StudentCreate(StudentBase):
    pass


class StudentUpdate(StudentBase):
    """Full replacement of a student's editable fields (PUT)."""

    status: StudentStatus = StudentStatus.ACTIVE


class StudentResponse(BaseModel):
    id: int
    student_id: str
    full_name: str
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    parent_guardian_name: Optional[str] = None
    parent_guardian_phone: Optional[str] = None
    parent_guardian_email: Optional[str] = None
    enrollment_category: Optional[EnrollmentCategory] = None
    enrollment_date: Optional[date] = None
    status: StudentStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
