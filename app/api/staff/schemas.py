from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from app.api.subjects.schemas import SubjectResponse
from app.core.enums import Gender, StaffStatus


class StaffBase(BaseModel):
    staff_id: str = Field(..., min_length=1, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    qualification: Optional[str] = Field(None, max_length=255)
    hire_date: Optional[date] = None


class StaffCreate(StaffBase):
    pass


class StaffUpdate(StaffBase):
    """Full replacement of a staff member's editable fields (PUT)."""

    status: StaffStatus = StaffStatus.ACTIVE


class StaffResponse(BaseModel):
    id: int
    staff_id: str
    full_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    qualification: Optional[str] = None
    hire_date: Optional[date] = None
    status: StaffStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StaffDetailResponse(StaffResponse):
    subjects: List[SubjectResponse] = Field(default_factory=list)


class SubjectAssign(BaseModel):
    subject_id: int
