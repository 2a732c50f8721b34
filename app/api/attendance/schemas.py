from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from app.core.enums import AttendanceStatus


class StaffAttendanceMark(BaseModel):
    """Record (or overwrite) one staff member's attendance for a day."""

    staff_id: int
    attendance_date: date
    status: AttendanceStatus
    notes: Optional[str] = Field(None, max_length=2000)


class StaffAttendanceRecord(BaseModel):
    id: int
    staff_id: int
    staff_name: Optional[str] = None
    attendance_date: date
    status: AttendanceStatus
    notes: Optional[str] = None
