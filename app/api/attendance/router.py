from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.rbac import require_admin
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import StaffAttendanceMark, StaffAttendanceRecord
from . import service

# Registered before the staff router so "/attendance" is not read as a staff id
router = APIRouter(prefix="/api/staff/attendance", tags=["attendance"])


@router.post(
    "",
    response_model=StaffAttendanceRecord,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def record_attendance(
    payload: StaffAttendanceMark,
    db: AsyncSession = Depends(get_db),
) -> StaffAttendanceRecord:
    try:
        return await service.record_attendance(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[StaffAttendanceRecord],
    dependencies=[Depends(get_current_user)],
)
async def list_attendance(
    attendance_date: Optional[date] = Query(None),
    staff_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[StaffAttendanceRecord]:
    return await service.list_attendance(db, attendance_date=attendance_date, staff_pk=staff_id)
