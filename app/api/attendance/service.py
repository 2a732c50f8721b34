"""Staff attendance: one record per staff member per day; recording again overwrites."""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ServiceError
from app.core.models import Staff, StaffAttendance

from .schemas import StaffAttendanceMark, StaffAttendanceRecord

logger = logging.getLogger(__name__)


def _to_record(row: StaffAttendance, staff_name: Optional[str]) -> StaffAttendanceRecord:
    return StaffAttendanceRecord(
        id=row.id,
        staff_id=row.staff_id,
        staff_name=staff_name,
        attendance_date=row.attendance_date,
        status=row.status,
        notes=row.notes,
    )


async def _overwrite(db: AsyncSession, payload: StaffAttendanceMark) -> Optional[int]:
    result = await db.execute(
        update(StaffAttendance)
        .where(
            StaffAttendance.staff_id == payload.staff_id,
            StaffAttendance.attendance_date == payload.attendance_date,
        )
        .values(status=payload.status.value, notes=payload.notes)
        .returning(StaffAttendance.id)
    )
    return result.scalar_one_or_none()


async def record_attendance(
    db: AsyncSession, payload: StaffAttendanceMark
) -> StaffAttendanceRecord:
    staff = await db.get(Staff, payload.staff_id)
    if not staff:
        raise NotFoundError("Staff member not found")

    record_id = await _overwrite(db, payload)
    if record_id is None:
        db.add(
            StaffAttendance(
                staff_id=payload.staff_id,
                attendance_date=payload.attendance_date,
                status=payload.status.value,
                notes=payload.notes,
            )
        )
        try:
            await db.commit()
        except IntegrityError:
            # A concurrent request inserted the same (staff, date) first
            await db.rollback()
            record_id = await _overwrite(db, payload)
            if record_id is None:
                raise ServiceError("Failed to record attendance")
            await db.commit()
    else:
        await db.commit()

    row = (
        await db.execute(
            select(StaffAttendance).where(
                StaffAttendance.staff_id == payload.staff_id,
                StaffAttendance.attendance_date == payload.attendance_date,
            )
        )
    ).scalar_one()
    logger.info(
        "Attendance for staff %s on %s recorded as %s",
        payload.staff_id,
        payload.attendance_date,
        payload.status.value,
    )
    return _to_record(row, staff.full_name)


async def list_attendance(
    db: AsyncSession,
    attendance_date: Optional[date] = None,
    staff_pk: Optional[int] = None,
) -> List[StaffAttendanceRecord]:
    stmt = select(StaffAttendance, Staff.full_name).join(Staff, Staff.id == StaffAttendance.staff_id)
    if attendance_date is not None:
        stmt = stmt.where(StaffAttendance.attendance_date == attendance_date)
    if staff_pk is not None:
        stmt = stmt.where(StaffAttendance.staff_id == staff_pk)
    stmt = stmt.order_by(StaffAttendance.attendance_date.desc(), Staff.full_name)
    result = await db.execute(stmt)
    return [_to_record(row, name) for row, name in result.all()]
