"""Staff records and their subject assignments."""

from typing import List, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.subjects.schemas import SubjectResponse
from app.core.enums import StaffStatus
from app.core.exceptions import DuplicateError, NotFoundError
from app.core.models import Staff, StaffSubject, Subject

from .schemas import StaffCreate, StaffDetailResponse, StaffResponse, StaffUpdate

DUPLICATE_STAFF_MESSAGE = "Staff ID or email already exists"


def _to_response(s: Staff) -> StaffResponse:
    return StaffResponse.model_validate(s)


async def _ensure_unique_keys(
    db: AsyncSession, staff_id: str, email: str, exclude_id: Optional[int] = None
) -> None:
    stmt = select(Staff).where(
        or_(Staff.staff_id == staff_id, func.lower(Staff.email) == email.lower())
    )
    if exclude_id is not None:
        stmt = stmt.where(Staff.id != exclude_id)
    result = await db.execute(stmt)
    existing = result.scalars().first()
    if not existing:
        return
    if existing.staff_id == staff_id:
        raise DuplicateError(f"Staff ID '{staff_id}' already exists")
    raise DuplicateError(f"Staff email '{email}' already exists")


async def get_staff_row(db: AsyncSession, staff_pk: int) -> Optional[Staff]:
    result = await db.execute(select(Staff).where(Staff.id == staff_pk))
    return result.scalar_one_or_none()


async def list_staff(
    db: AsyncSession,
    search: Optional[str] = None,
    status_filter: Optional[StaffStatus] = None,
) -> List[StaffResponse]:
    stmt = select(Staff)
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Staff.full_name.ilike(pattern),
                Staff.staff_id.ilike(pattern),
                Staff.email.ilike(pattern),
            )
        )
    if status_filter is not None:
        stmt = stmt.where(Staff.status == status_filter.value)
    stmt = stmt.order_by(Staff.created_at.desc(), Staff.id.desc())
    result = await db.execute(stmt)
    return [_to_response(s) for s in result.scalars().all()]


async def get_staff(db: AsyncSession, staff_pk: int) -> Optional[StaffDetailResponse]:
    obj = await get_staff_row(db, staff_pk)
    if not obj:
        return None
    subjects = await db.execute(
        select(Subject)
        .join(StaffSubject, StaffSubject.subject_id == Subject.id)
        .where(StaffSubject.staff_id == staff_pk)
        .order_by(Subject.subject_name)
    )
    detail = StaffDetailResponse.model_validate(obj)
    detail.subjects = [SubjectResponse.model_validate(s) for s in subjects.scalars().all()]
    return detail


async def create_staff(db: AsyncSession, payload: StaffCreate) -> StaffResponse:
    staff_id = payload.staff_id.strip()
    email = payload.email.lower()
    await _ensure_unique_keys(db, staff_id, email)
    obj = Staff(
        staff_id=staff_id,
        full_name=payload.full_name.strip(),
        email=email,
        phone=payload.phone,
        address=payload.address,
        date_of_birth=payload.date_of_birth,
        gender=payload.gender.value if payload.gender else None,
        qualification=payload.qualification,
        hire_date=payload.hire_date,
        status=StaffStatus.ACTIVE.value,
    )
    db.add(obj)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise DuplicateError(DUPLICATE_STAFF_MESSAGE) from e
    await db.refresh(obj)
    return _to_response(obj)


async def update_staff(
    db: AsyncSession, staff_pk: int, payload: StaffUpdate
) -> Optional[StaffResponse]:
    obj = await get_staff_row(db, staff_pk)
    if not obj:
        return None
    staff_id = payload.staff_id.strip()
    email = payload.email.lower()
    await _ensure_unique_keys(db, staff_id, email, exclude_id=staff_pk)
    obj.staff_id = staff_id
    obj.full_name = payload.full_name.strip()
    obj.email = email
    obj.phone = payload.phone
    obj.address = payload.address
    obj.date_of_birth = payload.date_of_birth
    obj.gender = payload.gender.value if payload.gender else None
    obj.qualification = payload.qualification
    obj.hire_date = payload.hire_date
    obj.status = payload.status.value
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise DuplicateError(DUPLICATE_STAFF_MESSAGE) from e
    await db.refresh(obj)
    return _to_response(obj)


async def delete_staff(db: AsyncSession, staff_pk: int) -> None:
    """Delete a staff member; subject assignments and attendance cascade."""
    result = await db.execute(delete(Staff).where(Staff.id == staff_pk).returning(Staff.id))
    if result.scalar_one_or_none() is None:
        await db.rollback()
        raise NotFoundError("Staff member not found")
    await db.commit()


async def assign_subject(db: AsyncSession, staff_pk: int, subject_pk: int) -> SubjectResponse:
    if not await get_staff_row(db, staff_pk):
        raise NotFoundError("Staff member not found")
    subject = await db.get(Subject, subject_pk)
    if not subject:
        raise NotFoundError("Subject not found")
    existing = await db.execute(
        select(StaffSubject.id).where(
            StaffSubject.staff_id == staff_pk,
            StaffSubject.subject_id == subject_pk,
        )
    )
    if existing.first() is not None:
        raise DuplicateError("Subject already assigned to this staff member")
    db.add(StaffSubject(staff_id=staff_pk, subject_id=subject_pk))
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise DuplicateError("Subject already assigned to this staff member") from e
    return SubjectResponse.model_validate(subject)


async def remove_subject(db: AsyncSession, staff_pk: int, subject_pk: int) -> None:
    result = await db.execute(
        delete(StaffSubject)
        .where(StaffSubject.staff_id == staff_pk, StaffSubject.subject_id == subject_pk)
        .returning(StaffSubject.id)
    )
    if result.scalar_one_or_none() is None:
        await db.rollback()
        raise NotFoundError("Assignment not found")
    await db.commit()
