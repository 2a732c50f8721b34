"""Student records: list/search, create, update, delete. Business key is student_id."""

from typing import List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import EnrollmentCategory, StudentStatus
from app.core.exceptions import DuplicateError, NotFoundError
from app.core.models import Student

from .schemas import StudentCreate, StudentResponse, StudentUpdate

DUPLICATE_STUDENT_MESSAGE = "Student ID already exists"


def _to_response(s: Student) -> StudentResponse:
    return StudentResponse.model_validate(s)


def _enum_value(value):
    return value.value if value is not None else None


async def _student_id_taken(
    db: AsyncSession, student_id: str, exclude_id: Optional[int] = None
) -> bool:
    stmt = select(Student.id).where(Student.student_id == student_id)
    if exclude_id is not None:
        stmt = stmt.where(Student.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def list_students(
    db: AsyncSession,
    search: Optional[str] = None,
    enrollment_category: Optional[EnrollmentCategory] = None,
    status_filter: Optional[StudentStatus] = None,
) -> List[StudentResponse]:
    stmt = select(Student)
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Student.full_name.ilike(pattern),
                Student.student_id.ilike(pattern),
                Student.email.ilike(pattern),
            )
        )
    if enrollment_category is not None:
        stmt = stmt.where(Student.enrollment_category == enrollment_category.value)
    if status_filter is not None:
        stmt = stmt.where(Student.status == status_filter.value)
    stmt = stmt.order_by(Student.created_at.desc(), Student.id.desc())
    result = await db.execute(stmt)
    return [_to_response(s) for s in result.scalars().all()]


async def get_student(db: AsyncSession, student_pk: int) -> Optional[StudentResponse]:
    result = await db.execute(select(Student).where(Student.id == student_pk))
    obj = result.scalar_one_or_none()
    return _to_response(obj) if obj else None


async def create_student(db: AsyncSession, payload: StudentCreate) -> StudentResponse:
    student_id = payload.student_id.strip()
    if await _student_id_taken(db, student_id):
        raise DuplicateError(DUPLICATE_STUDENT_MESSAGE)
    obj = Student(
        student_id=student_id,
        full_name=payload.full_name.strip(),
        date_of_birth=payload.date_of_birth,
        gender=_enum_value(payload.gender),
        email=payload.email,
        phone=payload.phone,
        address=payload.address,
        parent_guardian_name=payload.parent_guardian_name,
        parent_guardian_phone=payload.parent_guardian_phone,
        parent_guardian_email=payload.parent_guardian_email,
        enrollment_category=_enum_value(payload.enrollment_category),
        enrollment_date=payload.enrollment_date,
        status=StudentStatus.ACTIVE.value,
    )
    db.add(obj)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise DuplicateError(DUPLICATE_STUDENT_MESSAGE) from e
    await db.refresh(obj)
    return _to_response(obj)


async def update_student(
    db: AsyncSession, student_pk: int, payload: StudentUpdate
) -> Optional[StudentResponse]:
    result = await db.execute(select(Student).where(Student.id == student_pk))
    obj = result.scalar_one_or_none()
    if not obj:
        return None
    student_id = payload.student_id.strip()
    if await _student_id_taken(db, student_id, exclude_id=student_pk):
        raise DuplicateError(DUPLICATE_STUDENT_MESSAGE)
    obj.student_id = student_id
    obj.full_name = payload.full_name.strip()
    obj.date_of_birth = payload.date_of_birth
    obj.gender = _enum_value(payload.gender)
    obj.email = payload.email
    obj.phone = payload.phone
    obj.address = payload.address
    obj.parent_guardian_name = payload.parent_guardian_name
    obj.parent_guardian_phone = payload.parent_guardian_phone
    obj.parent_guardian_email = payload.parent_guardian_email
    obj.enrollment_category = _enum_value(payload.enrollment_category)
    obj.enrollment_date = payload.enrollment_date
    obj.status = payload.status.value
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise DuplicateError(DUPLICATE_STUDENT_MESSAGE) from e
    await db.refresh(obj)
    return _to_response(obj)


async def delete_student(db: AsyncSession, student_pk: int) -> None:
    """Delete a student; fee structures and payments go with it (ON DELETE CASCADE)."""
    result = await db.execute(
        delete(Student).where(Student.id == student_pk).returning(Student.id)
    )
    deleted = result.scalar_one_or_none()
    if deleted is None:
        await db.rollback()
        raise NotFoundError("Student not found")
    await db.commit()
