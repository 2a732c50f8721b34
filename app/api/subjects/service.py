from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DuplicateError
from app.core.models import Subject

from .schemas import SubjectCreate, SubjectResponse

# Seeded by the schema tool on a fresh database
DEFAULT_SUBJECTS = [
    ("Mathematics", "MATH101", "Core Mathematics"),
    ("English Language", "ENG101", "English Language and Literature"),
    ("Science", "SCI101", "Integrated Science"),
    ("Social Studies", "SOC101", "Social Studies"),
    ("ICT", "ICT101", "Information Communication Technology"),
]


def _conflict_message(code: str) -> str:
    return f"Subject code '{code}' already exists"


async def get_subject_by_code(db: AsyncSession, code: str) -> Optional[Subject]:
    result = await db.execute(select(Subject).where(Subject.subject_code == code))
    return result.scalar_one_or_none()


async def list_subjects(db: AsyncSession) -> List[SubjectResponse]:
    result = await db.execute(select(Subject).order_by(Subject.subject_name))
    return [SubjectResponse.model_validate(s) for s in result.scalars().all()]


async def create_subject(db: AsyncSession, payload: SubjectCreate) -> SubjectResponse:
    code = payload.subject_code.strip().upper()
    if await get_subject_by_code(db, code):
        raise DuplicateError(_conflict_message(code))
    obj = Subject(
        subject_name=payload.subject_name.strip(),
        subject_code=code,
        description=payload.description,
    )
    db.add(obj)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise DuplicateError(_conflict_message(code)) from e
    await db.refresh(obj)
    return SubjectResponse.model_validate(obj)


async def seed_default_subjects(db: AsyncSession) -> int:
    """Insert any missing default subjects. Returns how many were created."""
    created = 0
    for name, code, description in DEFAULT_SUBJECTS:
        if await get_subject_by_code(db, code):
            continue
        db.add(Subject(subject_name=name, subject_code=code, description=description))
        created += 1
    await db.commit()
    return created
