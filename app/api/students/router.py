from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.rbac import require_admin
from app.auth.schemas import MessageResponse
from app.core.enums import EnrollmentCategory, StudentStatus
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import StudentCreate, StudentResponse, StudentUpdate
from . import service

router = APIRouter(prefix="/api/students", tags=["students"])


@router.get(
    "",
    response_model=List[StudentResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_students(
    search: Optional[str] = Query(None, description="Case-insensitive match on name, student ID or email"),
    enrollment_category: Optional[EnrollmentCategory] = Query(None),
    student_status: Optional[StudentStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> List[StudentResponse]:
    return await service.list_students(
        db,
        search=search,
        enrollment_category=enrollment_category,
        status_filter=student_status,
    )


@router.get(
    "/{student_pk}",
    response_model=StudentResponse,
    dependencies=[Depends(get_current_user)],
)
async def get_student(
    student_pk: int,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    obj = await service.get_student(db, student_pk)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return obj


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        return await service.create_student(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{student_pk}",
    response_model=StudentResponse,
    dependencies=[Depends(require_admin)],
)
async def update_student(
    student_pk: int,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        obj = await service.update_student(db, student_pk, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return obj


@router.delete(
    "/{student_pk}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_student(
    student_pk: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await service.delete_student(db, student_pk)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return MessageResponse(message="Student deleted successfully")
