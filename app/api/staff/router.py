from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.subjects.schemas import SubjectResponse
from app.auth.dependencies import get_current_user
from app.auth.rbac import require_admin
from app.auth.schemas import MessageResponse
from app.core.enums import StaffStatus
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import StaffCreate, StaffDetailResponse, StaffResponse, StaffUpdate, SubjectAssign
from . import service

router = APIRouter(prefix="/api/staff", tags=["staff"])


@router.get(
    "",
    response_model=List[StaffResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_staff(
    search: Optional[str] = Query(None, description="Case-insensitive match on name, staff ID or email"),
    staff_status: Optional[StaffStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> List[StaffResponse]:
    return await service.list_staff(db, search=search, status_filter=staff_status)


@router.get(
    "/{staff_pk}",
    response_model=StaffDetailResponse,
    dependencies=[Depends(get_current_user)],
)
async def get_staff(
    staff_pk: int,
    db: AsyncSession = Depends(get_db),
) -> StaffDetailResponse:
    obj = await service.get_staff(db, staff_pk)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Staff member not found")
    return obj


@router.post(
    "",
    response_model=StaffResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_staff(
    payload: StaffCreate,
    db: AsyncSession = Depends(get_db),
) -> StaffResponse:
    try:
        return await service.create_staff(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{staff_pk}",
    response_model=StaffResponse,
    dependencies=[Depends(require_admin)],
)
async def update_staff(
    staff_pk: int,
    payload: StaffUpdate,
    db: AsyncSession = Depends(get_db),
) -> StaffResponse:
    try:
        obj = await service.update_staff(db, staff_pk, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Staff member not found")
    return obj


@router.delete(
    "/{staff_pk}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_staff(
    staff_pk: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await service.delete_staff(db, staff_pk)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return MessageResponse(message="Staff member deleted successfully")


# --- Subject assignments ---
@router.post(
    "/{staff_pk}/subjects",
    response_model=SubjectResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def assign_subject(
    staff_pk: int,
    payload: SubjectAssign,
    db: AsyncSession = Depends(get_db),
) -> SubjectResponse:
    try:
        return await service.assign_subject(db, staff_pk, payload.subject_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{staff_pk}/subjects/{subject_pk}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def remove_subject(
    staff_pk: int,
    subject_pk: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await service.remove_subject(db, staff_pk, subject_pk)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return MessageResponse(message="Subject removed successfully")
