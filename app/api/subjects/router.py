from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.rbac import require_admin
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import SubjectCreate, SubjectResponse
from . import service

router = APIRouter(prefix="/api/subjects", tags=["subjects"])


@router.get(
    "",
    response_model=List[SubjectResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_subjects(
    db: AsyncSession = Depends(get_db),
) -> List[SubjectResponse]:
    return await service.list_subjects(db)


@router.post(
    "",
    response_model=SubjectResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_subject(
    payload: SubjectCreate,
    db: AsyncSession = Depends(get_db),
) -> SubjectResponse:
    try:
        return await service.create_subject(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
