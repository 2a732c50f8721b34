"""Fees router: payments, balance lookup, fee structures, receipts."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.rbac import require_admin
from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import (
    FeeBalanceResponse,
    FeeStructureResponse,
    FeeStructureUpsert,
    PaymentCreate,
    PaymentRecordedResponse,
    PaymentResponse,
    ReceiptResponse,
)
from . import service

router = APIRouter(prefix="/api/fees", tags=["fees"])


# --- Payment ---
@router.get(
    "",
    response_model=List[PaymentResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_payments(
    student_id: Optional[int] = Query(None),
    academic_year: Optional[str] = Query(None),
    term: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[PaymentResponse]:
    return await service.list_payments(
        db,
        student_id=student_id,
        academic_year=academic_year,
        term=term,
    )


@router.post(
    "",
    response_model=PaymentRecordedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    payload: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> PaymentRecordedResponse:
    try:
        return await service.record_payment(db, payload, recorded_by=current_user.id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "/balance/{student_id}",
    response_model=FeeBalanceResponse,
    dependencies=[Depends(get_current_user)],
)
async def get_balance(
    student_id: int,
    academic_year: str = Query(...),
    term: str = Query(...),
    db: AsyncSession = Depends(get_db),
) -> FeeBalanceResponse:
    return await service.get_balance(db, student_id, academic_year.strip(), term.strip())


# --- Fee Structure ---
@router.post(
    "/structure",
    response_model=FeeStructureResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def set_fee_structure(
    payload: FeeStructureUpsert,
    db: AsyncSession = Depends(get_db),
) -> FeeStructureResponse:
    try:
        return await service.upsert_fee_structure(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "/structure/{student_id}",
    response_model=List[FeeStructureResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_fee_structures(
    student_id: int,
    db: AsyncSession = Depends(get_db),
) -> List[FeeStructureResponse]:
    try:
        return await service.list_student_fee_structures(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


# --- Receipt ---
@router.get(
    "/receipt/{receipt_number}",
    response_model=ReceiptResponse,
    dependencies=[Depends(get_current_user)],
)
async def get_receipt(
    receipt_number: str,
    db: AsyncSession = Depends(get_db),
) -> ReceiptResponse:
    receipt = await service.get_payment_by_receipt(db, receipt_number)
    if not receipt:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Receipt not found")
    return receipt
