"""Fees service: fee structures, payments and receipts. Financial logic.

Every payment is recorded in the same transaction as the increment of its fee
structure, so amount_paid always equals the sum of the term's payments and
balance always equals total_fees - amount_paid.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.core.exceptions import NotFoundError, ServiceError
from app.core.models import FeePayment, FeeStructure, Student

from .receipts import generate_receipt_number
from .schemas import (
    FeeBalanceResponse,
    FeeStructureResponse,
    FeeStructureUpsert,
    PaymentCreate,
    PaymentRecordedResponse,
    PaymentResponse,
    ReceiptResponse,
)

logger = logging.getLogger(__name__)

# Attempts at inserting a payment before giving up on receipt-number collisions
RECEIPT_ATTEMPTS = 5

_STRUCTURE_COLUMNS = (
    FeeStructure.id,
    FeeStructure.student_id,
    FeeStructure.academic_year,
    FeeStructure.term,
    FeeStructure.total_fees,
    FeeStructure.amount_paid,
    FeeStructure.balance,
)


def _to_decimal(val) -> Decimal:
    if val is None:
        return Decimal("0")
    return val if isinstance(val, Decimal) else Decimal(str(val))


def _structure_to_response(row) -> FeeStructureResponse:
    return FeeStructureResponse(
        id=row.id,
        student_id=row.student_id,
        academic_year=row.academic_year,
        term=row.term,
        total_fees=_to_decimal(row.total_fees),
        amount_paid=_to_decimal(row.amount_paid),
        balance=_to_decimal(row.balance),
    )


def _term_filter(student_id: int, academic_year: str, term: str):
    return (
        FeeStructure.student_id == student_id,
        FeeStructure.academic_year == academic_year,
        FeeStructure.term == term,
    )


async def _get_structure(
    db: AsyncSession, student_id: int, academic_year: str, term: str
) -> Optional[FeeStructure]:
    result = await db.execute(
        select(FeeStructure).where(*_term_filter(student_id, academic_year, term))
    )
    return result.scalar_one_or_none()


async def _ensure_student(db: AsyncSession, student_id: int) -> Student:
    student = await db.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found")
    return student


# --- Fee Structure ---
async def _set_total_fees(db: AsyncSession, payload: FeeStructureUpsert):
    """Atomically set total_fees on an existing row, recomputing balance from the stored amount_paid."""
    result = await db.execute(
        update(FeeStructure)
        .where(*_term_filter(payload.student_id, payload.academic_year, payload.term))
        .values(
            total_fees=payload.total_fees,
            balance=payload.total_fees - FeeStructure.amount_paid,
        )
        .returning(*_STRUCTURE_COLUMNS)
        .execution_options(synchronize_session=False)
    )
    return result.first()


async def upsert_fee_structure(
    db: AsyncSession, payload: FeeStructureUpsert
) -> FeeStructureResponse:
    await _ensure_student(db, payload.student_id)

    row = await _set_total_fees(db, payload)
    if row is not None:
        await db.commit()
        return _structure_to_response(row)

    structure = FeeStructure(
        student_id=payload.student_id,
        academic_year=payload.academic_year,
        term=payload.term,
        total_fees=payload.total_fees,
        amount_paid=Decimal("0"),
        balance=payload.total_fees,
    )
    db.add(structure)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent request created the row first; apply the new total to it
        await db.rollback()
        row = await _set_total_fees(db, payload)
        if row is None:
            raise ServiceError("Failed to set fee structure")
        await db.commit()
        return _structure_to_response(row)
    return _structure_to_response(structure)


async def list_student_fee_structures(
    db: AsyncSession, student_id: int
) -> List[FeeStructureResponse]:
    await _ensure_student(db, student_id)
    result = await db.execute(
        select(FeeStructure)
        .where(FeeStructure.student_id == student_id)
        .order_by(FeeStructure.academic_year.desc(), FeeStructure.term)
    )
    return [_structure_to_response(s) for s in result.scalars().all()]


async def get_balance(
    db: AsyncSession, student_id: int, academic_year: str, term: str
) -> FeeBalanceResponse:
    structure = await _get_structure(db, student_id, academic_year, term)
    if not structure:
        return FeeBalanceResponse(student_id=student_id, academic_year=academic_year, term=term)
    return FeeBalanceResponse(
        student_id=student_id,
        academic_year=academic_year,
        term=term,
        total_fees=_to_decimal(structure.total_fees),
        amount_paid=_to_decimal(structure.amount_paid),
        balance=_to_decimal(structure.balance),
        has_structure=True,
    )


# --- Payment ---
async def _apply_payment(db: AsyncSession, payload: PaymentCreate):
    """
    Add the payment to its fee structure with a single store-side increment.
    Matches no row when the structure is missing. Overpayment leaves a negative
    (credit) balance.
    """
    amount = payload.amount
    result = await db.execute(
        update(FeeStructure)
        .where(*_term_filter(payload.student_id, payload.academic_year, payload.term))
        .values(
            amount_paid=FeeStructure.amount_paid + amount,
            balance=FeeStructure.total_fees - (FeeStructure.amount_paid + amount),
        )
        .returning(*_STRUCTURE_COLUMNS)
        .execution_options(synchronize_session=False)
    )
    return result.first()


async def _raise_unapplied_payment(db: AsyncSession, payload: PaymentCreate) -> None:
    await _ensure_student(db, payload.student_id)
    raise NotFoundError(
        f"Fee structure not found for academic year {payload.academic_year}, term {payload.term}. "
        "Set the student's fee structure before recording payments."
    )


def _is_receipt_collision(e: IntegrityError) -> bool:
    err_msg = str(e.orig) if getattr(e, "orig", None) else str(e)
    return "receipt_number" in err_msg


async def record_payment(
    db: AsyncSession,
    payload: PaymentCreate,
    recorded_by: int,
) -> PaymentRecordedResponse:
    payment_date = payload.payment_date or date.today()
    description = (payload.description or "").strip() or None

    for attempt in range(1, RECEIPT_ATTEMPTS + 1):
        structure_row = await _apply_payment(db, payload)
        if structure_row is None:
            await db.rollback()
            await _raise_unapplied_payment(db, payload)

        payment = FeePayment(
            student_id=payload.student_id,
            amount=payload.amount,
            payment_date=payment_date,
            payment_method=payload.payment_method.value,
            receipt_number=generate_receipt_number(),
            academic_year=payload.academic_year,
            term=payload.term,
            description=description,
            recorded_by=recorded_by,
        )
        db.add(payment)
        try:
            await db.commit()
        except IntegrityError as e:
            # Rolls back the increment together with the failed insert
            await db.rollback()
            if _is_receipt_collision(e) and attempt < RECEIPT_ATTEMPTS:
                logger.warning("Receipt number collision on attempt %s; regenerating", attempt)
                continue
            raise ServiceError("Failed to record payment") from e

        logger.info(
            "Recorded payment %s of %s for student %s (%s %s)",
            payment.receipt_number,
            payment.amount,
            payload.student_id,
            payload.academic_year,
            payload.term,
        )
        detail = await get_payment_by_receipt(db, payment.receipt_number)
        return PaymentRecordedResponse(
            payment=PaymentResponse(**detail.model_dump(exclude={"enrollment_category"})),
            fee_structure=_structure_to_response(structure_row),
        )

    raise ServiceError("Failed to record payment")


def _payment_detail_stmt():
    return (
        select(
            FeePayment,
            Student.full_name,
            Student.student_id,
            Student.enrollment_category,
            User.full_name,
        )
        .join(Student, FeePayment.student_id == Student.id)
        .join(User, FeePayment.recorded_by == User.id)
    )


def _payment_to_response(
    payment: FeePayment,
    student_name: Optional[str],
    student_number: Optional[str],
    enrollment_category: Optional[str],
    recorded_by_name: Optional[str],
) -> ReceiptResponse:
    return ReceiptResponse(
        id=payment.id,
        student_id=payment.student_id,
        amount=_to_decimal(payment.amount),
        payment_date=payment.payment_date,
        payment_method=payment.payment_method,
        receipt_number=payment.receipt_number,
        academic_year=payment.academic_year,
        term=payment.term,
        description=payment.description,
        recorded_by=payment.recorded_by,
        created_at=payment.created_at,
        student_name=student_name,
        student_number=student_number,
        recorded_by_name=recorded_by_name,
        enrollment_category=enrollment_category,
    )


async def list_payments(
    db: AsyncSession,
    student_id: Optional[int] = None,
    academic_year: Optional[str] = None,
    term: Optional[str] = None,
) -> List[PaymentResponse]:
    stmt = _payment_detail_stmt()
    if student_id is not None:
        stmt = stmt.where(FeePayment.student_id == student_id)
    if academic_year:
        stmt = stmt.where(FeePayment.academic_year == academic_year)
    if term:
        stmt = stmt.where(FeePayment.term == term)
    stmt = stmt.order_by(FeePayment.payment_date.desc(), FeePayment.id.desc())
    result = await db.execute(stmt)
    return [
        PaymentResponse(**_payment_to_response(*row).model_dump(exclude={"enrollment_category"}))
        for row in result.all()
    ]


async def get_payment_by_receipt(
    db: AsyncSession, receipt_number: str
) -> Optional[ReceiptResponse]:
    result = await db.execute(
        _payment_detail_stmt().where(FeePayment.receipt_number == receipt_number)
    )
    row = result.first()
    return _payment_to_response(*row) if row else None
