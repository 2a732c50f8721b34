"""Fees schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.core.enums import EnrollmentCategory, PaymentMethod


class _TermScoped(BaseModel):
    academic_year: str = Field(..., min_length=1, max_length=20, description="e.g. 2024 or 2024/2025")
    term: str = Field(..., min_length=1, max_length=20, description="e.g. Term1")

    @field_validator("academic_year", "term")
    @classmethod
    def strip_period(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


# --- Fee Structure ---
class FeeStructureUpsert(_TermScoped):
    student_id: int
    total_fees: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class FeeStructureResponse(BaseModel):
    id: int
    student_id: int
    academic_year: str
    term: str
    total_fees: Decimal
    amount_paid: Decimal
    balance: Decimal

    class Config:
        from_attributes = True


class FeeBalanceResponse(BaseModel):
    """Balance lookup; zeros when no structure has been set for the term."""

    student_id: int
    academic_year: str
    term: str
    total_fees: Decimal = Decimal("0")
    amount_paid: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    has_structure: bool = False


# --- Payment ---
class PaymentCreate(_TermScoped):
    student_id: int
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    payment_date: Optional[date] = None
    payment_method: PaymentMethod
    description: Optional[str] = None


class PaymentResponse(BaseModel):
    id: int
    student_id: int
    amount: Decimal
    payment_date: date
    payment_method: PaymentMethod
    receipt_number: str
    academic_year: str
    term: str
    description: Optional[str] = None
    recorded_by: int
    created_at: datetime
    student_name: Optional[str] = None
    student_number: Optional[str] = None
    recorded_by_name: Optional[str] = None


class PaymentRecordedResponse(BaseModel):
    message: str = "Payment recorded successfully"
    payment: PaymentResponse
    fee_structure: FeeStructureResponse


class ReceiptResponse(PaymentResponse):
    enrollment_category: Optional[EnrollmentCategory] = None
