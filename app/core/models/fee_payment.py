"""Fee payment: immutable record of one payment event, identified by its receipt number."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.core.enums import PaymentMethod, check_values
from app.db.session import Base


class FeePayment(Base):
    __tablename__ = "fee_payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="chk_fee_payment_amount_positive"),
        CheckConstraint(
            f"payment_method IN ({check_values(PaymentMethod)})",
            name="chk_fee_payment_method",
        ),
        Index("idx_fee_payments_student", "student_id"),
        Index("idx_fee_payments_payment_date", "payment_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    payment_method = Column(String(50), nullable=False)
    receipt_number = Column(String(100), nullable=False, unique=True)
    academic_year = Column(String(20), nullable=False)
    term = Column(String(20), nullable=False)
    description = Column(Text, nullable=True)
    recorded_by = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    student = relationship("Student", back_populates="fee_payments")
    recorder = relationship("User", back_populates="recorded_payments")
