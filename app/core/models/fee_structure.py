"""Fee structure: expected total, amount paid and balance for one student in one academic term."""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.session import Base


class FeeStructure(Base):
    """
    One row per (student, academic_year, term).
    balance is always total_fees - amount_paid; amount_paid only moves through
    the atomic increment applied when a payment is recorded.
    """

    __tablename__ = "fee_structures"
    __table_args__ = (
        UniqueConstraint("student_id", "academic_year", "term", name="uq_fee_structure_student_term"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    academic_year = Column(String(20), nullable=False)
    term = Column(String(20), nullable=False)
    total_fees = Column(Numeric(10, 2), nullable=False)
    amount_paid = Column(Numeric(10, 2), nullable=False, default=0)
    balance = Column(Numeric(10, 2), nullable=False)

    student = relationship("Student", back_populates="fee_structures")
