from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.enums import EnrollmentCategory, Gender, StudentStatus, check_values
from app.db.session import Base


class Student(Base):
    """Enrolled student. student_id is the business identifier printed on records; id is the FK target."""

    __tablename__ = "students"
    __table_args__ = (
        CheckConstraint(f"gender IN ({check_values(Gender)})", name="chk_student_gender"),
        CheckConstraint(
            f"enrollment_category IN ({check_values(EnrollmentCategory)})",
            name="chk_student_enrollment_category",
        ),
        CheckConstraint(f"status IN ({check_values(StudentStatus)})", name="chk_student_status"),
        Index("idx_students_enrollment", "enrollment_category"),
        Index("idx_students_status", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(String(50), nullable=False, unique=True)
    full_name = Column(String(255), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(10), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    parent_guardian_name = Column(String(255), nullable=True)
    parent_guardian_phone = Column(String(50), nullable=True)
    parent_guardian_email = Column(String(255), nullable=True)
    enrollment_category = Column(String(20), nullable=True)
    enrollment_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default=StudentStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Rows are removed by ON DELETE CASCADE in the database
    fee_structures = relationship("FeeStructure", back_populates="student", passive_deletes=True)
    fee_payments = relationship("FeePayment", back_populates="student", passive_deletes=True)
