from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.enums import Gender, StaffStatus, check_values
from app.db.session import Base


class Staff(Base):
    __tablename__ = "staff"
    __table_args__ = (
        CheckConstraint(f"gender IN ({check_values(Gender)})", name="chk_staff_gender"),
        CheckConstraint(f"status IN ({check_values(StaffStatus)})", name="chk_staff_status"),
        Index("idx_staff_status", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    staff_id = Column(String(50), nullable=False, unique=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(10), nullable=True)
    qualification = Column(String(255), nullable=True)
    hire_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default=StaffStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    subject_assignments = relationship("StaffSubject", back_populates="staff", passive_deletes=True)
    attendance = relationship("StaffAttendance", back_populates="staff", passive_deletes=True)
