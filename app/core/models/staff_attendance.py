from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.enums import AttendanceStatus, check_values
from app.db.session import Base


class StaffAttendance(Base):
    """Staff attendance: one per staff member per day."""

    __tablename__ = "staff_attendance"
    __table_args__ = (
        UniqueConstraint("staff_id", "attendance_date", name="uq_staff_attendance_day"),
        CheckConstraint(f"status IN ({check_values(AttendanceStatus)})", name="chk_staff_attendance_status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    staff_id = Column(Integer, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False)
    attendance_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False)
    notes = Column(Text, nullable=True)

    staff = relationship("Staff", back_populates="attendance")
