"""Staff–subject assignment. Defines which subjects a staff member teaches."""

from datetime import date

from sqlalchemy import Column, Date, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.session import Base


class StaffSubject(Base):
    __tablename__ = "staff_subjects"
    __table_args__ = (
        UniqueConstraint("staff_id", "subject_id", name="uq_staff_subject"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    staff_id = Column(Integer, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    assigned_date = Column(Date, default=date.today, nullable=False)

    staff = relationship("Staff", back_populates="subject_assignments")
    subject = relationship("Subject")
