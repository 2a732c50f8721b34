from app.core.models.student import Student
from app.core.models.staff import Staff
from app.core.models.subject import Subject
from app.core.models.staff_subject import StaffSubject
from app.core.models.staff_attendance import StaffAttendance
from app.core.models.fee_structure import FeeStructure
from app.core.models.fee_payment import FeePayment

__all__ = [
    "Student",
    "Staff",
    "Subject",
    "StaffSubject",
    "StaffAttendance",
    "FeeStructure",
    "FeePayment",
]
