from enum import Enum


class AccountType(str, Enum):
    ADMINISTRATOR = "Administrator"
    ACCOUNTANT = "Accountant"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


class EnrollmentCategory(str, Enum):
    MAY_JUNE = "MayJune"
    NOV_DEC = "NovDec"


class StudentStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    GRADUATED = "Graduated"


class StaffStatus(str, Enum):
    ACTIVE = "Active"
    ON_LEAVE = "On Leave"
    INACTIVE = "Inactive"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    ON_LEAVE = "On Leave"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    BANK_TRANSFER = "Bank Transfer"
    MOBILE_MONEY = "Mobile Money"
    CHEQUE = "Cheque"


def check_values(enum_cls) -> str:
    """SQL list of an enum's values, for CHECK constraints."""
    return ", ".join(f"'{member.value}'" for member in enum_cls)
