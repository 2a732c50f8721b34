from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import StaffStatus, StudentStatus
from app.core.models import FeePayment, FeeStructure, Staff, Student

from .schemas import DashboardStats, EnrollmentCount


def _month_bounds(today: date) -> Tuple[date, date]:
    """First day of today's month and first day of the following month."""
    start = today.replace(day=1)
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


def _to_decimal(val) -> Decimal:
    if val is None:
        return Decimal("0")
    return val if isinstance(val, Decimal) else Decimal(str(val))


async def get_dashboard_stats(db: AsyncSession, today: Optional[date] = None) -> DashboardStats:
    total_students = (
        await db.execute(
            select(func.count(Student.id)).where(Student.status == StudentStatus.ACTIVE.value)
        )
    ).scalar() or 0

    total_staff = (
        await db.execute(
            select(func.count(Staff.id)).where(Staff.status == StaffStatus.ACTIVE.value)
        )
    ).scalar() or 0

    month_start, next_month_start = _month_bounds(today or date.today())
    monthly_revenue = (
        await db.execute(
            select(func.coalesce(func.sum(FeePayment.amount), 0)).where(
                FeePayment.payment_date >= month_start,
                FeePayment.payment_date < next_month_start,
            )
        )
    ).scalar()

    pending_balances = (
        await db.execute(
            select(func.coalesce(func.sum(FeeStructure.balance), 0)).where(FeeStructure.balance > 0)
        )
    ).scalar()

    distribution = await db.execute(
        select(Student.enrollment_category, func.count(Student.id))
        .where(Student.status == StudentStatus.ACTIVE.value)
        .group_by(Student.enrollment_category)
        .order_by(Student.enrollment_category)
    )

    return DashboardStats(
        total_students=total_students,
        total_staff=total_staff,
        monthly_revenue=_to_decimal(monthly_revenue),
        pending_balances=_to_decimal(pending_balances),
        enrollment_distribution=[
            EnrollmentCount(enrollment_category=category, count=count)
            for category, count in distribution.all()
        ],
    )
