from datetime import date
from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dashboard.service import _month_bounds, get_dashboard_stats
from app.auth.models import User
from app.core.enums import EnrollmentCategory, StaffStatus, StudentStatus
from app.core.models import FeePayment, Staff


async def _seed(db: AsyncSession, recorder: User, make_student, make_fee_structure) -> None:
    ama = await make_student(student_id="STU001", enrollment_category=EnrollmentCategory.MAY_JUNE)
    kofi = await make_student(
        student_id="STU002", full_name="Kofi Owusu", enrollment_category=EnrollmentCategory.NOV_DEC
    )
    await make_student(
        student_id="STU003", full_name="Esi Quaye", enrollment_category=EnrollmentCategory.NOV_DEC
    )
    await make_student(student_id="STU004", full_name="Old Boy", status=StudentStatus.GRADUATED)

    await make_fee_structure(ama, total_fees="500.00", amount_paid="200.00")
    await make_fee_structure(kofi, total_fees="300.00", amount_paid="300.00")

    db.add_all(
        [
            Staff(staff_id="STF001", full_name="Efua Asante", email="efua@example.com"),
            Staff(
                staff_id="STF002",
                full_name="Yaw Darko",
                email="yaw@example.com",
                status=StaffStatus.INACTIVE.value,
            ),
            FeePayment(
                student_id=ama.id,
                amount=Decimal("120.00"),
                payment_date=date(2024, 10, 3),
                payment_method="Cash",
                receipt_number="RCT-" + "C" * 26,
                academic_year="2024",
                term="Term1",
                recorded_by=recorder.id,
            ),
            FeePayment(
                student_id=kofi.id,
                amount=Decimal("80.00"),
                payment_date=date(2024, 10, 31),
                payment_method="Cheque",
                receipt_number="RCT-" + "D" * 26,
                academic_year="2024",
                term="Term1",
                recorded_by=recorder.id,
            ),
            FeePayment(
                student_id=kofi.id,
                amount=Decimal("220.00"),
                payment_date=date(2024, 9, 30),
                payment_method="Cash",
                receipt_number="RCT-" + "E" * 26,
                academic_year="2024",
                term="Term1",
                recorded_by=recorder.id,
            ),
        ]
    )
    await db.commit()


def test_month_bounds() -> None:
    assert _month_bounds(date(2024, 10, 17)) == (date(2024, 10, 1), date(2024, 11, 1))
    assert _month_bounds(date(2024, 12, 31)) == (date(2024, 12, 1), date(2025, 1, 1))


@pytest.mark.asyncio
async def test_dashboard_stats(
    db_session: AsyncSession, admin_user: User, make_student, make_fee_structure
) -> None:
    await _seed(db_session, admin_user, make_student, make_fee_structure)

    stats = await get_dashboard_stats(db_session, today=date(2024, 10, 17))
    assert stats.total_students == 3
    assert stats.total_staff == 1
    assert stats.monthly_revenue == Decimal("200")
    assert stats.pending_balances == Decimal("300")

    distribution = {d.enrollment_category: d.count for d in stats.enrollment_distribution}
    assert distribution == {EnrollmentCategory.MAY_JUNE: 1, EnrollmentCategory.NOV_DEC: 2}


@pytest.mark.asyncio
async def test_dashboard_endpoint(client: AsyncClient, accountant_headers) -> None:
    response = await client.get("/api/dashboard/stats", headers=accountant_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total_students"] == 0
    assert Decimal(data["monthly_revenue"]) == Decimal("0")
    assert data["enrollment_distribution"] == []

    anonymous = await client.get("/api/dashboard/stats", headers={})
    assert anonymous.status_code == 401
