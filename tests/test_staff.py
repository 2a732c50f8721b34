import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.subjects.service import DEFAULT_SUBJECTS, seed_default_subjects
from app.core.models import Staff, StaffAttendance, StaffSubject, Subject


STAFF_PAYLOAD = {
    "staff_id": "STF001",
    "full_name": "Efua Asante",
    "email": "efua@example.com",
    "qualification": "BSc Mathematics",
    "hire_date": "2023-01-09",
}


async def _create_staff(client: AsyncClient, headers, **overrides) -> dict:
    response = await client.post("/api/staff", json={**STAFF_PAYLOAD, **overrides}, headers=headers)
    assert response.status_code == 201
    return response.json()


async def _create_subject(client: AsyncClient, headers, code: str = "MATH101", name: str = "Mathematics") -> dict:
    response = await client.post(
        "/api/subjects",
        json={"subject_name": name, "subject_code": code},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_and_get_staff(client: AsyncClient, admin_headers) -> None:
    staff = await _create_staff(client, admin_headers)
    assert staff["status"] == "Active"

    response = await client.get(f"/api/staff/{staff['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["email"] == "efua@example.com"
    assert response.json()["subjects"] == []


@pytest.mark.asyncio
async def test_duplicate_staff_keys(client: AsyncClient, db_session: AsyncSession, admin_headers) -> None:
    await _create_staff(client, admin_headers)

    same_email = await client.post(
        "/api/staff",
        json={**STAFF_PAYLOAD, "staff_id": "STF002"},
        headers=admin_headers,
    )
    assert same_email.status_code == 400
    assert same_email.json()["detail"] == "Staff email 'efua@example.com' already exists"

    same_id = await client.post(
        "/api/staff",
        json={**STAFF_PAYLOAD, "email": "other@example.com"},
        headers=admin_headers,
    )
    assert same_id.status_code == 400
    assert same_id.json()["detail"] == "Staff ID 'STF001' already exists"

    count = (await db_session.execute(select(func.count(Staff.id)))).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_accountant_cannot_manage_staff(client: AsyncClient, accountant_headers) -> None:
    response = await client.post("/api/staff", json=STAFF_PAYLOAD, headers=accountant_headers)
    assert response.status_code == 403

    listed = await client.get("/api/staff", headers=accountant_headers)
    assert listed.status_code == 200
    assert listed.json() == []


@pytest.mark.asyncio
async def test_update_and_delete_staff(client: AsyncClient, db_session: AsyncSession, admin_headers) -> None:
    staff = await _create_staff(client, admin_headers)

    updated = await client.put(
        f"/api/staff/{staff['id']}",
        json={**STAFF_PAYLOAD, "status": "On Leave"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["status"] == "On Leave"

    on_leave = await client.get("/api/staff", params={"status": "On Leave"}, headers=admin_headers)
    assert [s["staff_id"] for s in on_leave.json()] == ["STF001"]

    subject = await _create_subject(client, admin_headers)
    await client.post(
        f"/api/staff/{staff['id']}/subjects",
        json={"subject_id": subject["id"]},
        headers=admin_headers,
    )

    deleted = await client.delete(f"/api/staff/{staff['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assignments = (await db_session.execute(select(func.count(StaffSubject.id)))).scalar_one()
    assert assignments == 0

    missing = await client.get(f"/api/staff/{staff['id']}", headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_subject_assignment(client: AsyncClient, admin_headers) -> None:
    staff = await _create_staff(client, admin_headers)
    subject = await _create_subject(client, admin_headers)
    url = f"/api/staff/{staff['id']}/subjects"

    assigned = await client.post(url, json={"subject_id": subject["id"]}, headers=admin_headers)
    assert assigned.status_code == 201
    assert assigned.json()["subject_code"] == "MATH101"

    duplicate = await client.post(url, json={"subject_id": subject["id"]}, headers=admin_headers)
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Subject already assigned to this staff member"

    detail = await client.get(f"/api/staff/{staff['id']}", headers=admin_headers)
    assert [s["subject_code"] for s in detail.json()["subjects"]] == ["MATH101"]

    unknown = await client.post(url, json={"subject_id": 9999}, headers=admin_headers)
    assert unknown.status_code == 404
    assert unknown.json()["detail"] == "Subject not found"

    removed = await client.delete(f"{url}/{subject['id']}", headers=admin_headers)
    assert removed.status_code == 200

    removed_again = await client.delete(f"{url}/{subject['id']}", headers=admin_headers)
    assert removed_again.status_code == 404
    assert removed_again.json()["detail"] == "Assignment not found"


@pytest.mark.asyncio
async def test_subjects(client: AsyncClient, admin_headers, accountant_headers) -> None:
    await _create_subject(client, admin_headers, code="sci101", name="Science")
    await _create_subject(client, admin_headers, code="ENG101", name="English Language")

    listed = await client.get("/api/subjects", headers=accountant_headers)
    assert [s["subject_name"] for s in listed.json()] == ["English Language", "Science"]
    assert listed.json()[1]["subject_code"] == "SCI101"

    duplicate = await client.post(
        "/api/subjects",
        json={"subject_name": "Science Again", "subject_code": "SCI101"},
        headers=admin_headers,
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Subject code 'SCI101' already exists"

    forbidden = await client.post(
        "/api/subjects",
        json={"subject_name": "ICT", "subject_code": "ICT101"},
        headers=accountant_headers,
    )
    assert forbidden.status_code == 403


@pytest.mark.asyncio
async def test_seed_default_subjects_is_idempotent(db_session: AsyncSession) -> None:
    assert await seed_default_subjects(db_session) == len(DEFAULT_SUBJECTS)
    assert await seed_default_subjects(db_session) == 0
    count = (await db_session.execute(select(func.count(Subject.id)))).scalar_one()
    assert count == len(DEFAULT_SUBJECTS)


@pytest.mark.asyncio
async def test_attendance_recorded_once_per_day(
    client: AsyncClient, db_session: AsyncSession, admin_headers, accountant_headers
) -> None:
    staff = await _create_staff(client, admin_headers)
    mark = {"staff_id": staff["id"], "attendance_date": "2024-10-07", "status": "Present"}

    first = await client.post("/api/staff/attendance", json=mark, headers=admin_headers)
    assert first.status_code == 201
    assert first.json()["staff_name"] == "Efua Asante"

    second = await client.post(
        "/api/staff/attendance",
        json={**mark, "status": "Late", "notes": "Arrived 9:15"},
        headers=admin_headers,
    )
    assert second.status_code == 201
    assert second.json()["id"] == first.json()["id"]

    rows = (await db_session.execute(select(func.count(StaffAttendance.id)))).scalar_one()
    assert rows == 1

    listed = await client.get(
        "/api/staff/attendance",
        params={"attendance_date": "2024-10-07"},
        headers=accountant_headers,
    )
    assert listed.status_code == 200
    records = listed.json()
    assert len(records) == 1
    assert records[0]["status"] == "Late"
    assert records[0]["notes"] == "Arrived 9:15"

    other_day = await client.get(
        "/api/staff/attendance",
        params={"attendance_date": "2024-10-08"},
        headers=admin_headers,
    )
    assert other_day.json() == []


@pytest.mark.asyncio
async def test_attendance_validation(client: AsyncClient, admin_headers, accountant_headers) -> None:
    staff = await _create_staff(client, admin_headers)
    mark = {"staff_id": staff["id"], "attendance_date": "2024-10-07", "status": "Present"}

    forbidden = await client.post("/api/staff/attendance", json=mark, headers=accountant_headers)
    assert forbidden.status_code == 403

    bad_status = await client.post(
        "/api/staff/attendance",
        json={**mark, "status": "Sick"},
        headers=admin_headers,
    )
    assert bad_status.status_code == 422

    unknown_staff = await client.post(
        "/api/staff/attendance",
        json={**mark, "staff_id": 9999},
        headers=admin_headers,
    )
    assert unknown_staff.status_code == 404
