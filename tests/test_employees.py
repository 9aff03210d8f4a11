from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from hr_portal.auth.models import User
from hr_portal.core.enums import Role
from hr_portal.core.models import Employee, LeaveRequest

URL = "/api/v1/employees"


@pytest.mark.asyncio
async def test_create_employee_with_defaults(client: AsyncClient, hr) -> None:
    response = await client.post(URL, json={"email": "new.hire@example.com", "password": "Welcome123"}, headers=hr.headers)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Employee created successfully"
    data = body["data"]
    assert data["name"] == "New Employee"
    assert data["position"] == "Unspecified"
    assert data["department"] == "General"
    assert data["role"] == "employee"
    assert data["status"] == "active"
    assert data["leave_balance"] == 30
    assert data["hire_date"] == date.today().isoformat()
    assert data["employee_code"].startswith("EMP-")
    assert len(data["employee_code"]) == 12


@pytest.mark.asyncio
async def test_created_employee_can_log_in(client: AsyncClient, admin) -> None:
    await client.post(
        URL,
        json={"email": "carla@example.com", "password": "Welcome123", "name": "Carla", "leave_balance": 12},
        headers=admin.headers,
    )
    response = await client.post("/api/v1/auth/login", json={"email": "carla@example.com", "password": "Welcome123"})
    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["name"] == "Carla"
    assert user["employee_id"] is not None


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(client: AsyncClient, hr, employee) -> None:
    response = await client.post(URL, json={"email": employee.email, "password": "Welcome123"}, headers=hr.headers)
    assert response.status_code == 409
    assert response.json()["message"] == "The email has already been taken."


@pytest.mark.asyncio
async def test_only_admin_creates_staff_accounts(client: AsyncClient, hr, admin) -> None:
    payload = {"email": "new.rh@example.com", "password": "Welcome123", "role": "rh"}
    response = await client.post(URL, json=payload, headers=hr.headers)
    assert response.status_code == 403

    response = await client.post(URL, json=payload, headers=admin.headers)
    assert response.status_code == 201
    assert response.json()["data"]["role"] == "rh"


@pytest.mark.asyncio
async def test_employees_cannot_manage_employees(client: AsyncClient, employee) -> None:
    response = await client.get(URL, headers=employee.headers)
    assert response.status_code == 403
    assert response.json() == {"status": "error", "message": "Insufficient permissions"}


@pytest.mark.asyncio
async def test_list_filters_by_role(client: AsyncClient, make_account, hr) -> None:
    await make_account(Role.EMPLOYEE, name="Eve")
    await make_account(Role.RH, name="Rita")

    everyone = (await client.get(URL, headers=hr.headers)).json()["data"]
    assert {e["name"] for e in everyone} == {"Eve", "Rita"}

    staff = (await client.get(URL, params={"role": "rh"}, headers=hr.headers)).json()["data"]
    assert [e["name"] for e in staff] == ["Rita"]


@pytest.mark.asyncio
async def test_update_employee_and_user_fields(client: AsyncClient, hr, employee) -> None:
    response = await client.put(
        f"{URL}/{employee.employee_id}",
        json={"position": "Lead", "leave_balance": 25, "status": "inactive", "name": "Alice M.", "grade": "B2"},
        headers=hr.headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["position"] == "Lead"
    assert data["leave_balance"] == 25
    assert data["status"] == "inactive"
    assert data["name"] == "Alice M."
    assert data["grade"] == "B2"


@pytest.mark.asyncio
async def test_update_rejects_negative_balance_and_taken_code(
    client: AsyncClient, hr, employee, other_employee
) -> None:
    response = await client.put(f"{URL}/{employee.employee_id}", json={"leave_balance": -1}, headers=hr.headers)
    assert response.status_code == 422

    other = (await client.get(f"{URL}/{other_employee.employee_id}", headers=hr.headers)).json()["data"]
    response = await client.put(
        f"{URL}/{employee.employee_id}", json={"employee_code": other["employee_code"]}, headers=hr.headers
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_unknown_employee_is_not_found(client: AsyncClient, hr) -> None:
    response = await client.get(f"{URL}/999", headers=hr.headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Employee not found"


@pytest.mark.asyncio
async def test_delete_cascades_to_requests_and_account(client: AsyncClient, admin, employee, fetch) -> None:
    start = date.today() + timedelta(days=30)
    leave = (
        await client.post(
            "/api/v1/leave-requests",
            json={"type": "annual", "start_date": start.isoformat(), "end_date": start.isoformat(), "reason": "r"},
            headers=employee.headers,
        )
    ).json()["data"]

    response = await client.delete(f"{URL}/{employee.employee_id}", headers=admin.headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Employee deleted successfully"

    assert await fetch(Employee, employee.employee_id) is None
    assert await fetch(User, employee.user_id) is None
    assert await fetch(LeaveRequest, leave["id"]) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("target_role", [Role.ADMIN, Role.RH])
async def test_hr_cannot_update_or_delete_staff_accounts(
    client: AsyncClient, make_account, hr, target_role, fetch
) -> None:
    target = await make_account(target_role, name="Staff Member")

    response = await client.put(f"{URL}/{target.employee_id}", json={"position": "Intern"}, headers=hr.headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Only administrators can update admin or HR accounts"

    response = await client.delete(f"{URL}/{target.employee_id}", headers=hr.headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Only administrators can delete admin or HR accounts"

    assert await fetch(User, target.user_id) is not None
    assert (await fetch(Employee, target.employee_id)).position == "Engineer"


@pytest.mark.asyncio
async def test_admin_manages_staff_accounts(client: AsyncClient, make_account, admin, fetch) -> None:
    target = await make_account(Role.RH, name="Rita")

    response = await client.put(f"{URL}/{target.employee_id}", json={"department": "People"}, headers=admin.headers)
    assert response.status_code == 200
    assert response.json()["data"]["department"] == "People"

    response = await client.delete(f"{URL}/{target.employee_id}", headers=admin.headers)
    assert response.status_code == 200
    assert await fetch(User, target.user_id) is None
