import pytest
from httpx import AsyncClient

URL = "/api/v1/career-paths"


async def _create(client: AsyncClient, staff, employee_id: int, **fields) -> dict:
    payload = {"employee_id": employee_id, "current_position": "Developer", "target_position": "Senior Developer"}
    payload.update(fields)
    response = await client.post(URL, json=payload, headers=staff.headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_and_show(client: AsyncClient, hr, employee) -> None:
    cp = await _create(client, hr, employee.employee_id, next_review="2026-01-15")
    assert cp["employee_name"] == "Alice Martin"
    assert cp["next_review"] == "2026-01-15"

    response = await client.get(f"{URL}/{cp['id']}", headers=employee.headers)
    assert response.status_code == 200
    assert response.json()["data"]["target_position"] == "Senior Developer"


@pytest.mark.asyncio
async def test_one_career_path_per_employee(client: AsyncClient, hr, employee) -> None:
    await _create(client, hr, employee.employee_id)
    response = await client.post(
        URL, json={"employee_id": employee.employee_id, "current_position": "Other"}, headers=hr.headers
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Career path already exists for this employee"


@pytest.mark.asyncio
async def test_create_for_unknown_employee(client: AsyncClient, admin) -> None:
    response = await client.post(URL, json={"employee_id": 999, "current_position": "Dev"}, headers=admin.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_employee_cannot_create_or_update(client: AsyncClient, hr, employee) -> None:
    response = await client.post(
        URL, json={"employee_id": employee.employee_id, "current_position": "CEO"}, headers=employee.headers
    )
    assert response.status_code == 403

    cp = await _create(client, hr, employee.employee_id)
    response = await client.put(f"{URL}/{cp['id']}", json={"current_position": "CEO"}, headers=employee.headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_depends_on_role(client: AsyncClient, hr, employee, other_employee) -> None:
    assert (await client.get(URL, headers=employee.headers)).json()["data"] is None

    mine = await _create(client, hr, employee.employee_id)
    await _create(client, hr, other_employee.employee_id)

    own = (await client.get(URL, headers=employee.headers)).json()["data"]
    assert own["id"] == mine["id"]

    everything = (await client.get(URL, headers=hr.headers)).json()["data"]
    assert len(everything) == 2


@pytest.mark.asyncio
async def test_show_for_employee(client: AsyncClient, hr, employee, other_employee) -> None:
    response = await client.get(f"{URL}/employee/{employee.employee_id}", headers=hr.headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Career path not found for this employee"

    await _create(client, hr, employee.employee_id)
    response = await client.get(f"{URL}/employee/{employee.employee_id}", headers=employee.headers)
    assert response.status_code == 200

    response = await client.get(f"{URL}/employee/{employee.employee_id}", headers=other_employee.headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Unauthorized to view this employee's career path"


@pytest.mark.asyncio
async def test_update_career_path(client: AsyncClient, admin, employee) -> None:
    cp = await _create(client, admin, employee.employee_id)
    response = await client.put(
        f"{URL}/{cp['id']}",
        json={"target_position": None, "achievements": "Shipped payroll v2"},
        headers=admin.headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["target_position"] is None
    assert data["achievements"] == "Shipped payroll v2"
    assert data["current_position"] == "Developer"


@pytest.mark.asyncio
async def test_my_summary_falls_back_to_employee_record(client: AsyncClient, hr, employee) -> None:
    summary = (await client.get(f"{URL}/me", headers=employee.headers)).json()["data"]
    assert summary == {
        "current_position": "Engineer",
        "current_grade": None,
        "hire_date": "2020-01-15",
        "target_position": None,
        "next_review": None,
        "skills_to_develop": None,
        "achievements": None,
        "has_career_path": False,
    }

    await _create(client, hr, employee.employee_id, skills_to_develop="Public speaking")
    summary = (await client.get(f"{URL}/me", headers=employee.headers)).json()["data"]
    assert summary["has_career_path"] is True
    assert summary["current_position"] == "Developer"
    assert summary["skills_to_develop"] == "Public speaking"


@pytest.mark.asyncio
async def test_my_summary_requires_employee_profile(client: AsyncClient, hr) -> None:
    response = await client.get(f"{URL}/me", headers=hr.headers)
    assert response.status_code == 404
