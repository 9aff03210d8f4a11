from pathlib import Path

import pytest
from httpx import AsyncClient

from hr_portal.core.models import Complaint

URL = "/api/v1/complaints"


async def _file_complaint(client: AsyncClient, account, subject: str = "X", **kwargs) -> dict:
    response = await client.post(
        URL, data={"subject": subject, "description": "Broken chair in room 4"}, headers=account.headers, **kwargs
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_resolve_directly_from_pending(client: AsyncClient, employee, admin, fetch) -> None:
    complaint = await _file_complaint(client, employee)
    assert complaint["status"] == "pending"
    assert complaint["employee_name"] == "Alice Martin"

    response = await client.post(
        f"{URL}/{complaint['id']}/status",
        json={"status": "resolved", "resolution_details": "fixed"},
        headers=admin.headers,
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Complaint status updated successfully"
    data = response.json()["data"]
    assert data["status"] == "resolved"
    assert data["resolution_details"] == "fixed"
    assert data["handled_by"] == admin.user_id
    assert data["handler_name"] == "Ada Admin"
    assert data["resolved_at"] is not None

    stored = await fetch(Complaint, complaint["id"])
    assert stored.handled_by == admin.user_id
    assert stored.resolved_at is not None


@pytest.mark.asyncio
async def test_review_then_reject(client: AsyncClient, employee, hr) -> None:
    complaint = await _file_complaint(client, employee)
    status_url = f"{URL}/{complaint['id']}/status"

    response = await client.post(status_url, json={"status": "in_review"}, headers=hr.headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "in_review"
    assert data["handled_by"] is None
    assert data["resolved_at"] is None

    response = await client.post(status_url, json={"status": "in_review"}, headers=hr.headers)
    assert response.status_code == 400

    response = await client.post(status_url, json={"status": "rejected"}, headers=hr.headers)
    assert response.status_code == 422
    assert "resolution_details" in response.json()["errors"]

    response = await client.post(
        status_url, json={"status": "rejected", "resolution_details": "Not an HR matter"}, headers=hr.headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["handled_by"] == hr.user_id

    response = await client.post(
        status_url, json={"status": "resolved", "resolution_details": "late"}, headers=hr.headers
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Can only update pending or in-review complaints"


@pytest.mark.asyncio
async def test_in_review_complaint_is_no_longer_editable(client: AsyncClient, employee, hr) -> None:
    complaint = await _file_complaint(client, employee)
    await client.post(f"{URL}/{complaint['id']}/status", json={"status": "in_review"}, headers=hr.headers)

    response = await client.put(f"{URL}/{complaint['id']}", data={"subject": "Y"}, headers=employee.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Can only update pending complaints"

    response = await client.delete(f"{URL}/{complaint['id']}", headers=employee.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Can only delete pending complaints"


@pytest.mark.asyncio
async def test_edit_and_replace_attachment(client: AsyncClient, employee, storage) -> None:
    complaint = await _file_complaint(
        client, employee, files={"attachment": ("photo.jpg", b"jpeg-bytes", "image/jpeg")}
    )
    old_file = Path(storage.root) / complaint["attachment_url"][len(storage.url_prefix):]
    assert complaint["attachment_url"].startswith("/storage/complaint-attachments/")
    assert old_file.exists()

    response = await client.put(
        f"{URL}/{complaint['id']}",
        data={"subject": "Broken chair"},
        files={"attachment": ("report.pdf", b"%PDF", "application/pdf")},
        headers=employee.headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["subject"] == "Broken chair"
    assert data["description"] == "Broken chair in room 4"
    assert data["attachment_url"].endswith(".pdf")
    assert not old_file.exists()


@pytest.mark.asyncio
async def test_subject_longer_than_255_is_rejected(client: AsyncClient, employee) -> None:
    response = await client.post(
        URL, data={"subject": "a" * 256, "description": "d"}, headers=employee.headers
    )
    assert response.status_code == 422
    assert "subject" in response.json()["errors"]


@pytest.mark.asyncio
async def test_list_and_show_are_scoped(client: AsyncClient, employee, other_employee, hr) -> None:
    mine = await _file_complaint(client, employee, subject="Mine")
    theirs = await _file_complaint(client, other_employee, subject="Theirs")
    await client.post(f"{URL}/{theirs['id']}/status", json={"status": "in_review"}, headers=hr.headers)

    own = (await client.get(URL, headers=employee.headers)).json()["data"]
    assert [c["subject"] for c in own] == ["Mine"]

    in_review = (await client.get(URL, params={"status": "in_review"}, headers=hr.headers)).json()["data"]
    assert [c["id"] for c in in_review] == [theirs["id"]]

    response = await client.get(f"{URL}/{theirs['id']}", headers=employee.headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Unauthorized to view this complaint"

    response = await client.get(f"{URL}/{mine['id']}", headers=hr.headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_delete_pending_complaint(client: AsyncClient, employee, other_employee, fetch) -> None:
    complaint = await _file_complaint(client, employee)

    response = await client.delete(f"{URL}/{complaint['id']}", headers=other_employee.headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Unauthorized to delete this complaint"

    response = await client.delete(f"{URL}/{complaint['id']}", headers=employee.headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Complaint deleted successfully"
    assert await fetch(Complaint, complaint["id"]) is None


@pytest.mark.asyncio
async def test_unknown_complaint_is_not_found(client: AsyncClient, hr) -> None:
    response = await client.post(
        f"{URL}/999/status", json={"status": "resolved", "resolution_details": "n/a"}, headers=hr.headers
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Complaint not found"


@pytest.mark.asyncio
async def test_blank_subject_and_description_are_rejected(client: AsyncClient, employee, fetch) -> None:
    response = await client.post(URL, data={"subject": "   ", "description": "  "}, headers=employee.headers)
    assert response.status_code == 422
    errors = response.json()["errors"]
    assert "subject" in errors
    assert "description" in errors
    assert await fetch(Complaint, 1) is None


@pytest.mark.asyncio
async def test_edit_with_blank_subject_is_rejected(client: AsyncClient, employee, fetch) -> None:
    complaint = await _file_complaint(client, employee, subject="Noise")
    response = await client.put(f"{URL}/{complaint['id']}", data={"subject": " "}, headers=employee.headers)
    assert response.status_code == 422
    assert "subject" in response.json()["errors"]
    assert (await fetch(Complaint, complaint["id"])).subject == "Noise"
