"""API tests for royalty report uploads."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlmodel import select

from streamo.core.database.entities.csv_uploads import CsvUpload
from streamo.core.database.entities.transactions import Transaction

pytestmark = pytest.mark.asyncio

CSV_API = "/api/v1/csv"
REPORT = (
    "Title,Artist,ISRC,Service,Country,Quantity,Amount Due in USD,Transaction Month\n"
    "Night Drive,Test Artist,US-ABC-24-00002,Spotify,US,1200,4.80,2024-03\n"
    "Intro,Test Artist,US-ABC-24-00001,Apple Music,DE,300,1.10,2024-03\n"
)


@pytest.fixture
def import_task(monkeypatch) -> AsyncMock:
    task = AsyncMock()
    monkeypatch.setattr("streamo.server.api.v1.csv.process_csv_file", task)
    return task


async def test_upload_stores_file_and_schedules_import(client: AsyncClient, admin, admin_headers, import_task):
    response = await client.post(
        f"{CSV_API}/upload", files={"file": ("march.csv", REPORT.encode(), "text/csv")}, headers=admin_headers
    )
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["original_file_name"] == "march.csv"
    assert body["uploaded_by"] == admin.id
    assert body["file_size"] == len(REPORT.encode())

    import_task.assert_awaited_once()
    assert import_task.await_args.args[0] == body["id"]


async def test_upload_rejects_non_csv(client: AsyncClient, admin_headers, import_task):
    response = await client.post(
        f"{CSV_API}/upload", files={"file": ("report.pdf", b"%PDF", "application/pdf")}, headers=admin_headers
    )
    assert response.status_code == 400
    import_task.assert_not_awaited()


async def test_upload_is_staff_only(client: AsyncClient, artist_headers, import_task):
    response = await client.post(
        f"{CSV_API}/upload", files={"file": ("march.csv", REPORT.encode(), "text/csv")}, headers=artist_headers
    )
    assert response.status_code == 403


async def test_list_status_and_preview(client: AsyncClient, admin, admin_headers, import_task):
    uploaded = await client.post(
        f"{CSV_API}/upload", files={"file": ("march.csv", REPORT.encode(), "text/csv")}, headers=admin_headers
    )
    upload_id = uploaded.json()["id"]

    listing = await client.get(CSV_API, headers=admin_headers)
    assert listing.json()["total"] == 1
    assert listing.json()["items"][0]["uploader"]["email"] == admin.email

    status_response = await client.get(f"{CSV_API}/{upload_id}/status", headers=admin_headers)
    assert status_response.json()["progress"] == 0

    preview = await client.get(f"{CSV_API}/{upload_id}/content", params={"limit": 1}, headers=admin_headers)
    assert preview.status_code == 200
    content = preview.json()
    assert content["headers"][:3] == ["Title", "Artist", "ISRC"]
    assert len(content["rows"]) == 1
    assert content["rows"][0]["ISRC"] == "US-ABC-24-00002"


async def test_delete_removes_file_and_transactions(client: AsyncClient, admin, admin_headers, add_rows, tmp_path, session_factory):
    report = tmp_path / "report.csv"
    report.write_text(REPORT)
    (upload,) = await add_rows(
        CsvUpload(
            file_name="report.csv",
            original_file_name="report.csv",
            file_path=str(report),
            file_size=len(REPORT),
            mime_type="text/csv",
            status="completed",
            uploaded_by=admin.id,
        )
    )
    await add_rows(
        Transaction(csv_upload_id=upload.id, transaction_id="T-1", revenue_usd=1.0),
        Transaction(csv_upload_id=upload.id, transaction_id="T-2", revenue_usd=2.0),
        Transaction(csv_upload_id=None, transaction_id="manual", revenue_usd=3.0),
    )

    response = await client.delete(f"{CSV_API}/{upload.id}", headers=admin_headers)
    assert response.status_code == 200
    assert not Path(report).exists()

    async with session_factory() as session:
        assert await session.get(CsvUpload, upload.id) is None
        remaining = (await session.exec(select(Transaction))).all()
    assert [row.transaction_id for row in remaining] == ["manual"]


async def test_unknown_upload_is_404(client: AsyncClient, admin_headers):
    response = await client.get(f"{CSV_API}/missing/status", headers=admin_headers)
    assert response.status_code == 404
