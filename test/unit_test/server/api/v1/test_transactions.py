"""API tests for royalty transactions and the reconciliation pass."""

from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlmodel import select

from streamo.core.database.entities.releases import Release
from streamo.core.database.entities.tracks import Track
from streamo.core.database.entities.transactions import Transaction

pytestmark = pytest.mark.asyncio

TRANSACTIONS = "/api/v1/transactions"


def tx(transaction_id: str, **fields) -> Transaction:
    fields.setdefault("transaction_date", datetime(2024, 3, 15))
    return Transaction(transaction_id=transaction_id, **fields)


@pytest_asyncio.fixture
async def ledger(add_rows, artist):
    return await add_rows(
        tx("T-1", artist="Test Artist", title="Night Drive", service_type="Spotify", territory="US",
           isrc="USABC2400002", quantity=1000, revenue_usd=4.0, user_id=artist.id),
        tx("T-2", artist="Test Artist", title="Intro", service_type="Apple Music", territory="DE",
           isrc="USABC2400001", quantity=200, revenue_usd=1.5, user_id=artist.id,
           transaction_date=datetime(2024, 4, 2)),
        tx("T-3", artist="Somebody Else", title="Elsewhere", service_type="Spotify", territory="GB",
           quantity=50, revenue_usd=0.5),
    )


class TestListing:
    async def test_staff_see_everything(self, client: AsyncClient, admin_headers, ledger):
        response = await client.get(TRANSACTIONS, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["total"] == 3
        assert response.json()["items"][0]["transaction_id"] == "T-2"

    async def test_artists_see_only_linked_rows(self, client: AsyncClient, artist_headers, other_headers, ledger):
        own = await client.get(TRANSACTIONS, headers=artist_headers)
        assert {t["transaction_id"] for t in own.json()["items"]} == {"T-1", "T-2"}

        none = await client.get(TRANSACTIONS, headers=other_headers)
        assert none.json()["total"] == 0

        hidden = await client.get(f"{TRANSACTIONS}/{ledger[2].id}", headers=artist_headers)
        assert hidden.status_code == 404

    async def test_filters(self, client: AsyncClient, admin_headers, ledger):
        spotify = await client.get(TRANSACTIONS, params={"service_type": "Spotify"}, headers=admin_headers)
        assert spotify.json()["total"] == 2

        by_artist = await client.get(TRANSACTIONS, params={"artist": "somebody"}, headers=admin_headers)
        assert [t["transaction_id"] for t in by_artist.json()["items"]] == ["T-3"]

        april = await client.get(
            TRANSACTIONS, params={"start_date": "2024-04-01T00:00:00", "end_date": "2024-04-30T23:59:59"},
            headers=admin_headers,
        )
        assert [t["transaction_id"] for t in april.json()["items"]] == ["T-2"]


async def test_summary(client: AsyncClient, admin_headers, artist_headers, ledger):
    response = await client.get(f"{TRANSACTIONS}/summary", headers=admin_headers)
    assert response.status_code == 200
    summary = response.json()
    assert summary["totals"] == {"revenue": 6.0, "quantity": 1250, "count": 3}
    assert summary["top_services"][0]["name"] == "Spotify"
    assert summary["top_services"][0]["revenue"] == 4.5
    assert [(m["year"], m["month"]) for m in summary["monthly"]] == [(2024, 3), (2024, 4)]

    scoped = await client.get(f"{TRANSACTIONS}/summary", headers=artist_headers)
    assert scoped.json()["totals"]["count"] == 2


async def test_staff_update_and_delete(client: AsyncClient, admin_headers, artist_headers, ledger):
    target = ledger[2]
    denied = await client.put(f"{TRANSACTIONS}/{target.id}", json={"title": "x"}, headers=artist_headers)
    assert denied.status_code == 403

    updated = await client.put(
        f"{TRANSACTIONS}/{target.id}", json={"title": "Corrected", "revenue_usd": 0.75}, headers=admin_headers
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Corrected"
    assert updated.json()["revenue_usd"] == 0.75

    deleted = await client.delete(f"{TRANSACTIONS}/{target.id}", headers=admin_headers)
    assert deleted.status_code == 200
    missing = await client.get(f"{TRANSACTIONS}/{target.id}", headers=admin_headers)
    assert missing.status_code == 404


async def test_reconciliation_links_by_normalized_isrc(
    client: AsyncClient, admin_headers, artist, other_artist, add_rows, session_factory
):
    await add_rows(
        Track(user_id=artist.id, title="Night Drive", artist="Test Artist", isrc="us-abc-24-00002"),
        Release(
            user_id=other_artist.id,
            title="Shared",
            artist="Other Artist",
            tracks=[{"title": "Dup", "isrc": "USABC2400002"}, {"title": "Solo", "isrc": "GB XYZ 24 00009"}],
        ),
    )
    await add_rows(
        tx("A", isrc="USABC2400002", revenue_usd=1.0),
        tx("B", isrc="US-ABC-24-00002", revenue_usd=1.0),
        tx("C", isrc="GBXYZ2400009", revenue_usd=1.0),
        tx("D", isrc="UNKNOWN", revenue_usd=1.0),
    )

    response = await client.post("/api/v1/admin/update-transaction-links", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Updated 3 transactions for 2 users"
    by_user = {r["user_id"]: r for r in body["results"]}
    assert by_user[artist.id]["transactions_updated"] == 2
    assert by_user[other_artist.id]["isrc_count"] == 1

    async with session_factory() as session:
        rows = {t.transaction_id: t.user_id for t in (await session.exec(select(Transaction))).all()}
    assert rows == {"A": artist.id, "B": artist.id, "C": other_artist.id, "D": None}


async def test_reconciliation_is_staff_only(client: AsyncClient, artist_headers):
    response = await client.post("/api/v1/admin/update-transaction-links", headers=artist_headers)
    assert response.status_code == 403
