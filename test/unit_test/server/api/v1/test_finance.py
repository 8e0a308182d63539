"""API tests for earnings, royalty statements and withdrawals."""

from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlmodel import select

from streamo.core.database.entities.notifications import Notification
from streamo.core.database.entities.transactions import Transaction
from streamo.core.database.entities.withdrawals import Withdrawal

pytestmark = pytest.mark.asyncio

BANK = {"account_number": "0123456789", "bank_name": "City Bank", "branch": "Gulshan"}


@pytest_asyncio.fixture
async def earning_artist(make_user, add_rows):
    """An artist on a 50% split with 200.00 gross across March and April 2024."""
    user = await make_user(name="Split Artist", email="split@example.com", split=50.0)
    await add_rows(
        Transaction(transaction_id="M-1", user_id=user.id, isrc="USABC2400001", title="Intro",
                    artist="Split Artist", label="Indie", quantity=1000, revenue_usd=80.0,
                    transaction_date=datetime(2024, 3, 3)),
        Transaction(transaction_id="M-2", user_id=user.id, isrc="USABC2400001", title="Intro",
                    artist="Split Artist", label="Indie", quantity=500, revenue_usd=40.0,
                    transaction_date=datetime(2024, 3, 20)),
        Transaction(transaction_id="A-1", user_id=user.id, isrc="USABC2400002", title="Outro",
                    artist="Split Artist", label="Indie", quantity=250, revenue_usd=80.0,
                    transaction_date=datetime(2024, 4, 9)),
    )
    return user


@pytest.fixture
def earning_headers(earning_artist, headers_for):
    return headers_for(earning_artist)


async def request_withdrawal(client: AsyncClient, headers, amount: float) -> dict:
    response = await client.post(
        "/api/v1/withdrawals", json={"amount": amount, "payment_method": "Bank", "bank_details": BANK}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestEarnings:
    async def test_split_applies_to_earnings(self, client: AsyncClient, earning_headers):
        response = await client.get("/api/v1/earnings/user", headers=earning_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["total_earnings"] == 100.0
        assert body["available_balance"] == 100.0
        assert body["pending_payments"] == 0.0
        assert body["last_payout"] is None
        assert [t["transaction_id"] for t in body["recent_transactions"]] == ["A-1", "M-2", "M-1"]

    async def test_withdrawals_reduce_balance(self, client: AsyncClient, earning_artist, earning_headers, add_rows):
        await add_rows(
            Withdrawal(user_id=earning_artist.id, amount=10.0, payment_method="Bank", status="completed"),
            Withdrawal(user_id=earning_artist.id, amount=20.0, payment_method="Bank", status="pending"),
            Withdrawal(user_id=earning_artist.id, amount=5.0, payment_method="Bank", status="rejected"),
        )
        body = (await client.get("/api/v1/earnings/user", headers=earning_headers)).json()
        assert body["available_balance"] == 70.0
        assert body["pending_payments"] == 20.0
        assert body["last_payout"]["amount"] == 10.0


class TestRoyalties:
    async def test_track_breakdown(self, client: AsyncClient, earning_headers):
        response = await client.get("/api/v1/royalties", headers=earning_headers)
        assert response.status_code == 200
        rows = {row["isrc"]: row for row in response.json()}
        assert rows["USABC2400001"]["streams"] == 1500
        assert rows["USABC2400001"]["revenue"] == 120.0
        assert rows["USABC2400001"]["artist_revenue"] == 60.0
        assert rows["USABC2400001"]["label_split"] == 50.0

    async def test_statements_paid_when_covered(self, client: AsyncClient, earning_artist, earning_headers, add_rows):
        await add_rows(Withdrawal(user_id=earning_artist.id, amount=60.0, payment_method="Bank", status="completed"))

        response = await client.get("/api/v1/royalties/statements", headers=earning_headers)
        assert response.status_code == 200
        statements = response.json()
        assert [(s["id"], s["period"], s["amount"], s["status"]) for s in statements] == [
            ("2024-04", "Apr 2024", 40.0, "pending"),
            ("2024-03", "Mar 2024", 60.0, "paid"),
        ]

        summary = (await client.get("/api/v1/royalties/summary", headers=earning_headers)).json()
        assert summary["total_earnings"] == 100.0
        assert summary["last_statement"] == 40.0
        assert len(summary["history"]) == 2

    async def test_statement_download(self, client: AsyncClient, earning_headers):
        response = await client.get("/api/v1/royalties/statements/2024-03/download", headers=earning_headers)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="statement-2024-03.csv"' in response.headers["content-disposition"]
        lines = response.text.strip().splitlines()
        assert lines[0].startswith("transaction_id,transaction_date")
        assert len(lines) == 3

    @pytest.mark.parametrize("statement_id", ["2024-13", "march", "2023-01"])
    async def test_unknown_statement(self, client: AsyncClient, earning_headers, statement_id):
        response = await client.get(f"/api/v1/royalties/statements/{statement_id}/download", headers=earning_headers)
        assert response.status_code == 404


class TestWithdrawals:
    async def test_request_within_balance(self, client: AsyncClient, earning_artist, earning_headers):
        body = await request_withdrawal(client, earning_headers, 40.0)
        assert body["status"] == "pending"
        assert body["bank_details"]["bank_name"] == "City Bank"

        over = await client.post(
            "/api/v1/withdrawals",
            json={"amount": 60.01, "payment_method": "Bank", "bank_details": BANK},
            headers=earning_headers,
        )
        assert over.status_code == 400
        assert over.json()["detail"] == "Insufficient balance. Available: 60.00"

    async def test_payment_target_is_required(self, client: AsyncClient, earning_headers):
        no_bank = await client.post(
            "/api/v1/withdrawals", json={"amount": 5, "payment_method": "Bank"}, headers=earning_headers
        )
        assert no_bank.status_code == 422

        wallet = await client.post(
            "/api/v1/withdrawals",
            json={"amount": 5, "payment_method": "BKash", "mobile_number": "01700000000"},
            headers=earning_headers,
        )
        assert wallet.status_code == 201

    async def test_owner_and_staff_visibility(self, client: AsyncClient, earning_headers, artist_headers, admin_headers):
        withdrawal = await request_withdrawal(client, earning_headers, 10.0)

        mine = await client.get("/api/v1/withdrawals", headers=earning_headers)
        assert [w["id"] for w in mine.json()] == [withdrawal["id"]]

        hidden = await client.get(f"/api/v1/withdrawals/{withdrawal['id']}", headers=artist_headers)
        assert hidden.status_code == 404

        everything = await client.get("/api/v1/withdrawals/all", params={"status": "pending"}, headers=admin_headers)
        assert everything.json()["total"] == 1

        denied = await client.get("/api/v1/withdrawals/all", headers=artist_headers)
        assert denied.status_code == 403

    async def test_processing_lifecycle(
        self, client: AsyncClient, admin, earning_artist, earning_headers, admin_headers, session_factory
    ):
        withdrawal = await request_withdrawal(client, earning_headers, 25.0)
        url = f"/api/v1/withdrawals/{withdrawal['id']}"

        skip = await client.put(url, json={"status": "completed"}, headers=admin_headers)
        assert skip.status_code == 400
        assert skip.json()["detail"] == "Cannot change withdrawal from pending to completed"

        approved = await client.put(url, json={"status": "approved"}, headers=admin_headers)
        assert approved.json()["processed_by"] == admin.id
        assert approved.json()["processed_at"] is not None

        completed = await client.put(url, json={"status": "completed", "notes": "Paid"}, headers=admin_headers)
        assert completed.json()["status"] == "completed"
        assert completed.json()["notes"] == "Paid"

        reopen = await client.put(url, json={"status": "pending"}, headers=admin_headers)
        assert reopen.status_code == 400

        async with session_factory() as session:
            notes = (
                await session.exec(select(Notification).where(Notification.user_id == earning_artist.id))
            ).all()
        assert sorted(n.title for n in notes) == ["Withdrawal approved", "Withdrawal completed"]

    async def test_rejected_amount_returns_to_balance(self, client: AsyncClient, earning_headers, admin_headers):
        withdrawal = await request_withdrawal(client, earning_headers, 100.0)
        before = (await client.get("/api/v1/earnings/user", headers=earning_headers)).json()
        assert before["available_balance"] == 0.0

        await client.put(f"/api/v1/withdrawals/{withdrawal['id']}", json={"status": "rejected"}, headers=admin_headers)
        after = (await client.get("/api/v1/earnings/user", headers=earning_headers)).json()
        assert after["available_balance"] == 100.0

    async def test_staff_delete(self, client: AsyncClient, earning_headers, admin_headers):
        withdrawal = await request_withdrawal(client, earning_headers, 5.0)
        deleted = await client.delete(f"/api/v1/withdrawals/{withdrawal['id']}", headers=admin_headers)
        assert deleted.status_code == 200
        again = await client.delete(f"/api/v1/withdrawals/{withdrawal['id']}", headers=admin_headers)
        assert again.status_code == 404
