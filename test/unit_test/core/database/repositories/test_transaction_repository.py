"""Unit tests for the transaction repository: filters, aggregates and bulk writes."""

from __future__ import annotations

from datetime import datetime

import pytest_asyncio
from sqlmodel import select

from streamo.core.database.entities.transactions import Transaction
from streamo.core.database.repositories.transactions import TransactionFilters, TransactionRepository


@pytest_asyncio.fixture
async def repo(in_memory_session, sample_transaction_data):
    repository = TransactionRepository(in_memory_session)
    rows = [
        Transaction(**sample_transaction_data),
        Transaction(**{**sample_transaction_data, "transaction_id": "T-2", "territory": "DE", "revenue_usd": 1.2,
                       "quantity": 300, "transaction_date": datetime(2024, 3, 20)}),
        Transaction(**{**sample_transaction_data, "transaction_id": "T-3", "service_type": "", "isrc": "usabc2400002",
                       "revenue_usd": 2.0, "quantity": 10, "transaction_date": datetime(2024, 5, 2),
                       "csv_upload_id": "upload-1"}),
        Transaction(**{**sample_transaction_data, "transaction_id": "T-4", "isrc": "GBXYZ2400009",
                       "revenue_usd": 0.5, "quantity": 5, "csv_upload_id": "upload-1"}),
    ]
    in_memory_session.add_all(rows)
    await in_memory_session.commit()
    return repository


async def test_totals(repo):
    revenue, quantity, count = await repo.totals(TransactionFilters())
    assert round(revenue, 2) == 8.5
    assert quantity == 1515
    assert count == 4


async def test_date_range_and_territory_filters(repo):
    rows, total = await repo.search(
        TransactionFilters(start_date=datetime(2024, 3, 10), end_date=datetime(2024, 4, 1), territory="DE")
    )
    assert total == 1
    assert rows[0].transaction_id == "T-2"


async def test_revenue_by_labels_empty_values_unknown(repo):
    buckets = await repo.revenue_by("service_type", TransactionFilters())
    assert [name for name, *_ in buckets] == ["Spotify", "Unknown"]
    assert buckets[0][3] == 3


async def test_monthly_is_chronological(repo):
    months = await repo.monthly(TransactionFilters())
    assert [(year, month) for year, month, *_ in months] == [(2024, 3), (2024, 5)]
    assert months[0][4] == 3


async def test_link_isrcs_matches_normalized_codes(repo, in_memory_session, owner):
    updated = await repo.link_isrcs(owner.id, {"USABC2400002"})
    await in_memory_session.commit()
    assert updated == 3

    linked = (await in_memory_session.exec(select(Transaction).where(Transaction.user_id == owner.id))).all()
    assert sorted(t.transaction_id for t in linked) == ["T-2", "T-3", "TRANS-upload-1"]
    assert await repo.link_isrcs(owner.id, set()) == 0


async def test_delete_for_upload(repo, in_memory_session):
    removed = await repo.delete_for_upload("upload-1")
    await in_memory_session.commit()
    assert removed == 2
    assert (await repo.totals(TransactionFilters()))[2] == 2


async def test_list_for_user_month(repo, in_memory_session, owner):
    await repo.link_isrcs(owner.id, {"USABC2400002"})
    await in_memory_session.commit()
    rows = await repo.list_for_user_month(owner.id, 2024, 3)
    assert [t.transaction_id for t in rows] == ["TRANS-upload-1", "T-2"]


async def test_link_isrcs_ignores_tabs_and_line_breaks(repo, in_memory_session, owner, sample_transaction_data):
    in_memory_session.add(
        Transaction(**{**sample_transaction_data, "transaction_id": "T-5", "isrc": "US-ABC\t24 000\n02\r"})
    )
    await in_memory_session.commit()

    assert await repo.link_isrcs(owner.id, {"USABC2400002"}) == 4
