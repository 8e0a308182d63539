"""
Royalty transaction entity models.

One row per line of an imported royalty report. ``user_id`` stays empty until
the reconciliation pass links the row to a catalogue owner by ISRC.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class TransactionBase(Base):
    """Base fields for transaction entity."""

    title: Optional[str] = Field(default=None, max_length=512)
    artist: Optional[str] = Field(default=None, max_length=512)
    isrc: Optional[str] = Field(default=None, max_length=32, index=True)
    upc: Optional[str] = Field(default=None, max_length=32)
    label: Optional[str] = Field(default=None, max_length=255)
    service_type: Optional[str] = Field(default=None, max_length=128, index=True)
    territory: Optional[str] = Field(default=None, max_length=64, index=True)
    transaction_type: str = Field(default="stream", max_length=64)
    quantity: int = Field(default=0)
    revenue: float = Field(default=0.0)
    currency: str = Field(default="USD", max_length=8)
    revenue_usd: float = Field(default=0.0)
    transaction_date: datetime = Field(default_factory=utc_now, index=True)
    notes: Optional[str] = Field(default=None)


class Transaction(TransactionBase, table=True):
    """Entity for royalty transactions.

    Table: st_transactions
    """

    __tablename__ = "st_transactions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    csv_upload_id: Optional[str] = Field(default=None, max_length=32, index=True)
    row_number: int = Field(default=0)
    transaction_id: str = Field(max_length=128, index=True)
    raw_data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    user_id: Optional[str] = Field(default=None, max_length=32, index=True)

    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"Transaction(id={self.id}, isrc={self.isrc}, revenue_usd={self.revenue_usd})"
