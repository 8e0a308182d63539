"""
Royalty transaction I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TransactionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    csv_upload_id: Optional[str] = None
    row_number: int
    transaction_id: str
    title: Optional[str] = None
    artist: Optional[str] = None
    isrc: Optional[str] = None
    upc: Optional[str] = None
    label: Optional[str] = None
    service_type: Optional[str] = None
    territory: Optional[str] = None
    transaction_type: str
    quantity: int
    revenue: float
    currency: str
    revenue_usd: float
    transaction_date: datetime
    notes: Optional[str] = None
    user_id: Optional[str] = None
    created_at: datetime


class TransactionUpdate(BaseModel):
    """Staff correction of a transaction's metadata."""

    title: Optional[str] = None
    artist: Optional[str] = None
    isrc: Optional[str] = None
    upc: Optional[str] = None
    label: Optional[str] = None
    service_type: Optional[str] = None
    territory: Optional[str] = None
    transaction_type: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    revenue: Optional[float] = None
    currency: Optional[str] = None
    revenue_usd: Optional[float] = None
    transaction_date: Optional[datetime] = None
    notes: Optional[str] = None


class SummaryTotals(BaseModel):
    revenue: float = Field(description="Sum of revenue in USD")
    quantity: int
    count: int


class RevenueBucket(BaseModel):
    name: str
    revenue: float
    quantity: int
    count: int


class MonthlyRevenue(BaseModel):
    year: int
    month: int
    revenue: float
    quantity: int
    count: int


class TransactionSummary(BaseModel):
    totals: SummaryTotals
    top_services: List[RevenueBucket]
    top_territories: List[RevenueBucket]
    monthly: List[MonthlyRevenue]


class LinkResult(BaseModel):
    """Reconciliation outcome for one catalogue owner."""

    user_id: str
    name: str
    email: str
    role: str
    isrc_count: int
    transactions_updated: int


class LinkResponse(BaseModel):
    message: str
    results: List[LinkResult]
