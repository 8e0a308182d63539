"""
Earnings, royalty statement and rights request I/O models.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from streamo.core.models.domain.enums import RightsRequestType

from .common import EmailAddress
from .transactions import TransactionRead
from .withdrawals import WithdrawalRead


class EarningsResponse(BaseModel):
    total_earnings: float
    last_payout: Optional[WithdrawalRead] = None
    pending_payments: float
    available_balance: float
    recent_transactions: List[TransactionRead]


class Statement(BaseModel):
    id: str = Field(description="Statement month as YYYY-MM")
    period: str = Field(description="Human readable month, e.g. 'Jan 2023'")
    amount: float
    streams: int
    status: str = Field(description="paid or pending")


class RoyaltySummary(BaseModel):
    total_earnings: float
    last_statement: float
    pending_payments: float
    history: List[Statement]


class TrackRoyalty(BaseModel):
    isrc: Optional[str] = None
    track: Optional[str] = None
    artist: Optional[str] = None
    label: Optional[str] = None
    streams: int
    revenue: float
    artist_split: float = Field(description="Artist share in percent")
    label_split: float = Field(description="Label share in percent")
    artist_revenue: float


class RightsRequest(BaseModel):
    """Whitelist or claim request forwarded to the rights mailbox."""

    request_type: RightsRequestType
    platform: str = Field(min_length=1)
    email: EmailAddress
    label_name: str = Field(min_length=1)
    link_url: str = Field(min_length=1)

