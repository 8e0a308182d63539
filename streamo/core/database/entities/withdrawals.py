"""
Withdrawal entity models.

Payout requests raised by artists and label owners against their available balance.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Withdrawal(Base, table=True):
    """Entity for payout requests.

    Table: st_withdrawals
    """

    __tablename__ = "st_withdrawals"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(max_length=32, index=True)
    amount: float = Field(gt=0)
    status: str = Field(default="pending", max_length=16, index=True)
    payment_method: str = Field(max_length=16)
    bank_details: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    mobile_number: Optional[str] = Field(default=None, max_length=32)
    notes: Optional[str] = Field(default=None)

    processed_by: Optional[str] = Field(default=None, max_length=32)
    processed_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Withdrawal(id={self.id}, amount={self.amount}, status={self.status})"
