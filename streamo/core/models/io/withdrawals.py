"""
Withdrawal I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from streamo.core.models.domain.enums import PaymentMethod, WithdrawalStatus


class BankDetails(BaseModel):
    account_number: str = Field(min_length=1)
    bank_name: str = Field(min_length=1)
    branch: Optional[str] = None


class WithdrawalCreate(BaseModel):
    """Payout request. Bank payouts need bank details, mobile wallets a number."""

    amount: float = Field(gt=0)
    payment_method: PaymentMethod
    bank_details: Optional[BankDetails] = None
    mobile_number: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _payment_target(self) -> "WithdrawalCreate":
        if self.payment_method == PaymentMethod.bank and self.bank_details is None:
            raise ValueError("Bank details are required for bank withdrawals")
        if self.payment_method in (PaymentMethod.bkash, PaymentMethod.nagad) and not self.mobile_number:
            raise ValueError("Mobile number is required for mobile wallet withdrawals")
        return self


class WithdrawalUpdate(BaseModel):
    status: Optional[WithdrawalStatus] = None
    notes: Optional[str] = None


class WithdrawalRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    amount: float
    status: WithdrawalStatus
    payment_method: PaymentMethod
    bank_details: Optional[BankDetails] = None
    mobile_number: Optional[str] = None
    notes: Optional[str] = None
    processed_by: Optional[str] = None
    processed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
