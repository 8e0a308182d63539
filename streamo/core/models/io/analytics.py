"""
Dashboard analytics I/O models.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    total_earnings: float = Field(description="Earnings after the user's split")
    last_statement: float = Field(description="Amount of the most recent monthly statement")
    releases: int
    tracks: int
    streams: int
    revenue: float = Field(description="Gross revenue in USD before the split")
    pending_releases: Optional[int] = Field(default=None, description="Staff only: releases awaiting review")


class PlatformShare(BaseModel):
    name: str
    value: float = Field(description="Share of revenue in percent")
    revenue: float
    color: str
