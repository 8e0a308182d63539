"""
Site settings entity models.

A single row holds the branding shown by the dashboard.
"""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field

from ..base import Base, utc_now

DEFAULT_LOGO = "/images/logo.png"
DEFAULT_SITE_NAME = "Music Dashboard"
DEFAULT_PRIMARY_COLOR = "#A365FF"
SINGLETON_ID = 1


class SiteSetting(Base, table=True):
    """Entity for site branding.

    Table: st_site_settings
    """

    __tablename__ = "st_site_settings"

    id: int = Field(default=SINGLETON_ID, primary_key=True)
    logo: str = Field(default=DEFAULT_LOGO, max_length=512)
    site_name: str = Field(default=DEFAULT_SITE_NAME, max_length=255)
    primary_color: str = Field(default=DEFAULT_PRIMARY_COLOR, max_length=7)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"SiteSetting(site_name={self.site_name}, primary_color={self.primary_color})"
