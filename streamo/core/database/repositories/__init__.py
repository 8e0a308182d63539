"""
Database repository layer using SQLModel.

One repository per entity, all built on ``AsyncBaseRepository``:

- base: AsyncBaseRepository and AsyncQueryBuilder utilities
- users, releases, tracks, stores
- csv_uploads, transactions, withdrawals
- notifications, invitations, site_settings
"""

from .base import AsyncBaseRepository, AsyncQueryBuilder
from .csv_uploads import CsvUploadRepository
from .invitations import InvitationRepository
from .notifications import NotificationRepository
from .releases import ReleaseRepository
from .site_settings import SiteSettingRepository
from .stores import StoreRepository
from .tracks import TrackRepository
from .transactions import TransactionFilters, TransactionRepository
from .users import UserRepository
from .withdrawals import WithdrawalRepository

__all__ = [
    "AsyncBaseRepository",
    "AsyncQueryBuilder",
    "CsvUploadRepository",
    "InvitationRepository",
    "NotificationRepository",
    "ReleaseRepository",
    "SiteSettingRepository",
    "StoreRepository",
    "TrackRepository",
    "TransactionFilters",
    "TransactionRepository",
    "UserRepository",
    "WithdrawalRepository",
]
