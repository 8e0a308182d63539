"""
Database entity models.

Each module holds one table:

- users: accounts and profiles
- releases: releases with embedded track lists
- tracks: audio tracks and music videos
- stores: distribution stores
- csv_uploads: royalty report imports
- transactions: royalty report lines
- withdrawals: payout requests
- notifications: in-app notifications
- invitations: registration invitation codes
- site_settings: site branding singleton
"""

from .csv_uploads import CsvUpload
from .invitations import Invitation
from .notifications import Notification
from .releases import Release
from .site_settings import SiteSetting
from .stores import Store
from .tracks import Track
from .transactions import Transaction
from .users import User
from .withdrawals import Withdrawal

__all__ = [
    "CsvUpload",
    "Invitation",
    "Notification",
    "Release",
    "SiteSetting",
    "Store",
    "Track",
    "Transaction",
    "User",
    "Withdrawal",
]
