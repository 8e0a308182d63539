"""Domain enums for the Streamo back-office."""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """
    Account role.

    Staff roles (``superadmin``, ``admin``) manage catalogue, finance and users.
    Artists and label owners only see their own data.
    """

    superadmin = "superadmin"
    admin = "admin"
    labelowner = "labelowner"
    artist = "artist"


ADMIN_ROLES = frozenset({UserRole.superadmin, UserRole.admin})


class ReleaseStatus(str, Enum):
    """Review lifecycle shared by releases, tracks and videos."""

    draft = "draft"
    submitted = "submitted"
    processing = "processing"
    approved = "approved"
    rejected = "rejected"


# Statuses in which the owner may still edit a release or track.
EDITABLE_STATUSES = frozenset({ReleaseStatus.draft, ReleaseStatus.submitted, ReleaseStatus.rejected})


class ReleaseType(str, Enum):
    single = "Single"
    ep = "EP"
    album = "Album"


class ReleaseFormat(str, Enum):
    digital = "Digital"
    cd = "CD"
    vinyl = "Vinyl"
    cassette = "Cassette"


class MediaType(str, Enum):
    """Kind of catalogue item stored in the tracks table."""

    audio = "audio"
    video = "video"


class StoreStatus(str, Enum):
    active = "Active"
    inactive = "Inactive"


class CsvUploadStatus(str, Enum):
    """Lifecycle of a royalty CSV import."""

    pending = "pending"
    processing = "processing"
    completed = "completed"
    completed_with_errors = "completed_with_errors"
    failed = "failed"


class WithdrawalStatus(str, Enum):
    """Payout request lifecycle: pending -> approved -> completed, rejectable until completed."""

    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    completed = "completed"


class PaymentMethod(str, Enum):
    bank = "Bank"
    bkash = "BKash"
    nagad = "Nagad"


class NotificationType(str, Enum):
    success = "success"
    error = "error"
    info = "info"
    warning = "warning"


class NotificationRelation(str, Enum):
    """What a notification points at."""

    withdrawal = "withdrawal"
    release = "release"
    track = "track"
    general = "general"


class RightsRequestType(str, Enum):
    whitelist = "whitelist"
    claim = "claim"
