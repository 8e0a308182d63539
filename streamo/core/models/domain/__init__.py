"""Domain level enums shared by entities, services and I/O models."""

from .enums import (
    ADMIN_ROLES,
    EDITABLE_STATUSES,
    CsvUploadStatus,
    MediaType,
    NotificationRelation,
    NotificationType,
    PaymentMethod,
    ReleaseFormat,
    ReleaseStatus,
    ReleaseType,
    RightsRequestType,
    StoreStatus,
    UserRole,
    WithdrawalStatus,
)

__all__ = [
    "ADMIN_ROLES",
    "EDITABLE_STATUSES",
    "CsvUploadStatus",
    "MediaType",
    "NotificationRelation",
    "NotificationType",
    "PaymentMethod",
    "ReleaseFormat",
    "ReleaseStatus",
    "ReleaseType",
    "RightsRequestType",
    "StoreStatus",
    "UserRole",
    "WithdrawalStatus",
]
