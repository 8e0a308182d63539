"""Error types for the Streamo back-office.

Services and dependencies raise these instead of ``HTTPException`` so that the
same rules apply whether they run inside a request or a background task. The
server registers a handler that renders them as ``{"detail": ...}`` responses.
"""

from __future__ import annotations


class StreamoError(Exception):
    """Base error for all domain exceptions."""

    status_code: int = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationFailedError(StreamoError):
    """Raised when input is well-formed but violates a business rule."""

    status_code = 400


class AuthenticationError(StreamoError):
    """Raised when credentials or tokens are missing, invalid or expired."""

    status_code = 401


class PermissionDeniedError(StreamoError):
    """Raised when the caller is authenticated but not allowed to act."""

    status_code = 403


class NotFoundError(StreamoError):
    """Raised when a requested record does not exist or is not visible to the caller."""

    status_code = 404

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        detail = f"{resource} not found" if resource_id is None else f"{resource} '{resource_id}' not found"
        super().__init__(detail)


class ConflictError(StreamoError):
    """Raised when a unique value is already taken."""

    status_code = 409


class GoneError(StreamoError):
    """Raised for resources that existed but can no longer be used (e.g. expired invitations)."""

    status_code = 410


class PayloadTooLargeError(StreamoError):
    """Raised when an uploaded file exceeds its size limit."""

    status_code = 413

    def __init__(self, limit_bytes: int) -> None:
        super().__init__(f"File too large. Maximum size is {limit_bytes // (1024 * 1024) or 1}MB")
        self.limit_bytes = limit_bytes


class UpstreamError(StreamoError):
    """Raised when an external service (e.g. SMTP) fails."""

    status_code = 502


class ServiceUnavailableError(StreamoError):
    """Raised when a required external service is not configured."""

    status_code = 503
