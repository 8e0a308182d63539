"""
Upload storage.

Validates uploaded files (type, extension, size) and stores them under the
configured upload root as ``<root>/<category>/<prefix>-<timestamp>-<random><ext>``.
The upload root is served by the app at ``/uploads``, so the public path of a
stored file is ``/uploads/<category>/<name>``.
"""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from streamo.core.errors import PayloadTooLargeError, ValidationFailedError
from streamo.core.logging_config import get_logger
from streamo.server.core.config import settings
from streamo.server.core.constant import UPLOADS_URL_PREFIX

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class UploadRule:
    """What a category of upload accepts.

    ``mime_types`` entries ending in ``/`` match as prefixes. When ``either`` is set a
    matching MIME type or a matching extension is enough; otherwise both must match.
    """

    label: str
    mime_types: Tuple[str, ...]
    extensions: Tuple[str, ...]
    max_bytes: Callable[[], int]
    either: bool = False

    def accepts(self, content_type: Optional[str], filename: str) -> bool:
        mime = (content_type or "").split(";")[0].strip().lower()
        mime_ok = any(mime.startswith(t) if t.endswith("/") else mime == t for t in self.mime_types)
        ext_ok = Path(filename).suffix.lower() in self.extensions
        return (mime_ok or ext_ok) if self.either else (mime_ok and ext_ok)


IMAGE = UploadRule(
    label="image",
    mime_types=("image/",),
    extensions=(".jpg", ".jpeg", ".png", ".gif", ".webp"),
    max_bytes=lambda: settings.uploads.max_image_bytes,
)
LOGO = UploadRule(
    label="image",
    mime_types=("image/",),
    extensions=(".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"),
    max_bytes=lambda: settings.uploads.max_logo_bytes,
)
CSV = UploadRule(
    label="CSV",
    mime_types=("text/csv", "application/csv", "application/vnd.ms-excel"),
    extensions=(".csv",),
    max_bytes=lambda: settings.uploads.max_csv_bytes,
    either=True,
)
AUDIO = UploadRule(
    label="audio",
    mime_types=("audio/",),
    extensions=(".mp3", ".wav", ".flac", ".aac", ".m4a", ".ogg"),
    max_bytes=lambda: settings.uploads.max_media_bytes,
)
VIDEO = UploadRule(
    label="video",
    mime_types=("video/",),
    extensions=(".mp4", ".mov", ".avi", ".mkv", ".webm"),
    max_bytes=lambda: settings.uploads.max_media_bytes,
)


@dataclass(frozen=True)
class StoredFile:
    """A file written to the upload root."""

    public_path: str
    file_path: Path
    file_name: str
    original_name: str
    size: int
    mime_type: str


def upload_root() -> Path:
    return Path(settings.uploads.root)


def _unique_name(prefix: str, original: str) -> str:
    ext = Path(original).suffix.lower()
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"


async def save_upload(upload: UploadFile, category: str, prefix: str, rule: UploadRule) -> StoredFile:
    """
    Validate and store an uploaded file.

    Args:
        upload: The multipart file
        category: Sub-directory under the upload root (e.g. ``covers``)
        prefix: File name prefix (e.g. ``cover``)
        rule: Accepted types and size limit

    Returns:
        StoredFile describing the written file

    Raises:
        ValidationFailedError: Wrong type or extension (400)
        PayloadTooLargeError: File exceeds the rule's limit (413)
    """
    original = upload.filename or ""
    if not rule.accepts(upload.content_type, original):
        raise ValidationFailedError(f"Invalid file type. Only {rule.label} files are allowed")

    limit = rule.max_bytes()
    directory = upload_root() / category
    directory.mkdir(parents=True, exist_ok=True)
    name = _unique_name(prefix, original)
    destination = directory / name

    size = 0
    out = await run_in_threadpool(destination.open, "wb")
    try:
        while chunk := await upload.read(CHUNK_SIZE):
            size += len(chunk)
            if size > limit:
                break
            await run_in_threadpool(out.write, chunk)
    finally:
        await run_in_threadpool(out.close)

    if size > limit:
        destination.unlink(missing_ok=True)
        logger.info(f"Rejected {rule.label} upload '{original}': larger than {limit} bytes")
        raise PayloadTooLargeError(limit)

    logger.debug(f"Stored upload '{original}' as {destination} ({size} bytes)")
    return StoredFile(
        public_path=f"{UPLOADS_URL_PREFIX}/{category}/{name}",
        file_path=destination,
        file_name=name,
        original_name=original,
        size=size,
        mime_type=upload.content_type or "application/octet-stream",
    )


def resolve_public_path(public_path: Optional[str]) -> Optional[Path]:
    """Map ``/uploads/<category>/<name>`` back to its location on disk."""
    if not public_path or not public_path.startswith(f"{UPLOADS_URL_PREFIX}/"):
        return None
    relative = public_path[len(UPLOADS_URL_PREFIX) + 1 :]
    candidate = (upload_root() / relative).resolve()
    if upload_root().resolve() not in candidate.parents:
        return None
    return candidate


def remove_stored(public_path: Optional[str]) -> bool:
    """Delete a previously stored upload; missing files are ignored."""
    path = resolve_public_path(public_path)
    if path is None or not path.exists():
        return False
    try:
        path.unlink()
    except OSError as e:
        logger.warning(f"Could not delete stored file {path}: {e}")
        return False
    return True
