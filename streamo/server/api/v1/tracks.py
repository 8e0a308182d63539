"""
Track and Video Endpoints.

Audio tracks and music videos share these endpoints; ``media_type`` tells them
apart. Create and update accept multipart requests with a JSON ``data`` field,
an optional ``cover_art`` image and an optional ``media_file`` (audio for
tracks, video for videos).
"""

from typing import Optional

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from streamo.core.database.entities.tracks import Track
from streamo.core.database.entities.users import User
from streamo.core.database.repositories.base import apply_changes
from streamo.core.database.repositories.tracks import TrackRepository
from streamo.core.errors import NotFoundError, PermissionDeniedError
from streamo.core.logging_config import get_logger
from streamo.core.models.domain.enums import (
    EDITABLE_STATUSES,
    MediaType,
    NotificationRelation,
    ReleaseStatus,
)
from streamo.core.models.io.common import MessageResponse, Page
from streamo.core.models.io.releases import StatusUpdate
from streamo.core.models.io.tracks import TrackCreate, TrackRead, TrackUpdate
from streamo.server.services import storage
from streamo.server.services.deps import AdminUser, CurrentUser, PageDep, SessionDep, is_staff, parse_json_form
from streamo.server.services.notifications import notify_status_change

logger = get_logger(__name__)

router = APIRouter()

EDITABLE_VALUES = {s.value for s in EDITABLE_STATUSES}


def _media_rule(media_type: str) -> storage.UploadRule:
    return storage.VIDEO if media_type == MediaType.video.value else storage.AUDIO


async def _get_visible(session: SessionDep, user: User, track_id: str) -> Track:
    track = await TrackRepository(session).get_by_id(track_id)
    if track is None or (not is_staff(user) and track.user_id != user.id):
        raise NotFoundError("Track", track_id)
    return track


async def _store_files(
    track: Track, cover_art: Optional[UploadFile], media_file: Optional[UploadFile]
) -> None:
    """Validate and attach uploaded files, replacing earlier ones."""
    if cover_art is not None and cover_art.filename:
        stored = await storage.save_upload(cover_art, "covers", "cover", storage.IMAGE)
        storage.remove_stored(track.cover_art)
        track.cover_art = stored.public_path
    if media_file is not None and media_file.filename:
        stored = await storage.save_upload(media_file, "media", track.media_type, _media_rule(track.media_type))
        storage.remove_stored(track.media_file)
        track.media_file = stored.public_path


@router.get(
    "",
    response_model=Page[TrackRead],
    summary="List Tracks",
    description="Paginated tracks and videos, newest first. Artists and label owners only see their own.",
)
async def list_tracks(
    user: CurrentUser,
    session: SessionDep,
    pagination: PageDep,
    media_type: Optional[MediaType] = None,
    status_filter: Optional[ReleaseStatus] = Query(default=None, alias="status"),
    release_type: Optional[str] = None,
    search: Optional[str] = Query(default=None, description="Substring of title or artist"),
) -> Page[TrackRead]:
    tracks, total = await TrackRepository(session).search(
        owner_id=None if is_staff(user) else user.id,
        media_type=media_type.value if media_type else None,
        status=status_filter.value if status_filter else None,
        release_type=release_type,
        term=search,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return Page.build([TrackRead.model_validate(t) for t in tracks], total, pagination.page, pagination.limit)


@router.get(
    "/{track_id}",
    response_model=TrackRead,
    summary="Get Track",
    responses={404: {"description": "Track not found"}},
)
async def get_track(track_id: str, user: CurrentUser, session: SessionDep) -> TrackRead:
    return TrackRead.model_validate(await _get_visible(session, user, track_id))


@router.post(
    "",
    response_model=TrackRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Track",
    description="Multipart: ``data`` holds the track as JSON; ``cover_art`` and ``media_file`` are optional.",
    responses={400: {"description": "Wrong file type"}, 413: {"description": "File too large"}},
)
async def create_track(
    user: CurrentUser,
    session: SessionDep,
    data: str = Form(..., description="Track as JSON"),
    cover_art: Optional[UploadFile] = File(default=None),
    media_file: Optional[UploadFile] = File(default=None),
) -> TrackRead:
    payload = parse_json_form(TrackCreate, data)
    fields = payload.model_dump(exclude={"draft"}, mode="json")
    fields["release_date"] = payload.release_date
    track = Track(
        **fields,
        user_id=user.id,
        status=(ReleaseStatus.draft if payload.draft else ReleaseStatus.submitted).value,
    )
    await _store_files(track, cover_art, media_file)
    track = await TrackRepository(session).create(track)
    logger.info(f"User {user.id} created {track.media_type} {track.id} ({track.status})")
    return TrackRead.model_validate(track)


@router.put(
    "/{track_id}",
    response_model=TrackRead,
    summary="Update Track",
    description=(
        "Partial update. Owners may edit while the track is draft, submitted or rejected; "
        "editing a rejected track resubmits it."
    ),
    responses={403: {"description": "Track is locked"}, 404: {"description": "Track not found"}},
)
async def update_track(
    track_id: str,
    user: CurrentUser,
    session: SessionDep,
    data: str = Form(default="{}", description="Changed fields as JSON"),
    cover_art: Optional[UploadFile] = File(default=None),
    media_file: Optional[UploadFile] = File(default=None),
) -> TrackRead:
    track = await _get_visible(session, user, track_id)
    if not is_staff(user) and track.status not in EDITABLE_VALUES:
        raise PermissionDeniedError(f"Track can no longer be changed while {track.status}")
    payload = parse_json_form(TrackUpdate, data)

    changes = payload.model_dump(exclude_unset=True, mode="json")
    if "release_date" in changes:
        changes["release_date"] = payload.release_date
    for key in ("title", "artist", "credits", "stores"):
        if key in changes and changes[key] is None:
            changes.pop(key)
    apply_changes(track, changes)
    await _store_files(track, cover_art, media_file)

    if not is_staff(user) and track.status == ReleaseStatus.rejected.value:
        track.status = ReleaseStatus.submitted.value
        track.rejection_reason = None

    track = await TrackRepository(session).update(track)
    logger.info(f"User {user.id} updated track {track.id}")
    return TrackRead.model_validate(track)


@router.patch(
    "/{track_id}/status",
    response_model=TrackRead,
    summary="Review Track",
    description="Staff only. Set the review status and notify the owner.",
    responses={404: {"description": "Track not found"}},
)
async def update_track_status(track_id: str, payload: StatusUpdate, actor: AdminUser, session: SessionDep) -> TrackRead:
    track = await _get_visible(session, actor, track_id)
    track.status = payload.status.value
    track.rejection_reason = payload.rejection_reason if payload.status == ReleaseStatus.rejected else None
    track = await TrackRepository(session).update(track)
    await notify_status_change(
        session,
        track.user_id,
        NotificationRelation.track,
        track.id,
        track.title,
        track.status,
        track.rejection_reason,
    )
    logger.info(f"User {actor.id} set track {track.id} to {track.status}")
    return TrackRead.model_validate(track)


@router.delete(
    "/{track_id}",
    response_model=MessageResponse,
    summary="Delete Track",
    responses={403: {"description": "Track is locked"}, 404: {"description": "Track not found"}},
)
async def delete_track(track_id: str, user: CurrentUser, session: SessionDep) -> MessageResponse:
    track = await _get_visible(session, user, track_id)
    if not is_staff(user) and track.status not in EDITABLE_VALUES:
        raise PermissionDeniedError(f"Track can no longer be changed while {track.status}")
    storage.remove_stored(track.cover_art)
    storage.remove_stored(track.media_file)
    await TrackRepository(session).delete(track.id)
    logger.info(f"User {user.id} deleted track {track_id}")
    return MessageResponse(message="Track deleted successfully")
