"""
Release Endpoints.

Artists and label owners manage their own releases; staff see every release and
move them through review. Create and update accept multipart requests with a
JSON ``data`` field and an optional ``cover_art`` image.
"""

from typing import Optional

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from streamo.core.database.entities.releases import Release
from streamo.core.database.entities.users import User
from streamo.core.database.repositories.base import apply_changes
from streamo.core.database.repositories.releases import ReleaseRepository
from streamo.core.errors import NotFoundError, PermissionDeniedError
from streamo.core.logging_config import get_logger
from streamo.core.models.domain.enums import (
    EDITABLE_STATUSES,
    NotificationRelation,
    ReleaseStatus,
    ReleaseType,
)
from streamo.core.models.io.common import MessageResponse, Page
from streamo.core.models.io.releases import ReleaseCreate, ReleaseRead, ReleaseUpdate, StatusUpdate
from streamo.server.services import storage
from streamo.server.services.deps import AdminUser, CurrentUser, PageDep, SessionDep, is_staff, parse_json_form
from streamo.server.services.notifications import notify_status_change

logger = get_logger(__name__)

router = APIRouter()

EDITABLE_VALUES = {s.value for s in EDITABLE_STATUSES}


async def _get_visible(session: SessionDep, user: User, release_id: str) -> Release:
    """Load a release the caller may see; other owners' releases look missing."""
    release = await ReleaseRepository(session).get_by_id(release_id)
    if release is None or (not is_staff(user) and release.user_id != user.id):
        raise NotFoundError("Release", release_id)
    return release


def _ensure_editable(user: User, release: Release) -> None:
    if not is_staff(user) and release.status not in EDITABLE_VALUES:
        raise PermissionDeniedError(f"Release can no longer be changed while {release.status}")


async def _create(session: SessionDep, user: User, payload: ReleaseCreate, cover_art: Optional[str]) -> Release:
    fields = payload.model_dump(exclude={"draft"}, mode="json")
    fields["release_date"] = payload.release_date
    release = Release(
        **fields,
        user_id=user.id,
        cover_art=cover_art,
        status=(ReleaseStatus.draft if payload.draft else ReleaseStatus.submitted).value,
    )
    release = await ReleaseRepository(session).create(release)
    logger.info(f"User {user.id} created release {release.id} ({release.status})")
    return release


@router.get(
    "",
    response_model=Page[ReleaseRead],
    summary="List Releases",
    description="Paginated releases, newest first. Artists and label owners only see their own.",
)
async def list_releases(
    user: CurrentUser,
    session: SessionDep,
    pagination: PageDep,
    status_filter: Optional[ReleaseStatus] = Query(default=None, alias="status"),
    release_type: Optional[ReleaseType] = None,
    search: Optional[str] = Query(default=None, description="Substring of title or artist"),
) -> Page[ReleaseRead]:
    releases, total = await ReleaseRepository(session).search(
        owner_id=None if is_staff(user) else user.id,
        status=status_filter.value if status_filter else None,
        release_type=release_type.value if release_type else None,
        term=search,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return Page.build([ReleaseRead.model_validate(r) for r in releases], total, pagination.page, pagination.limit)


@router.get(
    "/latest",
    response_model=list[ReleaseRead],
    summary="Latest Releases",
    description="The most recently created releases visible to the caller.",
)
async def latest_releases(
    user: CurrentUser, session: SessionDep, limit: int = Query(default=5, ge=1, le=50)
) -> list[ReleaseRead]:
    releases = await ReleaseRepository(session).latest(None if is_staff(user) else user.id, limit)
    return [ReleaseRead.model_validate(r) for r in releases]


@router.get(
    "/{release_id}",
    response_model=ReleaseRead,
    summary="Get Release",
    responses={404: {"description": "Release not found"}},
)
async def get_release(release_id: str, user: CurrentUser, session: SessionDep) -> ReleaseRead:
    return ReleaseRead.model_validate(await _get_visible(session, user, release_id))


@router.post(
    "",
    response_model=ReleaseRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Release",
    description="Multipart: ``data`` holds the release as JSON, ``cover_art`` an optional image.",
    responses={400: {"description": "Cover art is not an image"}, 413: {"description": "Cover art too large"}},
)
async def create_release(
    user: CurrentUser,
    session: SessionDep,
    data: str = Form(..., description="Release as JSON"),
    cover_art: Optional[UploadFile] = File(default=None),
) -> ReleaseRead:
    """
    Create a release.

    The release enters review as ``submitted`` unless ``draft`` is true.
    """
    payload = parse_json_form(ReleaseCreate, data)
    cover_path = None
    if cover_art is not None and cover_art.filename:
        cover_path = (await storage.save_upload(cover_art, "covers", "cover", storage.IMAGE)).public_path
    return ReleaseRead.model_validate(await _create(session, user, payload, cover_path))


@router.post(
    "/json",
    response_model=ReleaseRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Release (JSON)",
    description="Create a release from a JSON body without a cover upload.",
)
async def create_release_json(payload: ReleaseCreate, user: CurrentUser, session: SessionDep) -> ReleaseRead:
    return ReleaseRead.model_validate(await _create(session, user, payload, None))


@router.put(
    "/{release_id}",
    response_model=ReleaseRead,
    summary="Update Release",
    description=(
        "Partial update. Owners may edit while the release is draft, submitted or rejected; "
        "editing a rejected release resubmits it."
    ),
    responses={403: {"description": "Release is locked"}, 404: {"description": "Release not found"}},
)
async def update_release(
    release_id: str,
    user: CurrentUser,
    session: SessionDep,
    data: str = Form(default="{}", description="Changed fields as JSON"),
    cover_art: Optional[UploadFile] = File(default=None),
) -> ReleaseRead:
    release = await _get_visible(session, user, release_id)
    _ensure_editable(user, release)
    payload = parse_json_form(ReleaseUpdate, data)

    changes = payload.model_dump(exclude_unset=True, mode="json")
    if "release_date" in changes:
        changes["release_date"] = payload.release_date
    for key in ("title", "artist", "release_type", "format", "stores", "tracks"):
        if key in changes and changes[key] is None:
            changes.pop(key)
    apply_changes(release, changes)

    if cover_art is not None and cover_art.filename:
        stored = await storage.save_upload(cover_art, "covers", "cover", storage.IMAGE)
        storage.remove_stored(release.cover_art)
        release.cover_art = stored.public_path

    if not is_staff(user) and release.status == ReleaseStatus.rejected.value:
        release.status = ReleaseStatus.submitted.value
        release.rejection_reason = None

    release = await ReleaseRepository(session).update(release)
    logger.info(f"User {user.id} updated release {release.id}")
    return ReleaseRead.model_validate(release)


@router.patch(
    "/{release_id}/status",
    response_model=ReleaseRead,
    summary="Review Release",
    description="Staff only. Set the review status and notify the owner.",
    responses={404: {"description": "Release not found"}},
)
async def update_release_status(
    release_id: str, payload: StatusUpdate, actor: AdminUser, session: SessionDep
) -> ReleaseRead:
    release = await _get_visible(session, actor, release_id)
    release.status = payload.status.value
    release.rejection_reason = payload.rejection_reason if payload.status == ReleaseStatus.rejected else None
    release = await ReleaseRepository(session).update(release)
    await notify_status_change(
        session,
        release.user_id,
        NotificationRelation.release,
        release.id,
        release.title,
        release.status,
        release.rejection_reason,
    )
    logger.info(f"User {actor.id} set release {release.id} to {release.status}")
    return ReleaseRead.model_validate(release)


@router.delete(
    "/{release_id}",
    response_model=MessageResponse,
    summary="Delete Release",
    responses={403: {"description": "Release is locked"}, 404: {"description": "Release not found"}},
)
async def delete_release(release_id: str, user: CurrentUser, session: SessionDep) -> MessageResponse:
    release = await _get_visible(session, user, release_id)
    _ensure_editable(user, release)
    storage.remove_stored(release.cover_art)
    await ReleaseRepository(session).delete(release.id)
    logger.info(f"User {user.id} deleted release {release_id}")
    return MessageResponse(message="Release deleted successfully")
