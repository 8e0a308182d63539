"""
Site Settings Endpoints.

Branding read by the dashboard before login; staff change it.
"""

from fastapi import APIRouter, File, UploadFile

from streamo.core.database.entities.site_settings import DEFAULT_LOGO
from streamo.core.database.repositories.site_settings import SiteSettingRepository
from streamo.core.logging_config import get_logger
from streamo.core.models.io.settings import SiteSettingsRead, SiteSettingsUpdate
from streamo.server.services import storage
from streamo.server.services.deps import AdminUser, SessionDep

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=SiteSettingsRead,
    summary="Site Settings",
    description="Public. Logo, site name and primary colour; defaults until staff save their own.",
)
async def get_settings(session: SessionDep) -> SiteSettingsRead:
    return SiteSettingsRead.model_validate(await SiteSettingRepository(session).get_current())


@router.put(
    "",
    response_model=SiteSettingsRead,
    summary="Update Site Settings",
    description="Staff only. ``primary_color`` must be a ``#RRGGBB`` hex colour.",
)
async def update_settings(payload: SiteSettingsUpdate, actor: AdminUser, session: SessionDep) -> SiteSettingsRead:
    changes = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    current = await SiteSettingRepository(session).save(**changes)
    logger.info(f"User {actor.id} updated site settings: {sorted(changes)}")
    return SiteSettingsRead.model_validate(current)


@router.post(
    "/logo",
    response_model=SiteSettingsRead,
    summary="Upload Logo",
    description="Staff only. Replace the site logo with an uploaded image.",
    responses={400: {"description": "Not an image"}, 413: {"description": "Logo too large"}},
)
async def upload_logo(actor: AdminUser, session: SessionDep, logo: UploadFile = File(...)) -> SiteSettingsRead:
    repo = SiteSettingRepository(session)
    previous = (await repo.get_current()).logo
    stored = await storage.save_upload(logo, "logos", "logo", storage.LOGO)
    current = await repo.save(logo=stored.public_path)
    if previous != DEFAULT_LOGO:
        storage.remove_stored(previous)
    logger.info(f"User {actor.id} uploaded a new logo {stored.public_path}")
    return SiteSettingsRead.model_validate(current)
