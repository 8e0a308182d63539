"""
Store Endpoints.

Catalogue of distribution stores. Everyone signed in can browse them; staff
maintain the list. Create and update accept multipart requests with a JSON
``data`` field and an optional ``icon`` image.
"""

from typing import Optional

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from streamo.core.database.entities.stores import Store
from streamo.core.database.repositories.base import apply_changes
from streamo.core.database.repositories.stores import StoreRepository
from streamo.core.errors import ConflictError, NotFoundError
from streamo.core.logging_config import get_logger
from streamo.core.models.domain.enums import StoreStatus
from streamo.core.models.io.common import MessageResponse
from streamo.core.models.io.stores import StoreCreate, StoreRead, StoreUpdate
from streamo.server.services import storage
from streamo.server.services.deps import AdminUser, CurrentUser, SessionDep, parse_json_form

logger = get_logger(__name__)

router = APIRouter()


async def _get_store(session: SessionDep, store_id: str) -> Store:
    store = await StoreRepository(session).get_by_id(store_id)
    if store is None:
        raise NotFoundError("Store", store_id)
    return store


async def _ensure_unique_name(session: SessionDep, name: str, store_id: Optional[str] = None) -> None:
    existing = await StoreRepository(session).get_by_name(name)
    if existing is not None and existing.id != store_id:
        raise ConflictError(f"Store '{name}' already exists")


@router.get(
    "",
    response_model=list[StoreRead],
    summary="List Stores",
    description="Stores in alphabetical order, optionally filtered by status, category and video-only flag.",
)
async def list_stores(
    _: CurrentUser,
    session: SessionDep,
    status_filter: Optional[StoreStatus] = Query(default=None, alias="status"),
    category: Optional[str] = None,
    videos_only: Optional[bool] = None,
) -> list[StoreRead]:
    stores = await StoreRepository(session).filter(
        status=status_filter.value if status_filter else None, category=category, videos_only=videos_only
    )
    return [StoreRead.model_validate(s) for s in stores]


@router.get(
    "/{store_id}",
    response_model=StoreRead,
    summary="Get Store",
    responses={404: {"description": "Store not found"}},
)
async def get_store(store_id: str, _: CurrentUser, session: SessionDep) -> StoreRead:
    return StoreRead.model_validate(await _get_store(session, store_id))


@router.post(
    "",
    response_model=StoreRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Store",
    description="Staff only. Multipart: ``data`` holds the store as JSON, ``icon`` an optional image.",
    responses={409: {"description": "Store name taken"}},
)
async def create_store(
    actor: AdminUser,
    session: SessionDep,
    data: str = Form(..., description="Store as JSON"),
    icon: Optional[UploadFile] = File(default=None),
) -> StoreRead:
    payload = parse_json_form(StoreCreate, data)
    await _ensure_unique_name(session, payload.name)
    store = Store(**payload.model_dump(mode="json"))
    if icon is not None and icon.filename:
        store.icon = (await storage.save_upload(icon, "stores", "store", storage.IMAGE)).public_path
    store = await StoreRepository(session).create(store)
    logger.info(f"User {actor.id} created store {store.name}")
    return StoreRead.model_validate(store)


@router.put(
    "/{store_id}",
    response_model=StoreRead,
    summary="Update Store",
    description="Staff only. Partial update; a new ``icon`` replaces the old one.",
    responses={404: {"description": "Store not found"}, 409: {"description": "Store name taken"}},
)
async def update_store(
    store_id: str,
    actor: AdminUser,
    session: SessionDep,
    data: str = Form(default="{}", description="Changed fields as JSON"),
    icon: Optional[UploadFile] = File(default=None),
) -> StoreRead:
    store = await _get_store(session, store_id)
    payload = parse_json_form(StoreUpdate, data)
    changes = payload.model_dump(exclude_unset=True, mode="json")
    for key in ("name", "status", "videos_only"):
        if key in changes and changes[key] is None:
            changes.pop(key)
    if "name" in changes:
        await _ensure_unique_name(session, changes["name"], store.id)
    apply_changes(store, changes)
    if icon is not None and icon.filename:
        stored = await storage.save_upload(icon, "stores", "store", storage.IMAGE)
        storage.remove_stored(store.icon)
        store.icon = stored.public_path
    store = await StoreRepository(session).update(store)
    logger.info(f"User {actor.id} updated store {store.id}")
    return StoreRead.model_validate(store)


@router.patch(
    "/{store_id}/toggle-status",
    response_model=StoreRead,
    summary="Toggle Store Status",
    description="Staff only. Switch a store between Active and Inactive.",
    responses={404: {"description": "Store not found"}},
)
async def toggle_store_status(store_id: str, actor: AdminUser, session: SessionDep) -> StoreRead:
    store = await _get_store(session, store_id)
    store.status = (
        StoreStatus.inactive if store.status == StoreStatus.active.value else StoreStatus.active
    ).value
    store = await StoreRepository(session).update(store)
    logger.info(f"User {actor.id} set store {store.id} to {store.status}")
    return StoreRead.model_validate(store)


@router.delete(
    "/{store_id}",
    response_model=MessageResponse,
    summary="Delete Store",
    description="Staff only.",
    responses={404: {"description": "Store not found"}},
)
async def delete_store(store_id: str, actor: AdminUser, session: SessionDep) -> MessageResponse:
    store = await _get_store(session, store_id)
    storage.remove_stored(store.icon)
    await StoreRepository(session).delete(store.id)
    logger.info(f"User {actor.id} deleted store {store_id}")
    return MessageResponse(message="Store deleted successfully")
