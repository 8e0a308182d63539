"""
User Endpoints.

Self-service profile management for every account, plus the staff user table:
creation, approval, role and split changes, and deletion.
"""

from typing import Optional

from fastapi import APIRouter, File, Query, UploadFile, status

from streamo.core.database.base import utc_now
from streamo.core.database.entities.users import User
from streamo.core.database.repositories.base import apply_changes
from streamo.core.database.repositories.users import UserRepository
from streamo.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationFailedError
from streamo.core.logging_config import get_logger
from streamo.core.models.domain.enums import ADMIN_ROLES, NotificationRelation, NotificationType, UserRole
from streamo.core.models.io.common import MessageResponse, Page
from streamo.core.models.io.users import (
    AdminUserCreate,
    AdminUserUpdate,
    ChangePasswordRequest,
    ProfileUpdate,
    UserRead,
)
from streamo.core.security import hash_password, verify_password
from streamo.server.services import storage
from streamo.server.services.deps import AdminUser, CurrentUser, PageDep, SessionDep, SuperAdminUser
from streamo.server.services.notifications import notify

logger = get_logger(__name__)

router = APIRouter()

STAFF_ROLE_VALUES = {role.value for role in ADMIN_ROLES}


def _guard_staff_target(actor: User, role: Optional[str]) -> None:
    """Only a superadmin may grant or manage staff roles."""
    if role in STAFF_ROLE_VALUES and actor.role != UserRole.superadmin.value:
        raise PermissionDeniedError("Only a superadmin can manage admin accounts")


async def _get_user(session: SessionDep, user_id: str) -> User:
    user = await UserRepository(session).get_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


# =====================================================================
# Self-service
# =====================================================================


@router.get(
    "/whoami",
    response_model=UserRead,
    summary="Who Am I",
    description="Return the authenticated account.",
)
async def whoami(user: CurrentUser) -> UserRead:
    return UserRead.model_validate(user)


@router.put(
    "/profile",
    response_model=UserRead,
    summary="Update Profile",
    description="Update the caller's profile sections: basic info, address, distributor, social links and document details.",
)
async def update_profile(payload: ProfileUpdate, user: CurrentUser, session: SessionDep) -> UserRead:
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)
    apply_changes(user, changes)
    user = await UserRepository(session).update(user)
    return UserRead.model_validate(user)


@router.post(
    "/profile/image",
    response_model=UserRead,
    summary="Upload Profile Image",
    description="Replace the caller's profile picture. Images only, up to the configured image size limit.",
    responses={400: {"description": "Not an image"}, 413: {"description": "File too large"}},
)
async def upload_profile_image(
    user: CurrentUser, session: SessionDep, image: UploadFile = File(...)
) -> UserRead:
    stored = await storage.save_upload(image, "profiles", "profile", storage.IMAGE)
    storage.remove_stored(user.profile_image)
    user.profile_image = stored.public_path
    user = await UserRepository(session).update(user)
    return UserRead.model_validate(user)


@router.post(
    "/profile/document",
    response_model=UserRead,
    summary="Upload Identity Document",
    description="Replace the picture of the caller's identity document.",
    responses={400: {"description": "Not an image"}, 413: {"description": "File too large"}},
)
async def upload_document(user: CurrentUser, session: SessionDep, document: UploadFile = File(...)) -> UserRead:
    stored = await storage.save_upload(document, "documents", "document", storage.IMAGE)
    storage.remove_stored(user.document_picture)
    user.document_picture = stored.public_path
    user = await UserRepository(session).update(user)
    return UserRead.model_validate(user)


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change Password",
    description="Change the caller's password. The current password is required.",
    responses={400: {"description": "Current password is wrong"}},
)
async def change_password(payload: ChangePasswordRequest, user: CurrentUser, session: SessionDep) -> MessageResponse:
    if not verify_password(payload.current_password, user.password_hash):
        raise ValidationFailedError("Current password is incorrect")
    user.password_hash = hash_password(payload.new_password)
    user.last_password_changed = utc_now()
    await UserRepository(session).update(user)
    logger.info(f"User {user.id} changed their password")
    return MessageResponse(message="Password changed successfully")


# =====================================================================
# Staff
# =====================================================================


@router.get(
    "",
    response_model=Page[UserRead],
    summary="List Users",
    description="Staff only. Paginated user table filtered by role, approval state and a name/email search.",
)
async def list_users(
    _: AdminUser,
    session: SessionDep,
    pagination: PageDep,
    role: Optional[UserRole] = None,
    is_approved: Optional[bool] = None,
    search: Optional[str] = Query(default=None, description="Substring of name or email"),
) -> Page[UserRead]:
    users, total = await UserRepository(session).search(
        role=role.value if role else None,
        is_approved=is_approved,
        term=search,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return Page.build([UserRead.model_validate(u) for u in users], total, pagination.page, pagination.limit)


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Staff only. Create an approved account with any role; staff roles need a superadmin.",
    responses={403: {"description": "Only a superadmin can create admins"}, 409: {"description": "Email taken"}},
)
async def create_user(payload: AdminUserCreate, actor: AdminUser, session: SessionDep) -> UserRead:
    _guard_staff_target(actor, payload.role.value)
    users = UserRepository(session)
    if await users.get_by_email(payload.email):
        raise ConflictError("Email already exists")
    user = await users.create(
        User(
            name=payload.name.strip(),
            email=payload.email,
            password_hash=hash_password(payload.password),
            role=payload.role.value,
            split=payload.split,
            is_approved=True,
            last_password_changed=utc_now(),
        )
    )
    logger.info(f"User {actor.id} created user {user.id} ({user.role})")
    return UserRead.model_validate(user)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Get User",
    description="Staff only. Retrieve one account.",
    responses={404: {"description": "User not found"}},
)
async def get_user(user_id: str, _: AdminUser, session: SessionDep) -> UserRead:
    return UserRead.model_validate(await _get_user(session, user_id))


@router.put(
    "/{user_id}",
    response_model=UserRead,
    summary="Update User",
    description="Staff only. Change role, split, active and approval flags, or profile fields.",
    responses={403: {"description": "Staff accounts need a superadmin"}, 404: {"description": "User not found"}},
)
async def update_user(user_id: str, payload: AdminUserUpdate, actor: AdminUser, session: SessionDep) -> UserRead:
    user = await _get_user(session, user_id)
    _guard_staff_target(actor, user.role)

    changes = payload.model_dump(exclude_unset=True)
    for key in ("name", "role", "split", "is_active", "is_approved"):
        if key in changes and changes[key] is None:
            changes.pop(key)
    if "role" in changes:
        changes["role"] = UserRole(changes["role"]).value
        _guard_staff_target(actor, changes["role"])
    if user.id == actor.id and (changes.get("is_active") is False or "role" in changes):
        raise ValidationFailedError("You cannot deactivate yourself or change your own role")

    apply_changes(user, changes)
    user = await UserRepository(session).update(user)
    logger.info(f"User {actor.id} updated user {user.id}: {sorted(changes)}")
    return UserRead.model_validate(user)


@router.put(
    "/{user_id}/approve",
    response_model=UserRead,
    summary="Approve User",
    description="Staff only. Approve a pending account and notify its owner.",
    responses={404: {"description": "User not found"}},
)
async def approve_user(user_id: str, actor: AdminUser, session: SessionDep) -> UserRead:
    user = await _get_user(session, user_id)
    if not user.is_approved:
        user.is_approved = True
        user = await UserRepository(session).update(user)
        await notify(
            session,
            user.id,
            title="Account approved",
            message="Your account has been approved. You can now log in.",
            type=NotificationType.success,
            related_to=NotificationRelation.general,
        )
        logger.info(f"User {actor.id} approved user {user.id}")
    return UserRead.model_validate(user)


@router.delete(
    "/{user_id}/reject",
    response_model=MessageResponse,
    summary="Reject User",
    description="Staff only. Delete a pending sign-up.",
    responses={400: {"description": "User is already approved"}, 404: {"description": "User not found"}},
)
async def reject_user(user_id: str, actor: AdminUser, session: SessionDep) -> MessageResponse:
    user = await _get_user(session, user_id)
    if user.is_approved:
        raise ValidationFailedError("User is already approved")
    await UserRepository(session).delete(user.id)
    logger.info(f"User {actor.id} rejected sign-up {user_id}")
    return MessageResponse(message="User registration rejected")


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete User",
    description="Superadmin only. Permanently delete an account.",
    responses={400: {"description": "Cannot delete yourself"}, 404: {"description": "User not found"}},
)
async def delete_user(user_id: str, actor: SuperAdminUser, session: SessionDep) -> MessageResponse:
    if user_id == actor.id:
        raise ValidationFailedError("You cannot delete your own account")
    user = await _get_user(session, user_id)
    storage.remove_stored(user.profile_image)
    storage.remove_stored(user.document_picture)
    await UserRepository(session).delete(user.id)
    logger.info(f"User {actor.id} deleted user {user_id}")
    return MessageResponse(message="User deleted successfully")
