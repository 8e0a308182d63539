"""
Request Dependencies.

Database session aliases, the bearer-token authentication dependencies used
by every protected endpoint, pagination parameters and multipart JSON parsing.
"""

from typing import Annotated, Callable, Optional, Type, TypeVar

from fastapi import Depends, Query
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from streamo.core.database import get_session, get_session_factory
from streamo.core.database.entities.users import User
from streamo.core.errors import AuthenticationError, NotFoundError, PermissionDeniedError
from streamo.core.logging_config import get_logger
from streamo.core.models.domain.enums import ADMIN_ROLES, UserRole
from streamo.core.security import decode_access_token

logger = get_logger(__name__)

SessionDep = Annotated[AsyncSession, Depends(get_session)]
SessionFactoryDep = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]

bearer_scheme = HTTPBearer(auto_error=False, description="Access token from /auth/login")


async def get_current_user(
    session: SessionDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """
    Resolve the authenticated user from the ``Authorization: Bearer`` header.

    Raises:
        AuthenticationError: Missing, invalid or expired token (401)
        NotFoundError: Token refers to a deleted user (404)
        PermissionDeniedError: Account is deactivated (403)
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationError("Access denied. No token provided.")

    user_id = decode_access_token(credentials.credentials)
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User")
    if not user.is_active:
        raise PermissionDeniedError("Account is deactivated")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def require_roles(*roles: UserRole) -> Callable:
    """
    Build a dependency that only lets users with one of ``roles`` through.

    Usage::

        @router.get("/", dependencies=[Depends(require_roles(UserRole.admin))])
    """
    allowed = {role.value for role in roles}

    async def _check(user: CurrentUser) -> User:
        if user.role not in allowed:
            logger.debug(f"Role check failed for user {user.id}: {user.role} not in {sorted(allowed)}")
            raise PermissionDeniedError("Access denied. Insufficient permissions.")
        return user

    return _check


def is_staff(user: User) -> bool:
    """Whether ``user`` sees every owner's data."""
    return user.role in {role.value for role in ADMIN_ROLES}


AdminUser = Annotated[User, Depends(require_roles(UserRole.superadmin, UserRole.admin))]
SuperAdminUser = Annotated[User, Depends(require_roles(UserRole.superadmin))]
InviterUser = Annotated[User, Depends(require_roles(UserRole.superadmin, UserRole.admin, UserRole.labelowner))]


class PageParams:
    """``page``/``limit`` query parameters shared by paginated listings."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="1-based page number"),
        limit: int = Query(default=20, ge=1, le=100, description="Page size"),
    ) -> None:
        self.page = page
        self.limit = limit

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


PageDep = Annotated[PageParams, Depends()]


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_json_form(model: Type[ModelT], data: Optional[str]) -> ModelT:
    """
    Validate the JSON ``data`` field of a multipart request.

    Raises:
        RequestValidationError: Rendered as a 422 like any other body error
    """
    try:
        return model.model_validate_json(data or "{}")
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False)) from e
