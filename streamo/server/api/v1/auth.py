"""
Authentication Endpoints.

Sign-up, login, password reset with one-time codes, and staff impersonation.
Access tokens are returned in the response body and sent back by clients as
``Authorization: Bearer <token>``.
"""

from datetime import timedelta

from fastapi import APIRouter, status

from streamo.core.database.base import utc_now
from streamo.core.database.entities.users import User
from streamo.core.database.repositories.users import UserRepository
from streamo.core.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceUnavailableError,
    UpstreamError,
    ValidationFailedError,
)
from streamo.core.logging_config import get_logger
from streamo.core.models.domain.enums import UserRole
from streamo.core.models.io.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ImpersonateRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyOtpRequest,
)
from streamo.core.models.io.common import MessageResponse
from streamo.core.models.io.users import UserRead
from streamo.core.security import create_access_token, generate_otp, hash_password, verify_password
from streamo.server.core.config import settings
from streamo.server.services import invitations as invitation_service
from streamo.server.services.deps import AdminUser, CurrentUser, SessionDep
from streamo.server.services.mailer import send_reset_code

logger = get_logger(__name__)

router = APIRouter()

RESET_REQUESTED = "If an account with that email exists, a password reset code has been sent"
INVALID_CODE = "Invalid or expired reset code"


def _auth_response(message: str, user: User, with_token: bool = True) -> AuthResponse:
    return AuthResponse(
        message=message,
        user=UserRead.model_validate(user),
        token=create_access_token(user.id) if with_token else None,
    )


async def _user_with_valid_code(session: SessionDep, email: str, code: str) -> User:
    user = await UserRepository(session).get_by_email(email)
    if (
        user is None
        or not user.reset_code_hash
        or user.reset_code_expires_at is None
        or user.reset_code_expires_at <= utc_now()
        or not verify_password(code, user.reset_code_hash)
    ):
        raise ValidationFailedError(INVALID_CODE)
    return user


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an artist or label owner account. A valid invitation code approves the account immediately.",
    response_description="The new user, with a token when the account is already approved.",
    responses={
        201: {"description": "Account created"},
        404: {"description": "Unknown invitation code"},
        409: {"description": "Email already registered"},
        410: {"description": "Invitation code used or expired"},
    },
)
async def register(payload: RegisterRequest, session: SessionDep) -> AuthResponse:
    """
    Register a new account.

    Without an invitation code the account waits for staff approval and no token is issued.
    """
    users = UserRepository(session)
    if await users.get_by_email(payload.email):
        raise ConflictError("Email already exists")

    invitation = None
    if payload.invitation_code:
        invitation = await invitation_service.get_valid_invitation(session, payload.invitation_code)

    user = await users.create(
        User(
            name=payload.name.strip(),
            email=payload.email,
            password_hash=hash_password(payload.password),
            role=payload.role.value,
            is_approved=invitation is not None,
            invited_by=invitation.created_by if invitation else None,
            last_password_changed=utc_now(),
        )
    )
    if invitation is not None:
        await invitation_service.redeem(session, invitation, user.id)

    logger.info(f"Registered user {user.id} ({user.role}), approved={user.is_approved}")
    if user.is_approved:
        return _auth_response("Registration successful", user)
    return _auth_response("Registration successful. Your account is awaiting approval.", user, with_token=False)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login",
    description="Exchange email and password for an access token.",
    response_description="The user and an access token.",
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Account deactivated or awaiting approval"},
    },
)
async def login(payload: LoginRequest, session: SessionDep) -> AuthResponse:
    """Log in with email and password."""
    users = UserRepository(session)
    user = await users.get_by_email(payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    if not user.is_active:
        raise PermissionDeniedError("Account is deactivated")
    if not user.is_approved:
        raise PermissionDeniedError("Account is awaiting approval")

    user.last_login = utc_now()
    user = await users.update(user)
    logger.info(f"User {user.id} logged in")
    return _auth_response("Login successful", user)


@router.get(
    "/me",
    response_model=UserRead,
    summary="Current User",
    description="Return the account the access token belongs to.",
)
async def me(user: CurrentUser) -> UserRead:
    return UserRead.model_validate(user)


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Request Password Reset",
    description="Email a six digit reset code. The response does not reveal whether the email is registered.",
)
async def forgot_password(payload: ForgotPasswordRequest, session: SessionDep) -> MessageResponse:
    """
    Start a password reset.

    The code is stored as a bcrypt hash with an expiry of ``AUTH__OTP_EXPIRE_MINUTES``.
    Mail delivery problems are logged but not reported to the caller.
    """
    users = UserRepository(session)
    user = await users.get_by_email(payload.email)
    if user is None:
        logger.info("Password reset requested for an unknown email")
        return MessageResponse(message=RESET_REQUESTED)

    code = generate_otp()
    expire_minutes = settings.auth.otp_expire_minutes
    user.reset_code_hash = hash_password(code)
    user.reset_code_expires_at = utc_now() + timedelta(minutes=expire_minutes)
    await users.update(user)

    try:
        await send_reset_code(user.email, code, expire_minutes)
    except (ServiceUnavailableError, UpstreamError) as e:
        logger.warning(f"Reset code for user {user.id} was not mailed: {e.detail}")
    return MessageResponse(message=RESET_REQUESTED)


@router.post(
    "/verify-otp",
    response_model=MessageResponse,
    summary="Verify Reset Code",
    description="Check a reset code without consuming it.",
    responses={400: {"description": "Invalid or expired code"}},
)
async def verify_otp(payload: VerifyOtpRequest, session: SessionDep) -> MessageResponse:
    await _user_with_valid_code(session, payload.email, payload.otp)
    return MessageResponse(message="Code verified")


@router.post(
    "/verify-otp-reset-password",
    response_model=MessageResponse,
    summary="Reset Password",
    description="Set a new password using a valid reset code. The code is consumed.",
    responses={400: {"description": "Invalid or expired code"}},
)
async def reset_password(payload: ResetPasswordRequest, session: SessionDep) -> MessageResponse:
    user = await _user_with_valid_code(session, payload.email, payload.otp)
    user.password_hash = hash_password(payload.new_password)
    user.reset_code_hash = None
    user.reset_code_expires_at = None
    user.last_password_changed = utc_now()
    await UserRepository(session).update(user)
    logger.info(f"Password reset for user {user.id}")
    return MessageResponse(message="Password has been reset successfully")


@router.post(
    "/impersonate",
    response_model=AuthResponse,
    summary="Impersonate User",
    description="Staff only. Issue a token that acts as another account.",
    responses={
        400: {"description": "Cannot impersonate yourself"},
        403: {"description": "Admins cannot impersonate superadmins"},
        404: {"description": "User not found"},
    },
)
async def impersonate(payload: ImpersonateRequest, actor: AdminUser, session: SessionDep) -> AuthResponse:
    target = await UserRepository(session).get_by_id(payload.user_id)
    if target is None:
        raise NotFoundError("User", payload.user_id)
    if target.id == actor.id:
        raise ValidationFailedError("You cannot impersonate yourself")
    if target.role == UserRole.superadmin.value and actor.role != UserRole.superadmin.value:
        raise PermissionDeniedError("Admins cannot impersonate superadmins")

    logger.warning(f"User {actor.id} is impersonating user {target.id}")
    return _auth_response(f"Now acting as {target.name}", target)
