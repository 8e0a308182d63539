"""
Security primitives.

Password hashing uses bcrypt, access tokens are HS256 JWTs carrying the user id
in ``sub``, and password reset codes are short numeric one-time codes stored
as bcrypt hashes.
"""

from __future__ import annotations

import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from streamo.core.errors import AuthenticationError
from streamo.server.core.config import settings

INVITATION_ALPHABET = string.ascii_uppercase + string.digits


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt using the configured cost factor."""
    salt = bcrypt.gensalt(rounds=rounds or settings.auth.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Check a password against a stored bcrypt hash."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


def create_access_token(user_id: str, expires_in: Optional[timedelta] = None) -> str:
    """Issue a signed access token for ``user_id``.

    Args:
        user_id: Identifier stored in the ``sub`` claim
        expires_in: Lifetime override; defaults to ``auth.token_expire_days``

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    lifetime = expires_in if expires_in is not None else timedelta(days=settings.auth.token_expire_days)
    payload = {"sub": user_id, "iat": now, "exp": now + lifetime}
    return jwt.encode(payload, settings.auth.jwt_secret, algorithm=settings.auth.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """Validate a token and return the user id it was issued for.

    Raises:
        AuthenticationError: When the token is expired, tampered with or malformed
    """
    try:
        payload = jwt.decode(token, settings.auth.jwt_secret, algorithms=[settings.auth.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid token") from e

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token")
    return str(user_id)


def generate_otp(length: int = 6) -> str:
    """Generate a numeric one-time code."""
    return "".join(secrets.choice(string.digits) for _ in range(length))


def generate_invitation_code(length: int = 8) -> str:
    """Generate an uppercase alphanumeric invitation code."""
    return "".join(secrets.choice(INVITATION_ALPHABET) for _ in range(length))
