"""Unit tests for password hashing, access tokens and one-time codes."""

from datetime import timedelta

import jwt
import pytest

from streamo.core.errors import AuthenticationError
from streamo.core.security import (
    INVITATION_ALPHABET,
    create_access_token,
    decode_access_token,
    generate_invitation_code,
    generate_otp,
    hash_password,
    verify_password,
)
from streamo.server.core.config import settings


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("secret123", rounds=4)
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)

    @pytest.mark.parametrize("stored", [None, "", "not-a-bcrypt-hash"])
    def test_missing_or_malformed_hash(self, stored):
        assert verify_password("secret123", stored) is False


class TestAccessTokens:
    def test_round_trip(self):
        assert decode_access_token(create_access_token("user-1")) == "user-1"

    def test_expired(self):
        token = create_access_token("user-1", expires_in=timedelta(seconds=-1))
        with pytest.raises(AuthenticationError, match="Token expired"):
            decode_access_token(token)

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "user-1"}, "another-secret", algorithm="HS256")
        with pytest.raises(AuthenticationError, match="Invalid token"):
            decode_access_token(token)

    def test_missing_subject(self):
        token = jwt.encode({"iat": 0}, settings.auth.jwt_secret, algorithm=settings.auth.jwt_algorithm)
        with pytest.raises(AuthenticationError):
            decode_access_token(token)

    def test_garbage(self):
        with pytest.raises(AuthenticationError):
            decode_access_token("not.a.token")


class TestCodes:
    def test_otp_is_numeric(self):
        code = generate_otp()
        assert len(code) == 6 and code.isdigit()

    def test_invitation_code_alphabet(self):
        code = generate_invitation_code()
        assert len(code) == 8
        assert set(code) <= set(INVITATION_ALPHABET)
