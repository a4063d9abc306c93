"""
Unit tests for token issuing/validation and password hashing
"""
from datetime import timedelta

import pytest
from jose import jwt

from conftest import make_user
from dental_supply.core.auth import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from dental_supply.core.config import settings
from dental_supply.core.exceptions import UnauthorizedError
from dental_supply.domain.user import UserRole


class TestTokens:

    def test_round_trip_carries_identity_and_role(self):
        token = create_access_token(make_user(7, UserRole.ADMIN))

        payload = decode_access_token(token)

        assert payload["sub"] == "7"
        assert payload["role"] == "admin"
        assert payload["exp"] - payload["iat"] == settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 3600

    def test_expired_token(self):
        token = create_access_token(make_user(), expires_delta=timedelta(seconds=-10))

        with pytest.raises(UnauthorizedError) as exc_info:
            decode_access_token(token)

        assert exc_info.value.message == "Token has expired"

    def test_wrong_signature(self):
        token = jwt.encode({"sub": "1", "role": "admin"}, "someone-else", algorithm="HS256")

        with pytest.raises(UnauthorizedError) as exc_info:
            decode_access_token(token)

        assert exc_info.value.message == "Token is not valid"

    def test_garbage_token(self):
        with pytest.raises(UnauthorizedError):
            decode_access_token("not.a.token")


class TestPasswords:

    def test_hash_verifies(self):
        hashed = hash_password("secret1")

        assert hashed != "secret1"
        assert verify_password("secret1", hashed)
        assert not verify_password("secret2", hashed)
