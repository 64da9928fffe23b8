"""
Unit Tests for Security Module.

bcrypt and JWT run for real; only the config boundary is stubbed, with
real Pydantic schema objects.
"""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from jose import jwt as jose_jwt

from notehub.backend.core.config_schema import JwtSchema
from notehub.backend.core.exceptions import AuthenticationError, ValidationError
from notehub.backend.core.security import (
    BCRYPT_MAX_BYTES,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-testing-purposes"


@pytest.fixture
def jwt_config():
    return JwtSchema(
        algorithm="HS256",
        access_token_expire_minutes=30,
        audience="test-api",
    )


@pytest.fixture
def _stub_config(jwt_config):
    settings = SimpleNamespace(jwt_secret=TEST_JWT_SECRET)
    app_config = SimpleNamespace(security=SimpleNamespace(jwt=jwt_config))
    with (
        patch("notehub.backend.core.security.get_settings", return_value=settings),
        patch("notehub.backend.core.security.get_app_config", return_value=app_config),
    ):
        yield


def raw_claims(token: str) -> dict:
    return jose_jwt.decode(token, TEST_JWT_SECRET, algorithms=["HS256"], audience="test-api")


def forge(claims: dict, secret: str = TEST_JWT_SECRET) -> str:
    return jose_jwt.encode(claims, secret, algorithm="HS256")


# =============================================================================
# Passwords
# =============================================================================


class TestPasswords:
    def test_hash_is_bcrypt_and_salted(self):
        first = hash_password("password123")

        assert first.startswith("$2b$")
        assert first != hash_password("password123")

    def test_correct_password_verifies(self):
        hashed = hash_password("correct-horse-battery-staple")
        assert verify_password("correct-horse-battery-staple", hashed) is True

    def test_wrong_password_fails(self):
        hashed = hash_password("correct-horse-battery-staple")
        assert verify_password("wrong-password", hashed) is False

    def test_unicode_password(self):
        password = "contraseña-sécurité-пароль"
        assert verify_password(password, hash_password(password)) is True

    def test_rejects_password_longer_than_bcrypt_input(self):
        # 40 characters but 80 bytes once encoded
        password = "é" * 40

        with pytest.raises(ValidationError):
            hash_password(password)

    def test_overlong_password_never_verifies(self):
        hashed = hash_password("a" * BCRYPT_MAX_BYTES)

        assert verify_password("a" * (BCRYPT_MAX_BYTES + 1), hashed) is False


# =============================================================================
# Access Tokens
# =============================================================================


@pytest.mark.usefixtures("_stub_config")
class TestCreateAccessToken:
    def test_names_the_account(self):
        token = create_access_token("student@foo.com")

        assert decode_access_token(token) == "student@foo.com"

    def test_carries_type_audience_and_lifetime(self):
        claims = raw_claims(create_access_token("student@foo.com"))

        assert claims["type"] == "access"
        assert claims["aud"] == "test-api"
        assert claims["exp"] - claims["iat"] == 30 * 60

    def test_custom_lifetime(self):
        claims = raw_claims(create_access_token("u", expires_delta=timedelta(hours=24)))

        assert claims["exp"] - claims["iat"] == 24 * 60 * 60


@pytest.mark.usefixtures("_stub_config")
class TestDecodeAccessToken:
    def test_garbage(self):
        with pytest.raises(AuthenticationError):
            decode_access_token("not-a-jwt-token")

    def test_tampered_signature(self):
        token = create_access_token("student@foo.com")
        with pytest.raises(AuthenticationError):
            decode_access_token(token[:-4] + "XXXX")

    def test_expired(self):
        token = create_access_token("student@foo.com", expires_delta=timedelta(seconds=-1))
        with pytest.raises(AuthenticationError):
            decode_access_token(token)

    @pytest.mark.parametrize("claims, secret", [
        ({"sub": "student@foo.com", "type": "access", "aud": "test-api"}, "completely-different-secret"),
        ({"sub": "student@foo.com", "type": "access", "aud": "other-api"}, TEST_JWT_SECRET),
        ({"sub": "student@foo.com", "type": "refresh", "aud": "test-api"}, TEST_JWT_SECRET),
        ({"type": "access", "aud": "test-api"}, TEST_JWT_SECRET),
    ], ids=["wrong-secret", "wrong-audience", "wrong-type", "no-subject"])
    def test_rejects_forged_tokens(self, claims, secret):
        with pytest.raises(AuthenticationError, match="Invalid or expired token"):
            decode_access_token(forge(claims, secret))
