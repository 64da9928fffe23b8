"""
Security Utilities.

Accounts are identified by their email address (the username). Passwords
are stored as bcrypt hashes; sessions are stateless access tokens signed
with the JWT secret whose ``sub`` claim names the account.
"""

from datetime import timedelta

import bcrypt
from jose import JWTError, jwt

from notehub.backend.core.config import get_app_config, get_settings
from notehub.backend.core.exceptions import AuthenticationError, ValidationError
from notehub.backend.core.logging import get_logger
from notehub.backend.core.utils import utc_now

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72
TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    """
    Hash a password for storage.

    Raises:
        ValidationError: If the UTF-8 encoded password exceeds what bcrypt accepts
    """
    secret = password.encode("utf-8")
    if len(secret) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
    return bcrypt.hashpw(secret, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    secret = password.encode("utf-8")
    if len(secret) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(secret, hashed_password.encode("utf-8"))


def create_access_token(username: str, expires_delta: timedelta | None = None) -> str:
    """
    Sign an access token for an account.

    Args:
        username: The account's email address, carried as ``sub``
        expires_delta: Lifetime override; defaults to the configured minutes
    """
    jwt_config = get_app_config().security.jwt
    issued_at = utc_now()
    lifetime = expires_delta or timedelta(minutes=jwt_config.access_token_expire_minutes)

    claims = {
        "sub": username,
        "type": TOKEN_TYPE,
        "aud": jwt_config.audience,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, get_settings().jwt_secret, algorithm=jwt_config.algorithm)


def decode_access_token(token: str) -> str:
    """
    Validate an access token and return the username it was issued for.

    Raises:
        AuthenticationError: If the signature, audience, expiry, type or
            subject does not check out
    """
    jwt_config = get_app_config().security.jwt
    try:
        claims = jwt.decode(
            token,
            get_settings().jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token rejected", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token")

    username = claims.get("sub")
    if claims.get("type") != TOKEN_TYPE or not username:
        logger.warning("Token rejected", extra={"error": "wrong type or missing subject"})
        raise AuthenticationError("Invalid or expired token")
    return username
