"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from enum import Enum
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from catalog.core.authorization import Role
from catalog.core.config import settings
from catalog.schemas.auth import CurrentUser

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
EMAIL_MAX_LEN = 100

# Claims every token must carry; anything less is MALFORMED.
REQUIRED_CLAIMS = ("sub", "username", "role", "iat", "exp")


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. False for malformed hashes."""
    try:
        pw_bytes = plain_password.encode("utf-8")[:72]
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


@lru_cache
def _dummy_hash() -> str:
    return hash_password("catalog-timing-dummy")


def burn_password_check(plain_password: str) -> None:
    """
    Run a bcrypt verification against a throwaway hash.

    Called when a login names an unknown user so the response takes as long as
    a wrong-password login and does not reveal which usernames exist.
    """
    verify_password(plain_password, _dummy_hash())


class TokenErrorKind(str, Enum):
    MALFORMED = "MALFORMED"
    SIGNATURE_INVALID = "SIGNATURE_INVALID"
    EXPIRED = "EXPIRED"


class TokenError(Exception):
    """Raised by decode_access_token; kind says why the token was rejected."""

    def __init__(self, kind: TokenErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message)


def create_access_token(user: Any, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token for user (anything with id, username and role).

    Claims: sub (user id), username, role, iat, exp. expires_delta defaults to
    JWT_EXPIRE_MINUTES; there is no revocation, so the lifetime is the only
    bound on a leaked token.
    """
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    role = user.role.value if isinstance(user.role, Role) else str(user.role)
    payload: dict[str, Any] = {
        "sub": str(user.id),
        "username": user.username,
        "role": role,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> CurrentUser:
    """
    Verify signature and expiry and return the identity the token asserts.

    Raises TokenError (EXPIRED, SIGNATURE_INVALID or MALFORMED). Stateless:
    the database is not consulted.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenError(TokenErrorKind.EXPIRED, "Token has expired") from e
    except jwt.InvalidSignatureError as e:
        raise TokenError(TokenErrorKind.SIGNATURE_INVALID, "Token signature is invalid") from e
    except jwt.PyJWTError as e:
        raise TokenError(TokenErrorKind.MALFORMED, "Token is malformed") from e

    try:
        return CurrentUser(
            id=int(payload["sub"]),
            username=str(payload["username"]),
            role=Role(payload["role"]),
        )
    except (TypeError, ValueError) as e:
        raise TokenError(TokenErrorKind.MALFORMED, "Invalid token payload") from e
