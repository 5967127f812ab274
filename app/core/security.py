# app/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt
from pydantic import ValidationError

from app.core.config import get_settings
from app.models.user import User
from app.schemas.user import PASSWORD_MAX_LENGTH, TokenClaims

settings = get_settings()


class InvalidTokenError(Exception):
    """Token is malformed, badly signed, expired or lacks required claims."""


# ----- Passwords -----


def hash_password(password: str, rounds: int | None = None) -> str:
    """
    Hash a plaintext password with a fresh bcrypt salt.

    Args:
        password: plaintext, at most 72 bytes (enforced by the schemas).
        rounds: bcrypt work factor, defaults to BCRYPT_ROUNDS.
    """
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Constant-time check of `password` against a stored bcrypt hash.

    Passwords over 72 bytes never match: stored hashes only cover
    passwords up to that size and bcrypt would otherwise truncate.
    """
    secret = password.encode("utf-8")
    if len(secret) > PASSWORD_MAX_LENGTH:
        return False
    try:
        return bcrypt.checkpw(secret, password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


# ----- Tokens -----


def create_access_token(user: User, expires_delta: timedelta | None = None) -> str:
    """
    Sign a JWT carrying {userId, email, role}.

    Expiry defaults to JWT_EXPIRE_DAYS.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.JWT_EXPIRE_DAYS))
    claims = TokenClaims(user_id=user.id, email=user.email, role=user.role)

    payload: dict[str, Any] = claims.model_dump(by_alias=True, mode="json")
    payload["iat"] = now
    payload["exp"] = expire
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    Decode and verify a bearer token.

    Verification:
      - signature (JWT_SECRET / JWT_ALGORITHM)
      - expiration time (exp)
      - presence and shape of userId / email / role

    Raises:
        InvalidTokenError: on any failure.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc

    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as exc:
        raise InvalidTokenError("Token missing userId/email/role") from exc
