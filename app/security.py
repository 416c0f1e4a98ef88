"""Password hashing and signed session tokens."""

import datetime as dt
from typing import Any

import jwt
from passlib.hash import bcrypt

from app.config import get_settings

PASSWORD_MIN_LEN = 8


class InvalidSessionToken(Exception):
    """Raised when a session token is malformed, forged or expired."""


def hash_password(plain_password: str) -> str:
    settings = get_settings()
    return bcrypt.using(rounds=settings.BCRYPT_ROUNDS).hash(plain_password)


def verify_password(plain_password: str, hashed: str) -> bool:
    try:
        return bcrypt.verify(plain_password, hashed)
    except (ValueError, TypeError):
        return False


def create_session_token(user_id: int, username: str, now: dt.datetime | None = None) -> str:
    """Mint a signed token for ``user_id`` that expires after TOKEN_EXPIRE_MINUTES."""
    settings = get_settings()
    issued_at = now or dt.datetime.now(dt.timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "iat": issued_at,
        "exp": issued_at + dt.timedelta(minutes=settings.TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.TOKEN_ALGORITHM)


def decode_session_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry and return the claims.

    Raises InvalidSessionToken for anything that does not check out.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.TOKEN_ALGORITHM],
            options={"require": ["sub", "username", "iat", "exp"]},
        )
    except jwt.PyJWTError as exc:
        raise InvalidSessionToken(str(exc)) from exc

    try:
        claims["sub"] = int(claims["sub"])
    except (TypeError, ValueError) as exc:
        raise InvalidSessionToken("Invalid subject claim") from exc
    return claims


def token_max_age() -> int:
    """Cookie lifetime in seconds, kept equal to the token lifetime."""
    return get_settings().TOKEN_EXPIRE_MINUTES * 60
