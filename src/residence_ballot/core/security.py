"""JWT access token helpers."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import jwt

from residence_ballot.core.settings import settings


def create_access_token(subject: str, extra_claims: dict[str, str] | None = None) -> str:
    """Create JWT access token for user authentication."""
    to_encode: dict[str, object] = {"sub": subject}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, object]:
    """Decode and verify an access token.

    Raises:
        jose.JWTError: If the signature, expiry or format is invalid.
    """
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
