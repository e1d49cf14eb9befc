"""Bearer token decoding; tokens are issued by a separate auth service."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from akawo.config.settings import SecurityConfig, settings


class AuthenticationError(Exception):
    """Raised when a JWT cannot be decoded or is otherwise invalid."""


class TokenPayload(BaseModel):
    """Claims the backend relies on; ``sub`` is the owner id."""

    sub: str
    exp: datetime | None = None
    iat: datetime | None = None


def decode_access_token(token: str, security: SecurityConfig | None = None) -> TokenPayload:
    """Decode and validate a JWT access token, returning its payload."""

    security = security or settings.security
    secret = security.jwt_secret_key.get_secret_value()
    try:
        payload = jwt.decode(token, secret, algorithms=[security.jwt_algorithm])
        token_payload = TokenPayload.model_validate(payload)
    except (JWTError, ValidationError) as exc:
        raise AuthenticationError("Invalid authentication token") from exc
    if not token_payload.sub.strip():
        raise AuthenticationError("Token has an empty subject")
    return token_payload


def owner_from_authorization(header: Optional[str]) -> Optional[str]:
    """Best-effort owner id from an ``Authorization`` header, for log lines."""

    if not header or not header.lower().startswith("bearer "):
        return None
    try:
        return decode_access_token(header[7:].strip()).sub
    except AuthenticationError:
        return None


__all__ = [
    "AuthenticationError",
    "TokenPayload",
    "decode_access_token",
    "owner_from_authorization",
]
