"""Utility helpers for the Akawo backend."""

from .security import (
    AuthenticationError,
    TokenPayload,
    decode_access_token,
    owner_from_authorization,
)
from .text import fold_text

__all__ = [
    "AuthenticationError",
    "TokenPayload",
    "decode_access_token",
    "fold_text",
    "owner_from_authorization",
]
