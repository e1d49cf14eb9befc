"""Request ingestion helpers (Stage 01 of the voice pipeline)."""

from __future__ import annotations

import mimetypes
from typing import Final

from fastapi import UploadFile

from .errors import UploadRejectedError

# Browsers and some recorders omit the type or send a generic one.
_PASSTHROUGH_CONTENT_TYPES: Final[set[str]] = {"", "application/octet-stream"}


def resolve_content_type(content_type: str | None, filename: str | None = None) -> str:
    """Return the upload's media type, guessing from the filename when missing."""

    resolved = (content_type or "").split(";", 1)[0].strip().lower()
    if not resolved and filename:
        guessed_type, _ = mimetypes.guess_type(filename)
        resolved = guessed_type or ""
    return resolved


def validate_upload(audio_bytes: bytes, content_type: str | None, max_bytes: int) -> None:
    """Reject empty, oversized and non-audio uploads before any decoding happens."""

    if not audio_bytes:
        raise UploadRejectedError("Uploaded audio file is empty")
    if len(audio_bytes) > max_bytes:
        raise UploadRejectedError(
            f"Uploaded audio is {len(audio_bytes)} bytes; the limit is {max_bytes}"
        )
    resolved = (content_type or "").strip().lower()
    if resolved in _PASSTHROUGH_CONTENT_TYPES:
        return
    if not resolved.startswith("audio/"):
        raise UploadRejectedError(f"Unsupported content type '{resolved}', expected audio/*")


async def read_audio_bytes(audio_file: UploadFile) -> tuple[bytes, str]:
    """Load the upload fully into memory and resolve its content type."""

    audio_bytes = await audio_file.read()
    await audio_file.close()
    return audio_bytes, resolve_content_type(audio_file.content_type, audio_file.filename)


__all__ = ["read_audio_bytes", "resolve_content_type", "validate_upload"]
