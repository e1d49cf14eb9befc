"""Exceptions surfaced by the voice command pipeline."""

from __future__ import annotations

from typing import Literal, Optional

from akawo.services.errors import (
    BackendUnavailableError,
    LlmInvocationError,
    SpeechSynthesisError,
    TranscriptionError,
)

ErrorKind = Literal["input", "backend"]


class VoiceCommandError(RuntimeError):
    """Terminal pipeline failure with a localized, optionally spoken, message.

    ``kind`` is ``"input"`` when the caller can fix the request (HTTP 400)
    and ``"backend"`` when an upstream service failed (HTTP 502).
    """

    def __init__(self, kind: ErrorKind, message: str, audio_content: Optional[str] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.audio_content = audio_content


class AudioNormalizationError(RuntimeError):
    """Raised when an upload cannot be decoded into usable PCM audio."""


class UploadRejectedError(RuntimeError):
    """Raised when an upload is too large or is not audio."""


class ConfigurationError(RuntimeError):
    """Raised at startup when a configured backend is missing credentials."""


__all__ = [
    "AudioNormalizationError",
    "BackendUnavailableError",
    "ConfigurationError",
    "ErrorKind",
    "LlmInvocationError",
    "SpeechSynthesisError",
    "TranscriptionError",
    "UploadRejectedError",
    "VoiceCommandError",
]
