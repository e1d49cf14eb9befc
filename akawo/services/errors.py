"""Exceptions raised by the external service clients."""

from __future__ import annotations


class BackendUnavailableError(RuntimeError):
    """Raised when a transcription, model or speech backend cannot be reached."""

    def __init__(self, backend: str, message: str | None = None) -> None:
        self.backend = backend
        super().__init__(message or f"{backend} backend is unavailable")


class TranscriptionError(RuntimeError):
    """Raised when a speech-to-text backend rejects or fails a request."""


class LlmInvocationError(RuntimeError):
    """Raised when a text generation call fails."""


class SpeechSynthesisError(RuntimeError):
    """Raised when text-to-speech synthesis fails."""


__all__ = [
    "BackendUnavailableError",
    "LlmInvocationError",
    "SpeechSynthesisError",
    "TranscriptionError",
]
