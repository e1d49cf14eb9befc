"""Transcription stage (Stage 03) of the voice pipeline."""

from __future__ import annotations

import logging

from akawo.domain.models import Language
from akawo.services.transcribe import TranscriptionService

from .errors import TranscriptionError
from .normalization import NormalizedAudio

logger = logging.getLogger("akawo.pipeline")
transcript_logger = logging.getLogger("akawo.logs.transcript")


async def transcribe_audio(
    service: TranscriptionService,
    audio: NormalizedAudio,
    language: Language,
) -> str | None:
    """Return the stripped transcript, or ``None`` when nothing was heard.

    ``BackendUnavailableError`` propagates; backend rejections become ``None``.
    """

    try:
        text = await service.transcribe(audio.wav_bytes, language)
    except TranscriptionError as exc:
        logger.warning("Transcription backend=%s failed: %s", service.name, exc)
        return None

    text = (text or "").strip()
    if not text:
        logger.info("Transcription backend=%s returned no text", service.name)
        return None

    transcript_logger.info(
        "backend=%s language=%s duration=%.2fs text=%s",
        service.name,
        language.value,
        audio.duration_seconds,
        text,
    )
    return text


__all__ = ["transcribe_audio"]
