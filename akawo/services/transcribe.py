"""Speech-to-text backends for normalized command audio."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from akawo.config.settings import GeminiConfig, WhisperConfig
from akawo.domain.models import Language
from akawo.services.errors import BackendUnavailableError, TranscriptionError

logger = logging.getLogger(__name__)

_LANGUAGE_NAMES = {
    Language.EN: "English",
    Language.YO: "Yoruba",
    Language.IG: "Igbo",
    Language.HA: "Hausa",
}


class TranscriptionService(ABC):
    """Abstract base class for speech-to-text backends."""

    name: str = "transcription"

    @abstractmethod
    async def transcribe(self, audio: bytes, language: Language) -> str | None:
        """
        Transcribe mono 16 kHz WAV bytes.

        Returns:
            The transcript, or ``None`` when the backend heard nothing or
            rejected the request.

        Raises:
            BackendUnavailableError: If the backend cannot be reached.
        """


class WhisperTranscriptionService(TranscriptionService):
    """Post WAV audio to a hosted Whisper inference endpoint."""

    name = "whisper"

    def __init__(self, config: WhisperConfig, client: httpx.AsyncClient | None = None) -> None:
        self._endpoint = config.endpoint_url
        self._api_key = config.api_key.get_secret_value() if config.api_key else ""
        self._timeout = config.timeout_seconds
        self._client = client

    async def transcribe(self, audio: bytes, language: Language) -> str | None:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "audio/wav",
            "Accept": "application/json",
        }
        try:
            if self._client is not None:
                response = await self._client.post(self._endpoint, content=audio, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._endpoint, content=audio, headers=headers)
        except httpx.TransportError as exc:
            raise BackendUnavailableError(self.name, str(exc)) from exc

        if response.is_error:
            logger.error(
                "Whisper transcription failed status=%s body=%s",
                response.status_code,
                response.text[:500],
            )
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.error("Whisper returned a non-JSON body: %s", response.text[:500])
            return None

        text = payload.get("text") if isinstance(payload, dict) else None
        if not isinstance(text, str) or not text.strip():
            return None
        return text.strip()


class GeminiTranscriptionService(TranscriptionService):
    """Transcribe inline WAV audio with a Gemini multimodal model."""

    name = "gemini"

    def __init__(self, client: genai.Client, config: GeminiConfig) -> None:
        self._client = client
        self._model_name = config.transcription_model_name

    async def transcribe(self, audio: bytes, language: Language) -> str | None:
        instruction = (
            f"Transcribe this {_LANGUAGE_NAMES.get(language, 'English')} audio verbatim. "
            "Speakers may mix in English words and naira amounts. "
            "Return only the transcript text, with no commentary. "
            "If nothing intelligible is said, return an empty response."
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model_name,
                contents=[
                    instruction,
                    types.Part.from_bytes(data=audio, mime_type="audio/wav"),
                ],
            )
        except httpx.TransportError as exc:
            raise BackendUnavailableError(self.name, str(exc)) from exc
        except genai_errors.APIError as exc:
            logger.error("Gemini transcription failed: %s", exc)
            return None

        text = (response.text or "").strip()
        return text or None


__all__ = [
    "GeminiTranscriptionService",
    "TranscriptionError",
    "TranscriptionService",
    "WhisperTranscriptionService",
]
