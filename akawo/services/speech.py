"""Text-to-speech backends returning base64-encoded audio."""

from __future__ import annotations

import base64
import logging
from abc import ABC, abstractmethod
from typing import Any

import spitch
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError
from fastapi.concurrency import run_in_threadpool

from akawo.config.settings import PollyConfig
from akawo.domain.models import Language
from akawo.services.errors import BackendUnavailableError, SpeechSynthesisError
from akawo.services.voices import POLLY_VOICE_POOLS, SPITCH_VOICE_POOLS, VoiceSelector

logger = logging.getLogger(__name__)


class SpeechSynthesizer(ABC):
    """Speak response text in the trader's language."""

    name: str = "speech"

    @abstractmethod
    async def synthesize(self, text: str, language: Language, owner_id: str) -> str:
        """
        Return base64-encoded audio for ``text``.

        Raises:
            SpeechSynthesisError: If the backend rejected the request.
            BackendUnavailableError: If the backend cannot be reached.
        """


class SpitchSpeechSynthesizer(SpeechSynthesizer):
    """Spitch voices for English, Yoruba, Igbo and Hausa."""

    name = "spitch"

    def __init__(self, client: spitch.Spitch, voices: VoiceSelector | None = None) -> None:
        self._client = client
        self._voices = voices or VoiceSelector(SPITCH_VOICE_POOLS, Language.YO)

    async def synthesize(self, text: str, language: Language, owner_id: str) -> str:
        if not text.strip():
            raise SpeechSynthesisError("Nothing to synthesize")
        voice = self._voices.select(language, owner_id)

        def _call() -> bytes:
            response = self._client.speech.generate(
                text=text,
                language=language.value,
                voice=voice,
            )
            return response.read()

        try:
            audio_bytes = await run_in_threadpool(_call)
        except spitch.APIConnectionError as exc:
            raise BackendUnavailableError(self.name, str(exc)) from exc
        except spitch.APIError as exc:
            logger.error("Spitch synthesis failed voice=%s language=%s: %s", voice, language.value, exc)
            raise SpeechSynthesisError(f"Failed to synthesize speech: {exc}") from exc

        if not audio_bytes:
            raise SpeechSynthesisError("Spitch returned an empty audio stream.")
        return base64.b64encode(audio_bytes).decode("ascii")


class PollySpeechSynthesizer(SpeechSynthesizer):
    """Amazon Polly MP3 synthesis with English voices."""

    name = "polly"

    def __init__(
        self,
        client: Any,
        config: PollyConfig,
        voices: VoiceSelector | None = None,
    ) -> None:
        self._client = client
        self._engine = config.engine
        self._voices = voices or VoiceSelector(POLLY_VOICE_POOLS, Language.EN)

    async def synthesize(self, text: str, language: Language, owner_id: str) -> str:
        if not text.strip():
            raise SpeechSynthesisError("Nothing to synthesize")
        voice_id = self._voices.select(language, owner_id)

        try:
            response: dict[str, Any] = await run_in_threadpool(
                self._client.synthesize_speech,
                Text=text,
                VoiceId=voice_id,
                Engine=self._engine,
                OutputFormat="mp3",
            )
        except EndpointConnectionError as exc:
            raise BackendUnavailableError(self.name, str(exc)) from exc
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Polly synth failed for voice '%s'", voice_id)
            raise SpeechSynthesisError(f"Failed to synthesize speech: {exc}") from exc

        audio_stream = response.get("AudioStream")
        if audio_stream is None:
            raise SpeechSynthesisError("Polly returned no audio stream.")
        audio_bytes = audio_stream.read()
        if not audio_bytes:
            raise SpeechSynthesisError("Polly returned an empty audio stream.")
        return base64.b64encode(audio_bytes).decode("ascii")


__all__ = [
    "PollySpeechSynthesizer",
    "SpeechSynthesisError",
    "SpeechSynthesizer",
    "SpitchSpeechSynthesizer",
]
