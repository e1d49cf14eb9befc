"""Text generation clients for intent classification and transaction extraction."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError
from fastapi.concurrency import run_in_threadpool
from google import genai
from google.genai import errors as genai_errors

from akawo.config.settings import BedrockConfig, GeminiConfig
from akawo.services.errors import BackendUnavailableError, LlmInvocationError

logger = logging.getLogger(__name__)


class TextGenerationClient(ABC):
    """One-shot prompt to text completion."""

    name: str = "llm"

    @abstractmethod
    async def invoke(self, *, system_prompt: str, user_prompt: str) -> str | None:
        """Return the model's text output, or ``None`` when it produced nothing."""


class BedrockLlmClient(TextGenerationClient):
    """Invoke Amazon Bedrock models through the ``converse`` API."""

    name = "bedrock"

    def __init__(self, client: Any, config: BedrockConfig) -> None:
        self._client = client
        self._config = config

    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str | None:
        """Run a Bedrock `converse` call and return the aggregate text output."""

        inference_cfg = {
            "maxTokens": max_tokens or self._config.max_tokens,
            "temperature": (
                temperature if temperature is not None else self._config.temperature
            ),
            "topP": self._config.top_p,
        }

        def _call() -> str:
            response = self._client.converse(
                modelId=self._config.model_id,
                system=[{"text": system_prompt}],
                messages=[{"role": "user", "content": [{"text": user_prompt}]}],
                inferenceConfig=inference_cfg,
            )
            content_blocks = (
                response.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            texts = [block.get("text", "") for block in content_blocks if block.get("text")]
            return "\n".join(texts).strip()

        try:
            result = await run_in_threadpool(_call)
        except EndpointConnectionError as exc:
            raise BackendUnavailableError(self.name, str(exc)) from exc
        except (BotoCoreError, ClientError) as exc:
            raise LlmInvocationError(str(exc)) from exc

        return result or None


class GeminiLlmClient(TextGenerationClient):
    """Invoke Google Gemini via the async ``google-genai`` client."""

    name = "gemini"

    def __init__(self, client: genai.Client, config: GeminiConfig) -> None:
        self._client = client
        self._model_name = config.model_name

    async def invoke(self, *, system_prompt: str, user_prompt: str) -> str | None:
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model_name,
                contents=user_prompt,
                config={"system_instruction": system_prompt, "temperature": 0.0},
            )
        except httpx.TransportError as exc:
            raise BackendUnavailableError(self.name, str(exc)) from exc
        except genai_errors.APIError as exc:
            raise LlmInvocationError(str(exc)) from exc

        text = (response.text or "").strip()
        return text or None


__all__ = [
    "BedrockLlmClient",
    "GeminiLlmClient",
    "LlmInvocationError",
    "TextGenerationClient",
]
