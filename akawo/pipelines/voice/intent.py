"""Intent classification stage (Stage 04) of the voice pipeline."""

from __future__ import annotations

import logging

from akawo.application.interfaces import IntentClassifier
from akawo.domain.models import Intent
from akawo.services.llm_client import TextGenerationClient
from akawo.services.response_contract import IntentClassificationResponse, ResponseContractError

from .errors import LlmInvocationError
from .prompts import INTENT_LABELS, build_intent_prompt

logger = logging.getLogger("akawo.pipeline")

FALLBACK_INTENT = Intent.ASK_CAPABILITIES


class LlmIntentClassifier(IntentClassifier):
    """Ask a text generation model for one label from the closed intent set."""

    def __init__(self, client: TextGenerationClient) -> None:
        self._client = client

    async def classify(self, text: str) -> Intent:
        if not text or not text.strip():
            return FALLBACK_INTENT

        system_prompt, user_prompt = build_intent_prompt(text)
        try:
            raw_response = await self._client.invoke(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
            )
        except LlmInvocationError as exc:
            logger.warning("Intent classifier invocation failed: %s", exc)
            return FALLBACK_INTENT

        if not raw_response:
            logger.warning("Intent classifier returned an empty response")
            return FALLBACK_INTENT

        try:
            intent = IntentClassificationResponse.from_label(raw_response).intent
        except ResponseContractError as exc:
            logger.warning("Intent classifier invalid label: %s raw=%s", exc, raw_response)
            return FALLBACK_INTENT

        if intent not in INTENT_LABELS:
            logger.warning("Intent classifier returned a non-routable label: %s", intent.value)
            return FALLBACK_INTENT
        return intent


__all__ = ["FALLBACK_INTENT", "IntentClassifier", "LlmIntentClassifier"]
