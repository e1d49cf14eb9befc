"""Transaction extraction stage (Stage 05) of the voice pipeline."""

from __future__ import annotations

import logging
from typing import List

from akawo.application.interfaces import TransactionExtractor
from akawo.domain.models import Language, ParsedTransaction
from akawo.domain.placeholders import default_customer, default_details, is_placeholder_customer
from akawo.services.llm_client import TextGenerationClient
from akawo.services.response_contract import ResponseContractError, TransactionExtractionResponse

from .errors import LlmInvocationError
from .prompts import build_extraction_prompt

logger = logging.getLogger("akawo.pipeline")


def bind_pronoun_customers(
    transactions: List[ParsedTransaction],
    language: Language,
) -> List[ParsedTransaction]:
    """Give placeholder-customer entries the last customer named before them."""

    bound: list[ParsedTransaction] = []
    last_named: str | None = None
    for tx in transactions:
        if is_placeholder_customer(tx.customer):
            if last_named is not None:
                tx = tx.model_copy(update={"customer": last_named})
            elif tx.customer != default_customer(language):
                tx = tx.model_copy(update={"customer": default_customer(language)})
        else:
            last_named = tx.customer
        bound.append(tx)
    return bound


class LlmTransactionExtractor(TransactionExtractor):
    """Extract transactions with a text generation model and validate the array."""

    def __init__(self, client: TextGenerationClient) -> None:
        self._client = client

    async def extract(self, text: str, language: Language) -> List[ParsedTransaction]:
        if not text or not text.strip():
            return []

        system_prompt, user_prompt = build_extraction_prompt(text, language)
        try:
            raw_response = await self._client.invoke(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
            )
        except LlmInvocationError as exc:
            logger.warning("Transaction extractor invocation failed: %s", exc)
            return []

        if not raw_response:
            return []

        try:
            parsed = TransactionExtractionResponse.from_json(raw_response)
        except ResponseContractError as exc:
            logger.warning("Transaction extractor invalid output: %s raw=%s", exc, raw_response[:500])
            return []

        if parsed.rejected:
            logger.info("Dropped %s malformed extraction entries", parsed.rejected)

        transactions = [
            ParsedTransaction(
                customer=entry.customer or default_customer(language),
                details=entry.details or default_details(language),
                amount=entry.amount,
                type=entry.type,
            )
            for entry in parsed.transactions
        ]
        return bind_pronoun_customers(transactions, language)


__all__ = ["LlmTransactionExtractor", "TransactionExtractor", "bind_pronoun_customers"]
