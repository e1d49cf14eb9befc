"""Pydantic models for validating LLM responses.

Both the intent classifier and the transaction extractor run model output
through these helpers so that downstream code receives normalized, type-safe
objects.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from akawo.domain.models import Intent, TransactionType

_LABEL_NOISE = re.compile(r"[^a-z_]")


class ResponseContractError(RuntimeError):
    """Raised when the LLM response contract cannot be validated."""


class ExtractedTransactionPayload(BaseModel):
    """One element of the extraction array, before placeholders are applied."""

    customer: Optional[str] = None
    details: Optional[str] = None
    amount: int
    type: TransactionType

    model_config = {"extra": "ignore"}

    @field_validator("customer", "details", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("amount", mode="before")
    @classmethod
    def round_amount(cls, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError("amount must be a number")
        if isinstance(value, str):
            value = value.replace(",", "").replace("₦", "").strip()
        number = float(value)
        if not math.isfinite(number):
            raise ValueError("amount must be finite")
        return int(round(number))

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        return str(value).strip().lower() if value is not None else value

    @model_validator(mode="after")
    def positive_amount(self) -> "ExtractedTransactionPayload":
        if self.amount <= 0:
            raise ValueError("amount must be positive")
        return self


class IntentClassificationResponse(BaseModel):
    intent: Intent
    confidence: Optional[float] = None

    @model_validator(mode="after")
    def normalize_confidence(self) -> "IntentClassificationResponse":
        if self.confidence is not None:
            self.confidence = max(0.0, min(1.0, float(self.confidence)))
        return self

    @classmethod
    def from_label(cls, payload: str) -> "IntentClassificationResponse":
        """Accept a bare label (``query_debtors``) or a JSON object with ``intent``."""

        cleaned = _clean_json_payload(payload)
        if cleaned.startswith("{"):
            try:
                return cls.model_validate(json.loads(cleaned))
            except json.JSONDecodeError as exc:
                raise ResponseContractError(f"Invalid intent JSON: {exc}") from exc
            except ValidationError as exc:
                raise ResponseContractError(f"Invalid intent payload: {exc}") from exc

        label = _LABEL_NOISE.sub("", cleaned.strip().lower().replace(" ", "_"))
        try:
            return cls(intent=Intent(label))
        except ValueError as exc:
            raise ResponseContractError(f"Unknown intent label: {payload!r}") from exc


class TransactionExtractionResponse(BaseModel):
    """Validated extraction output; malformed entries are dropped, not fatal."""

    transactions: List[ExtractedTransactionPayload] = Field(default_factory=list)
    rejected: int = 0

    @classmethod
    def from_json(cls, payload: str) -> "TransactionExtractionResponse":
        cleaned = _clean_json_payload(payload, opening="[", closing="]")
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ResponseContractError(f"Invalid extraction JSON: {exc}") from exc
        if not isinstance(data, list):
            raise ResponseContractError("Extraction output must be a JSON array")

        accepted: list[ExtractedTransactionPayload] = []
        rejected = 0
        for item in data:
            if not isinstance(item, dict):
                rejected += 1
                continue
            try:
                accepted.append(ExtractedTransactionPayload.model_validate(item))
            except (ValidationError, ValueError, TypeError):
                rejected += 1
        return cls(transactions=accepted, rejected=rejected)


def _clean_json_payload(payload: str, opening: str = "{", closing: str = "}") -> str:
    """Strip Markdown code blocks and cut the text down to the outermost brackets."""
    if not payload:
        return ""

    cleaned = payload.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    cleaned = cleaned.strip()

    start = cleaned.find(opening)
    end = cleaned.rfind(closing)

    if start != -1 and end != -1 and end > start:
        cleaned = cleaned[start : end + 1]

    return cleaned


__all__ = [
    "ExtractedTransactionPayload",
    "IntentClassificationResponse",
    "ResponseContractError",
    "TransactionExtractionResponse",
]
