"""Keyword-based intent detection for trader commands."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from akawo.application.interfaces import IntentClassifier
from akawo.domain.models import Intent
from akawo.utils.text import fold_text

logger = logging.getLogger(__name__)

DEFAULT_INTENT_ROOT = Path(__file__).resolve().parents[1] / "resources" / "intents"


@dataclass(frozen=True)
class IntentDefinition:
    """Static definition loaded from intent resources."""

    intent: Intent
    order: int
    keywords: Sequence[re.Pattern[str]]
    patterns: Sequence[re.Pattern[str]]

    def matches(self, folded_text: str) -> bool:
        return any(p.search(folded_text) for p in self.keywords) or any(
            p.search(folded_text) for p in self.patterns
        )


class LexicalIntentClassifier(IntentClassifier):
    """Test folded transcripts against ordered keyword sets; first match wins."""

    def __init__(self, intents: Sequence[IntentDefinition]) -> None:
        self._intents = tuple(sorted(intents, key=lambda definition: definition.order))

    @classmethod
    def from_directory(cls, root: Path = DEFAULT_INTENT_ROOT) -> "LexicalIntentClassifier":
        """Instantiate the classifier from all JSON files in ``root``."""

        intents: list[IntentDefinition] = []
        if not root.exists():
            logger.warning("Intent resource directory %s does not exist", root)
            return cls(intents)

        for intent_path in sorted(root.glob("*.json")):
            data = _load_json(intent_path)
            if not data:
                continue
            try:
                intent = Intent(data.get("id", intent_path.stem))
            except ValueError:
                logger.warning("Unknown intent id in %s", intent_path)
                continue
            intents.append(
                IntentDefinition(
                    intent=intent,
                    order=int(data.get("order", 100)),
                    keywords=_compile_keywords(data.get("keywords", [])),
                    patterns=_compile_patterns(data.get("patterns", [])),
                )
            )

        return cls(intents)

    def detect(self, transcript: str) -> Intent:
        if not transcript or not transcript.strip():
            return Intent.UNKNOWN

        folded = fold_text(transcript)
        for definition in self._intents:
            if definition.matches(folded):
                return definition.intent
        return Intent.UNKNOWN

    async def classify(self, text: str) -> Intent:
        return self.detect(text)

    @property
    def definitions(self) -> Sequence[IntentDefinition]:
        """Return the configured intent definitions in precedence order."""

        return self._intents


def _load_json(path: Path) -> Mapping[str, object]:
    try:
        with path.open("r", encoding="utf-8") as file:
            return json.load(file)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Invalid intent resource %s: %s", path, exc)
        return {}


def _compile_keywords(keywords: Iterable[str]) -> list[re.Pattern[str]]:
    compiled: list[re.Pattern[str]] = []
    for raw in keywords:
        folded = fold_text(raw).strip()
        if not folded:
            continue
        compiled.append(re.compile(rf"(?<!\w){re.escape(folded)}(?!\w)"))
    return compiled


def _compile_patterns(patterns: Iterable[str]) -> list[re.Pattern[str]]:
    return [re.compile(raw) for raw in patterns if raw]


__all__ = ["DEFAULT_INTENT_ROOT", "IntentDefinition", "LexicalIntentClassifier"]
