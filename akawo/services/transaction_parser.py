"""Rule-based transaction extraction used when no language model is configured.

The parser works clause by clause. Within a clause each action keyword binds
the nearest amount that follows it; an amount spoken before any keyword
waits for the next keyword in the same clause. Customers carry over between
clauses, so "Ngozi paid 1000, remaining 2000" logs both entries for Ngozi.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Sequence

from akawo.application.interfaces import TransactionExtractor
from akawo.domain.models import Language, ParsedTransaction, TransactionType
from akawo.domain.placeholders import default_customer, default_details
from akawo.services.numerals import AmountSpan, NumeralNormalizer
from akawo.utils.text import fold_text

logger = logging.getLogger(__name__)

_CLAUSE_SPLIT = re.compile(r"[,.;:!?]+(?:\s+|$)|\s+(?:but|then|ṣùgbọ́n|amma|mana)\s+", re.IGNORECASE)
_PUNCTUATION = ".,;:!?\"()[]"

INCOME_KEYWORDS = frozenset(
    fold_text(word)
    for word in (
        "paid", "pay", "pays", "collected", "deposited", "gave",
        "san", "sanwó", "kwụrụ", "kwụọ", "biya",
    )
)

DEBT_KEYWORDS = frozenset(
    fold_text(word)
    for word in (
        "owes", "owe", "owing", "owed", "remaining", "remains", "balance", "took", "credit",
        "kù", "kú", "gbà", "jẹ", "ji", "jide", "ụgwọ", "karɓi", "bashi", "saura",
    )
)

ITEM_VERBS = frozenset(fold_text(word) for word in ("sold", "bought", "ta", "rà", "rere", "zụrụ", "sayar", "saya"))
ITEM_MARKERS = frozenset(fold_text(word) for word in ("for", "fún", "maka", "don"))

# Function words that end an item phrase and are never customer names.
STOPWORDS = frozenset(
    fold_text(word)
    for word in (
        # English
        "i", "he", "she", "they", "we", "you", "it", "his", "her", "him", "them",
        "the", "a", "an", "and", "but", "so", "then", "also", "is", "was", "are",
        "to", "from", "with", "my", "me", "today", "yesterday", "customer",
        "mr", "mrs", "madam", "oga",
        # Yoruba
        "mo", "mi", "o", "ó", "wọ́n", "emi", "èmi", "àti", "sì", "ṣùgbọ́n", "ni", "lo",
        "fún", "fun", "pé", "lónìí", "ọjà", "oníbàárà",
        # Igbo
        "m", "ọ", "ha", "anyị", "ma", "na", "nye", "n'aka", "taa", "onye",
        # Hausa
        "na", "ta", "ya", "sun", "kuma", "amma", "ga", "da", "daga", "yau", "wa",
    )
)

_ITEM_BOUNDARY = STOPWORDS | ITEM_MARKERS


def _clean(token: str) -> str:
    return token.strip(_PUNCTUATION)


def _folded(token: str) -> str:
    return fold_text(_clean(token))


def keyword_type(token: str) -> TransactionType | None:
    folded = _folded(token)
    if folded in INCOME_KEYWORDS:
        return TransactionType.INCOME
    if folded in DEBT_KEYWORDS:
        return TransactionType.DEBT
    return None


@dataclass
class _ClauseReading:
    tokens: Sequence[str]
    amounts: List[AmountSpan]
    names: List[str] = field(default_factory=list)
    item: str | None = None
    marked_item: str | None = None


class PatternTransactionExtractor(TransactionExtractor):
    """Extract transactions from keyword banks and numeral runs."""

    def __init__(self, numerals: NumeralNormalizer | None = None) -> None:
        self._numerals = numerals or NumeralNormalizer()

    async def extract(self, text: str, language: Language) -> List[ParsedTransaction]:
        return self.parse(text, language)

    def parse(self, text: str, language: Language | str) -> List[ParsedTransaction]:
        language = Language.resolve(language)
        prepared = self._numerals.prepare(text or "")
        clauses = [clause for clause in _CLAUSE_SPLIT.split(prepared) if clause and clause.strip()]

        transactions: list[ParsedTransaction] = []
        last_customer: str | None = None
        last_item: str | None = None

        for clause in clauses:
            reading = self._read_clause(clause, language)
            if reading.names:
                last_customer = reading.names[-1]
            clause_item = reading.marked_item or reading.item

            for tx_type, amount in self._bind_amounts(reading):
                customer = last_customer or default_customer(language)
                if tx_type == TransactionType.INCOME:
                    details = clause_item or last_item or default_details(language)
                elif reading.marked_item:
                    details = reading.marked_item
                elif last_item:
                    details = f"Remaining balance for {last_item}"
                else:
                    details = clause_item or default_details(language)
                transactions.append(
                    ParsedTransaction(customer=customer, details=details, amount=amount, type=tx_type)
                )

            if clause_item:
                last_item = clause_item

        if not transactions:
            logger.info("Pattern extractor found no transactions language=%s", language.value)
        return transactions

    def _read_clause(self, clause: str, language: Language) -> _ClauseReading:
        tokens = self._numerals.tokenize(clause)
        spans = self._numerals.scan(tokens, language)
        numeral_positions = {index for span in spans for index in range(span.start, span.end)}

        names = [
            _clean(token)
            for index, token in enumerate(tokens)
            if index not in numeral_positions and self._is_name(token)
        ]
        reading = _ClauseReading(tokens=tokens, amounts=[], names=names)

        item_positions: set[int] = set()
        for index, token in enumerate(tokens):
            folded = _folded(token)
            if folded in ITEM_MARKERS and reading.marked_item is None:
                phrase, used = self._item_phrase(tokens, index + 1, numeral_positions, allow_numerals=False)
                if phrase:
                    reading.marked_item = phrase
                    item_positions.update(used)
            elif folded in ITEM_VERBS and reading.item is None:
                start = index + 1
                if folded == "sayar" and start < len(tokens) and _folded(tokens[start]) == "da":
                    start += 1
                phrase, used = self._item_phrase(tokens, start, numeral_positions, allow_numerals=True)
                if phrase:
                    reading.item = phrase
                    item_positions.update(used)

        # Quantities inside an item phrase ("two bags of rice") are not prices.
        reading.amounts = [span for span in spans if span.start not in item_positions and span.value > 0]
        return reading

    def _item_phrase(
        self,
        tokens: Sequence[str],
        start: int,
        numeral_positions: set[int],
        *,
        allow_numerals: bool,
        limit: int = 4,
    ) -> tuple[str | None, set[int]]:
        words: list[str] = []
        used: set[int] = set()
        index = start
        while index < len(tokens) and len(words) < limit:
            token = tokens[index]
            folded = _folded(token)
            if not folded or folded in _ITEM_BOUNDARY or keyword_type(token) or self._is_name(token):
                break
            if index in numeral_positions and not allow_numerals:
                break
            words.append(_clean(token))
            used.add(index)
            index += 1

        if all(index in numeral_positions for index in used):
            return None, set()
        return " ".join(words), used

    def _is_name(self, token: str) -> bool:
        cleaned = _clean(token)
        if len(cleaned) < 2 or not cleaned[0].isupper():
            return False
        folded = fold_text(cleaned)
        if folded in STOPWORDS or folded in ITEM_VERBS or folded in ITEM_MARKERS:
            return False
        if keyword_type(cleaned) is not None:
            return False
        return not any(char.isdigit() for char in cleaned)

    @staticmethod
    def _bind_amounts(reading: _ClauseReading) -> list[tuple[TransactionType, int]]:
        span_at = {span.start: span for span in reading.amounts}
        bound: list[tuple[TransactionType, int]] = []
        pending: TransactionType | None = None
        waiting: list[int] = []

        index = 0
        while index < len(reading.tokens):
            span = span_at.get(index)
            if span is not None:
                if pending is not None:
                    bound.append((pending, span.value))
                    pending = None
                else:
                    waiting.append(span.value)
                index = span.end
                continue

            tx_type = keyword_type(reading.tokens[index])
            if tx_type is not None:
                if waiting:
                    bound.append((tx_type, waiting.pop(0)))
                else:
                    pending = tx_type
            index += 1

        return bound


__all__ = [
    "DEBT_KEYWORDS",
    "INCOME_KEYWORDS",
    "PatternTransactionExtractor",
    "keyword_type",
]
