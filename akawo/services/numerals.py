"""Spoken-number parsing for English, Yoruba, Igbo and Hausa amounts."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Iterator, Mapping, Sequence

from akawo.domain.models import Language
from akawo.utils.text import fold_text

_TOKEN_SPLIT = re.compile(r"[\s,\-–—]+")
_DIGITS = re.compile(r"[0-9]+")
_DIGIT_GROUP_SEPARATOR = re.compile(r"(?<=[0-9]),(?=[0-9]{3}(?![0-9]))")
_THOUSAND_SUFFIX = re.compile(r"\b([0-9]+)\s?k\b", re.IGNORECASE)
_CURRENCY_PREFIX = re.compile(r"(₦|\bNGN\s?|\bN(?=[0-9]))", re.IGNORECASE)
_LITERAL_NOISE = re.compile(r"[\s,._'’₦]")


@dataclass(frozen=True)
class NumeralWord:
    """Lexicon entry: integer value plus whether it scales its neighbour."""

    value: int
    multiplier: bool = False


@dataclass(frozen=True)
class NumeralLexicon:
    words: Mapping[str, NumeralWord]
    conjunctions: frozenset[str]
    # Yoruba, Igbo and Hausa say "thousand two" for 2000.
    multiplier_first: bool


@dataclass(frozen=True)
class AmountSpan:
    """Numeral run found in a token list (``end`` is exclusive)."""

    start: int
    end: int
    value: int


def _lexicon(
    words: Mapping[str, int],
    multipliers: Mapping[str, int],
    conjunctions: Sequence[str],
    *,
    multiplier_first: bool,
) -> NumeralLexicon:
    entries: dict[str, NumeralWord] = {}
    for word, value in words.items():
        entries[fold_text(word)] = NumeralWord(value)
    for word, value in multipliers.items():
        entries[fold_text(word)] = NumeralWord(value, multiplier=True)
    return NumeralLexicon(
        words=entries,
        conjunctions=frozenset(fold_text(word) for word in conjunctions),
        multiplier_first=multiplier_first,
    )


LEXICONS: Mapping[Language, NumeralLexicon] = {
    Language.EN: _lexicon(
        {
            "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
            "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
            "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14,
            "fifteen": 15, "sixteen": 16, "seventeen": 17, "eighteen": 18,
            "nineteen": 19, "twenty": 20, "thirty": 30, "forty": 40,
            "fifty": 50, "sixty": 60, "seventy": 70, "eighty": 80,
            "ninety": 90,
        },
        {"hundred": 100, "thousand": 1_000, "million": 1_000_000},
        ("and",),
        multiplier_first=False,
    ),
    Language.YO: _lexicon(
        {
            "ọ̀kan": 1, "kan": 1, "ení": 1, "méjì": 2, "eéjì": 2, "mẹ́ta": 3,
            "ẹ̀ta": 3, "mẹ́rin": 4, "ẹ̀rin": 4, "márùn": 5, "àrún": 5,
            "mẹ́fà": 6, "ẹ̀fà": 6, "méje": 7, "eéje": 7, "mẹ́jọ": 8, "ẹ̀jọ": 8,
            "mẹ́sàn": 9, "ẹ̀sán": 9, "mẹ́wàá": 10, "ẹ̀wá": 10, "ogún": 20,
            "ọgbọ̀n": 30, "ogójì": 40, "àádọ́ta": 50, "ọgọ́ta": 60,
            "àádọ́rin": 70, "ọgọ́rin": 80, "àádọ́rùn": 90, "igba": 200,
            "ẹgbàá": 2_000, "ọ̀kẹ́": 20_000,
        },
        {"ọgọ́rùn": 100, "ẹgbẹ̀rún": 1_000, "mílíọ̀nù": 1_000_000},
        ("àti", "sì", "lé"),
        multiplier_first=True,
    ),
    Language.IG: _lexicon(
        {
            "otu": 1, "abụọ": 2, "atọ": 3, "anọ": 4, "ise": 5, "isii": 6,
            "asaa": 7, "asatọ": 8, "itoolu": 9, "iteghete": 9,
        },
        {"iri": 10, "narị": 100, "puku": 1_000, "nde": 1_000_000},
        ("na",),
        multiplier_first=True,
    ),
    Language.HA: _lexicon(
        {
            "ɗaya": 1, "biyu": 2, "uku": 3, "huɗu": 4, "biyar": 5, "shida": 6,
            "bakwai": 7, "takwas": 8, "tara": 9, "goma": 10, "ashirin": 20,
            "talatin": 30, "arba'in": 40, "hamsin": 50, "sittin": 60,
            "saba'in": 70, "tamanin": 80, "casa'in": 90,
        },
        {"ɗari": 100, "dubu": 1_000, "miliyan": 1_000_000},
        ("da", "sha"),
        multiplier_first=True,
    ),
}


class NumeralNormalizer:
    """Convert spoken amounts ("dubu biyu", "two thousand", "2,000") to integers."""

    def __init__(self, lexicons: Mapping[Language, NumeralLexicon] = LEXICONS) -> None:
        self._lexicons = lexicons

    @staticmethod
    def prepare(text: str) -> str:
        """Normalize currency marks and digit grouping, preserving letter case."""

        prepared = unicodedata.normalize("NFC", text or "")
        prepared = _DIGIT_GROUP_SEPARATOR.sub("", prepared)
        prepared = _THOUSAND_SUFFIX.sub(lambda m: str(int(m.group(1)) * 1_000), prepared)
        prepared = _CURRENCY_PREFIX.sub(" ", prepared)
        prepared = re.sub(r"\bnaira\b", " ", prepared, flags=re.IGNORECASE)
        return prepared

    @staticmethod
    def tokenize(text: str) -> list[str]:
        return [token for token in _TOKEN_SPLIT.split(text) if token]

    def lexicon(self, language: Language | str) -> NumeralLexicon:
        return self._lexicons.get(Language.resolve(language), self._lexicons[Language.EN])

    def to_integer(self, phrase: str, language: Language | str) -> int:
        """Return the amount spoken in ``phrase``; 0 means no valid amount."""

        tokens = self.tokenize(self.prepare(phrase))
        value, recognized = self._read(tokens, language)
        if recognized:
            return value
        return _parse_literal(phrase)

    def is_numeral(self, token: str, language: Language | str) -> bool:
        """True when ``token`` is a digit run or a number word in ``language`` or English."""

        if _DIGITS.fullmatch(token):
            return True
        folded = _strip_punctuation(fold_text(token))
        return (
            folded in self.lexicon(language).words
            or folded in self._lexicons[Language.EN].words
        )

    def scan(self, tokens: Sequence[str], language: Language | str) -> list[AmountSpan]:
        """Find maximal numeral runs in ``tokens``.

        Conjunctions only join a run when a numeral follows them ("two thousand
        and five"). Each run is read with the utterance language first and with
        English second, since traders code-switch freely.
        """

        lexicon = self.lexicon(language)
        english = self._lexicons[Language.EN]
        conjunctions = lexicon.conjunctions | english.conjunctions
        spans: list[AmountSpan] = []
        index = 0
        while index < len(tokens):
            if not self.is_numeral(tokens[index], language):
                index += 1
                continue
            end = index + 1
            while end < len(tokens):
                if self.is_numeral(tokens[end], language):
                    end += 1
                    continue
                folded = _strip_punctuation(fold_text(tokens[end]))
                if (
                    folded in conjunctions
                    and end + 1 < len(tokens)
                    and self.is_numeral(tokens[end + 1], language)
                ):
                    end += 2
                    continue
                break
            value, _ = self._read(tokens[index:end], language)
            spans.append(AmountSpan(start=index, end=end, value=value))
            index = end
        return spans

    def find_amounts(self, text: str, language: Language | str) -> list[AmountSpan]:
        """Scan free text for spoken or written amounts (token offsets)."""

        return self.scan(self.tokenize(self.prepare(text)), language)

    def _read(self, tokens: Sequence[str], language: Language | str) -> tuple[int, int]:
        """Return ``(value, recognized)`` for the reading that knows more tokens.

        The utterance language is tried first and English second; English only
        wins when it recognizes more of the run ("2 thousand" in Igbo speech).
        """

        lexicon = self.lexicon(language)
        value, recognized = _evaluate(tokens, lexicon)
        english = self._lexicons[Language.EN]
        if lexicon is english:
            return value, recognized
        en_value, en_recognized = _evaluate(tokens, english)
        if en_recognized > recognized or (en_recognized == recognized and value <= 0 < en_value):
            return en_value, en_recognized
        return value, recognized


class _LeadingReading:
    """Running state for languages that say the multiplier first ("dubu biyu").

    A scale word (hundred and above) stays in force over everything spoken
    after it until the next scale word, so "dubu goma sha biyar" is
    1000 x 15. Sub-hundred multipliers such as Igbo "iri" only scale the
    next plain number.
    """

    def __init__(self) -> None:
        self.total = 0
        self.outer = 1
        self.scale = 0
        self.group = 0
        self.tens = 0

    def plain(self, value: int) -> None:
        if self.tens:
            self.group += self.tens * value
            self.tens = 0
        else:
            self.group += value

    def conjunction(self) -> None:
        self.group += self.tens
        self.tens = 0

    def multiplier(self, value: int) -> None:
        if value < 100:
            self.group += self.tens
            self.tens = value
            return
        if self.scale and not (self.group or self.tens) and value < self.scale:
            # "dubu ɗari biyu": the smaller scale belongs to the larger one's multiplicand.
            self.outer *= self.scale
            self.scale = value
            return
        self.close()
        self.scale = value

    def close(self) -> None:
        spoken = self.group + self.tens
        if self.scale:
            self.total += self.outer * self.scale * (spoken or 1)
        else:
            self.total += spoken
        self.outer, self.scale, self.group, self.tens = 1, 0, 0, 0


def _entries(tokens: Sequence[str], lexicon: NumeralLexicon) -> Iterator[NumeralWord | None]:
    """Yield lexicon entries in order; ``None`` marks a conjunction, unknown tokens are skipped."""

    for raw in tokens:
        token = _strip_punctuation(fold_text(raw))
        if not token:
            continue
        if token in lexicon.conjunctions:
            yield None
        elif _DIGITS.fullmatch(token):
            yield NumeralWord(int(token))
        elif token in lexicon.words:
            yield lexicon.words[token]


def _evaluate(tokens: Sequence[str], lexicon: NumeralLexicon) -> tuple[int, int]:
    """Return the value of ``tokens`` and how many number tokens were recognized."""

    recognized = 0
    if lexicon.multiplier_first:
        reading = _LeadingReading()
        for entry in _entries(tokens, lexicon):
            if entry is None:
                reading.conjunction()
                continue
            recognized += 1
            if entry.multiplier:
                reading.multiplier(entry.value)
            else:
                reading.plain(entry.value)
        reading.close()
        return reading.total, recognized

    total = 0
    accumulator = 0
    for entry in _entries(tokens, lexicon):
        if entry is None:
            total += accumulator
            accumulator = 0
            continue
        recognized += 1
        if entry.multiplier and entry.value >= 1_000:
            total += (accumulator or 1) * entry.value
            accumulator = 0
        elif entry.multiplier:
            accumulator = entry.value if accumulator == 0 else accumulator * entry.value
        else:
            accumulator += entry.value
    return total + accumulator, recognized


def _strip_punctuation(token: str) -> str:
    return token.strip(".,;:!?\"()[]")


def _parse_literal(phrase: str) -> int:
    residue = _LITERAL_NOISE.sub("", phrase or "")
    residue = re.sub(r"(?i)^(ngn|n)", "", residue)
    if _DIGITS.fullmatch(residue):
        return int(residue)
    return 0


__all__ = ["AmountSpan", "LEXICONS", "NumeralLexicon", "NumeralNormalizer", "NumeralWord"]
