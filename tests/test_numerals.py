"""Spoken amount parsing across the four supported languages."""

from __future__ import annotations

import pytest

from akawo.domain.models import Language
from akawo.services.numerals import NumeralNormalizer


@pytest.fixture
def numerals() -> NumeralNormalizer:
    return NumeralNormalizer()


@pytest.mark.parametrize(
    ("phrase", "language", "expected"),
    [
        ("two thousand", Language.EN, 2000),
        ("one thousand five hundred", Language.EN, 1500),
        ("two thousand and five", Language.EN, 2005),
        ("ẹgbẹ̀rún méjì", Language.YO, 2000),
        ("egberun meji", Language.YO, 2000),
        ("puku abụọ", Language.IG, 2000),
        ("dubu biyu", Language.HA, 2000),
        ("dubu uku", Language.HA, 3000),
        ("2,500", Language.EN, 2500),
        ("₦3000", Language.HA, 3000),
        ("5k", Language.EN, 5000),
    ],
)
def test_to_integer(numerals: NumeralNormalizer, phrase: str, language: Language, expected: int) -> None:
    assert numerals.to_integer(phrase, language) == expected


def test_unparseable_phrase_is_zero(numerals: NumeralNormalizer) -> None:
    assert numerals.to_integer("no amount here", Language.EN) == 0
    assert numerals.to_integer("", Language.YO) == 0


def test_english_numbers_inside_yoruba_speech(numerals: NumeralNormalizer) -> None:
    spans = numerals.find_amounts("Tolu san two thousand", Language.YO)

    assert [span.value for span in spans] == [2000]


def test_find_amounts_separates_runs(numerals: NumeralNormalizer) -> None:
    spans = numerals.find_amounts("Ada paid 2000, owes 3000", Language.EN)

    assert [span.value for span in spans] == [2000, 3000]


def test_conjunction_without_following_number_ends_run(numerals: NumeralNormalizer) -> None:
    spans = numerals.find_amounts("two thousand and rice", Language.EN)

    assert [span.value for span in spans] == [2000]
    assert spans[0].end == 2


@pytest.mark.parametrize("digits", ["0", "7", "42", "1000", "250000", "1000000"])
@pytest.mark.parametrize("language", list(Language))
def test_digit_strings_parse_as_integers(numerals: NumeralNormalizer, digits: str, language: Language) -> None:
    assert numerals.to_integer(digits, language) == int(digits)


@pytest.mark.parametrize("language", [Language.YO, Language.IG, Language.HA])
def test_english_scale_word_after_digits(numerals: NumeralNormalizer, language: Language) -> None:
    spans = numerals.find_amounts("Ngozi paid 2 thousand", language)

    assert [span.value for span in spans] == [2000]
    assert numerals.to_integer("2 thousand", language) == 2000


@pytest.mark.parametrize(
    ("phrase", "language", "expected"),
    [
        ("dubu goma sha biyar", Language.HA, 15_000),
        ("goma sha biyar", Language.HA, 15),
        ("dubu biyu da ɗari biyar", Language.HA, 2_500),
        ("dubu ɗari biyu", Language.HA, 200_000),
        ("puku iri na ise", Language.IG, 15_000),
        ("iri na ise", Language.IG, 15),
        ("iri abụọ", Language.IG, 20),
        ("puku abụọ na narị ise", Language.IG, 2_500),
        ("ẹgbẹ̀rún méjì àti ọgọ́rùn márùn", Language.YO, 2_500),
        ("dubu", Language.HA, 1_000),
    ],
)
def test_leading_scale_covers_compound_numbers(
    numerals: NumeralNormalizer, phrase: str, language: Language, expected: int
) -> None:
    assert numerals.to_integer(phrase, language) == expected
