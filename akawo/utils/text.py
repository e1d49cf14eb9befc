"""Text folding helpers shared by the numeral parser and the intent detector."""

from __future__ import annotations

import unicodedata

_HOOKED_LETTERS = str.maketrans(
    {
        "ɗ": "d",
        "Ɗ": "d",
        "ƙ": "k",
        "Ƙ": "k",
        "ɓ": "b",
        "Ɓ": "b",
        "ƴ": "y",
        "Ƴ": "y",
        "’": "'",
        "‘": "'",
    }
)


def fold_text(text: str) -> str:
    """Lowercase ``text`` and strip tone marks, under-dots and hooked letters.

    ASR output for Yoruba, Igbo and Hausa is inconsistent about diacritics
    (``ẹgbẹ̀rún`` vs ``egberun``), so every lookup compares folded forms.
    """

    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.translate(_HOOKED_LETTERS).lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


__all__ = ["fold_text"]
