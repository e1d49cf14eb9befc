"""Deterministic voice selection so each trader always hears the same voice."""

from __future__ import annotations

from typing import Mapping, Sequence

from akawo.domain.models import Language

SPITCH_VOICE_POOLS: Mapping[Language, Sequence[str]] = {
    Language.YO: ("sade", "segun", "femi", "funmi"),
    Language.IG: ("ngozi", "amara", "obinna", "ebuka"),
    Language.HA: ("amina", "aliyu", "hasan", "zainab"),
    Language.EN: ("john", "jude", "lina", "lucy", "henry"),
}

# Polly has no Yoruba, Igbo or Hausa voices; every language reads in English.
POLLY_VOICE_POOLS: Mapping[Language, Sequence[str]] = {
    Language.EN: ("Joanna", "Matthew", "Amy", "Brian"),
}


def owner_hash(owner_id: str) -> int:
    """Signed 32-bit rolling hash (``h * 31 + code point``) of ``owner_id``."""

    value = 0
    for char in owner_id or "":
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


class VoiceSelector:
    """Pick a voice from the language's pool by hashing the owner id."""

    def __init__(
        self,
        pools: Mapping[Language, Sequence[str]] = SPITCH_VOICE_POOLS,
        default_language: Language = Language.YO,
    ) -> None:
        if not pools.get(default_language):
            raise ValueError(f"Voice pools have no entries for default language {default_language.value}")
        empty = [language.value for language, voices in pools.items() if not voices]
        if empty:
            raise ValueError(f"Empty voice pools: {', '.join(empty)}")
        self._pools = pools
        self._default_language = default_language

    def pool(self, language: Language | str | None) -> Sequence[str]:
        try:
            resolved = Language(language) if language is not None else None
        except ValueError:
            resolved = None
        return self._pools.get(resolved, self._pools[self._default_language])

    def select(self, language: Language | str | None, owner_id: str) -> str:
        voices = self.pool(language)
        return voices[abs(owner_hash(owner_id)) % len(voices)]


__all__ = ["POLLY_VOICE_POOLS", "SPITCH_VOICE_POOLS", "VoiceSelector", "owner_hash"]
