"""Per-language defaults used when a transcript names no customer or item."""

from __future__ import annotations

from akawo.domain.models import Language

DEFAULT_CUSTOMERS = {
    Language.EN: "Customer",
    Language.YO: "Oníbàárà",
    Language.IG: "Onye ahịa",
    Language.HA: "Abokin ciniki",
}

DEFAULT_DETAILS = {
    Language.EN: "Goods",
    Language.YO: "Ọjà",
    Language.IG: "Ngwa ahịa",
    Language.HA: "Kaya",
}


def default_customer(language: Language | str | None) -> str:
    return DEFAULT_CUSTOMERS[Language.resolve(language)]


def default_details(language: Language | str | None) -> str:
    return DEFAULT_DETAILS[Language.resolve(language)]


def is_placeholder_customer(name: str | None) -> bool:
    if not name:
        return True
    folded = name.strip().lower()
    return any(folded == value.lower() for value in DEFAULT_CUSTOMERS.values())


__all__ = [
    "DEFAULT_CUSTOMERS",
    "DEFAULT_DETAILS",
    "default_customer",
    "default_details",
    "is_placeholder_customer",
]
