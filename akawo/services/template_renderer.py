"""Localized response templates for confirmations, queries and errors.

Every response kind must have a template for every supported language; the
catalog is validated when a renderer is built, so a missing translation fails
at import time rather than in front of a trader. Unknown language codes fall
back to English.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

from akawo.domain.models import Language, ParsedTransaction, TransactionRecord, TransactionType

logger = logging.getLogger(__name__)


class TemplateRenderError(RuntimeError):
    """Raised when the catalog is incomplete or a template cannot be rendered."""


class ResponseKind(str, Enum):
    CONFIRMATION = "confirmation"
    MULTI_CONFIRMATION = "multi_confirmation"
    DEBTOR_LIST = "debtor_list"
    NO_DEBTORS = "no_debtors"
    TOTAL_INCOME = "total_income"
    TOTAL_INCOME_CUSTOMER = "total_income_customer"
    TOTAL_DEBT = "total_debt"
    TOTAL_DEBT_CUSTOMER = "total_debt_customer"
    CAPABILITIES = "capabilities"
    INFO = "info"
    NOT_UNDERSTOOD = "not_understood"
    BACKEND_APOLOGY = "backend_apology"


TEMPLATES: Mapping[ResponseKind, Mapping[Language, str]] = {
    ResponseKind.CONFIRMATION: {
        Language.EN: "Alright. I've recorded that {customer} {action} {amount} for {details}.",
        Language.YO: "O dáa. Mo ti kọ sílẹ̀ pé {customer} {action} {amount} fún {details}.",
        Language.IG: "Ọ dị mma. Edeela m na {customer} {action} {amount} maka {details}.",
        Language.HA: "Na gode. Na rubuta cewa {customer} ya {action} {amount} don {details}.",
    },
    ResponseKind.MULTI_CONFIRMATION: {
        Language.EN: "Alright. I've logged: {summary} for {customer}.",
        Language.YO: "O dáa. Mo ti kọ sílẹ̀: {summary} fún {customer}.",
        Language.IG: "Ọ dị mma. Edeela m: {summary} maka {customer}.",
        Language.HA: "Na gode. Na rubuta: {summary} don {customer}.",
    },
    ResponseKind.DEBTOR_LIST: {
        Language.EN: "Here are the people who owe you money: {debtors}.",
        Language.YO: "Àwọn tó jẹ́ ọ́ lówó nìyí: {debtors}.",
        Language.IG: "Ndị ji gị ụgwọ bụ: {debtors}.",
        Language.HA: "Ga waɗanda ke bin ka bashi: {debtors}.",
    },
    ResponseKind.NO_DEBTORS: {
        Language.EN: "You have no outstanding debts.",
        Language.YO: "Kò sí ẹnikẹ́ni tó jẹ́ ọ́ lówó.",
        Language.IG: "Onweghị onye ji gị ụgwọ.",
        Language.HA: "Babu wanda ke bin ka bashi.",
    },
    ResponseKind.TOTAL_INCOME: {
        Language.EN: "Your total income is {amount}.",
        Language.YO: "Pàápàá owó tó wọlé jẹ́ {amount}.",
        Language.IG: "Mgbakọta ego i nwetara bụ {amount}.",
        Language.HA: "Jimlar kudin da ka samu shine {amount}.",
    },
    ResponseKind.TOTAL_INCOME_CUSTOMER: {
        Language.EN: "Your total income from {customer} is {amount}.",
        Language.YO: "Owó tó wọlé látọ̀dọ̀ {customer} jẹ́ {amount}.",
        Language.IG: "Ego i nwetara n'aka {customer} bụ {amount}.",
        Language.HA: "Kudin da ka samu daga {customer} shine {amount}.",
    },
    ResponseKind.TOTAL_DEBT: {
        Language.EN: "Your total outstanding debt is {amount}.",
        Language.YO: "Pàápàá gbèsè tí wọ́n jẹ́ ọ́ jẹ́ {amount}.",
        Language.IG: "Mgbakọta ụgwọ a ji gị bụ {amount}.",
        Language.HA: "Jimlar bashin da ake bin ka shine {amount}.",
    },
    ResponseKind.TOTAL_DEBT_CUSTOMER: {
        Language.EN: "The total debt owed by {customer} is {amount}.",
        Language.YO: "Gbèsè tí {customer} jẹ́ ọ́ jẹ́ {amount}.",
        Language.IG: "Ụgwọ {customer} ji gị bụ {amount}.",
        Language.HA: "Bashin da {customer} ke bin ka shine {amount}.",
    },
    ResponseKind.CAPABILITIES: {
        Language.EN: (
            "Hello! I am akawọ́, your voice assistant for logging sales and "
            "tracking debts. How can I help you today?"
        ),
        Language.YO: (
            "E ku asiko yi! Èmi ni akawọ́, olùrànlọ́wọ́ yín fún ìṣirò owó. "
            "Báwo ni mo ṣe lè ràn yín lọ́wọ́ lónìí?"
        ),
        Language.IG: (
            "Ndeewo! Abụ m akawọ́, onye enyemaka gị maka idekọ ahịa na ụgwọ. "
            "Kedu ka m ga-esi nyere gị aka taa?"
        ),
        Language.HA: (
            "Sannu! Ni ne akawọ́, mataimakin ka na murya don rubuta "
            "tallace-tallace da bin diddigin basusuka. Yaya zan iya taimaka maka a yau?"
        ),
    },
    ResponseKind.INFO: {
        Language.EN: (
            "I am akawọ́, your personal finance assistant. You can tell me about "
            "your sales and debts, or ask me to list your debtors and total income or debt."
        ),
        Language.YO: (
            "Èmi ni akawọ́, olùrànlọ́wọ́ yín fún ìṣirò owó. Ẹ lè sọ fún mi nípa ọjà "
            "tẹ́ ẹ tà àti gbèsè, tàbí kí ẹ béèrè àwọn tó jẹ yín lówó àti gbogbo owó tó wọlé."
        ),
        Language.IG: (
            "Abụ m akawọ́, onye enyemaka ego gị. Ị nwere ike ịgwa m gbasara ahịa na "
            "ụgwọ gị, ma ọ bụ jụọ m maka ndị ji gị ụgwọ na ego ole i nwetara."
        ),
        Language.HA: (
            "Ni ne akawọ́, mataimakin ku na kuɗi. Kuna iya gaya mani game da "
            "tallace-tallace da basussuka, ko ku tambaye ni jerin sunayen masu bin "
            "ku bashi da jimlar kuɗin da aka samu."
        ),
    },
    ResponseKind.NOT_UNDERSTOOD: {
        Language.EN: (
            "Sorry, I did not understand. Please state the customer, amount, and "
            "reason, or ask your question."
        ),
        Language.YO: (
            "Ẹ jọ̀wọ́, n kò gbọ́ yé yín. Sọ orúkọ oníbàárà, iye owó, àti ìdí rẹ̀, "
            "tàbí béèrè ìbéèrè rẹ."
        ),
        Language.IG: (
            "Biko, aghọtaghị m. Gwa m onye ahịa, ego ole, na ihe kpatara ya, ma ọ "
            "bụ jụọ ajụjụ gị."
        ),
        Language.HA: (
            "Yi haƙuri, ban gane ba. Faɗi sunan abokin ciniki, nawa, da kuma "
            "dalili, ko yi tambayarka."
        ),
    },
    ResponseKind.BACKEND_APOLOGY: {
        Language.EN: "Sorry, something went wrong on our side. Please try again shortly.",
        Language.YO: "Ẹ jọ̀wọ́, ìṣòro kan wà ní ọ̀dọ̀ wa. Ẹ gbìyànjú lẹ́ẹ̀kan sí i láìpẹ́.",
        Language.IG: "Ndo, nsogbu dapụtara n'akụkụ anyị. Biko nwaa ọzọ n'oge na-adịghị anya.",
        Language.HA: "Yi haƙuri, an samu matsala daga bangarenmu. Da fatan za a sake gwadawa nan ba da jimawa ba.",
    },
}

TERMS: Mapping[str, Mapping[Language, str]] = {
    "paid": {Language.EN: "paid", Language.YO: "san", Language.IG: "kwụrụ", Language.HA: "biya"},
    "owed": {Language.EN: "owes", Language.YO: "gbà", Language.IG: "ji", Language.HA: "karɓi"},
    "payment_of": {
        Language.EN: "a payment of",
        Language.YO: "ìsanwó",
        Language.IG: "ịkwụ ụgwọ",
        Language.HA: "biya",
    },
    "debt_of": {
        Language.EN: "a debt of",
        Language.YO: "gbèsè",
        Language.IG: "ụgwọ",
        Language.HA: "bashi",
    },
    "and": {Language.EN: "and", Language.YO: "àti", Language.IG: "na", Language.HA: "da"},
    "for": {Language.EN: "for", Language.YO: "fún", Language.IG: "maka", Language.HA: "don"},
}

LIST_SEPARATOR = ". "


def format_amount(amount: int) -> str:
    return f"₦{amount:,}"


def match_customer(text: str, customers: Iterable[str]) -> str | None:
    """Return the known customer whose name appears in ``text`` (longest wins)."""

    haystack = (text or "").lower()
    found: str | None = None
    for customer in customers:
        name = (customer or "").strip()
        if not name or name.lower() not in haystack:
            continue
        if found is None or len(name) > len(found):
            found = name
    return found


class TemplateRenderer:
    """Render localized response text from a validated template catalog."""

    def __init__(
        self,
        templates: Mapping[ResponseKind, Mapping[Language, str]] = TEMPLATES,
        terms: Mapping[str, Mapping[Language, str]] = TERMS,
    ) -> None:
        _validate_catalog("template", {kind.value: templates.get(kind, {}) for kind in ResponseKind})
        _validate_catalog("term", terms)
        self._templates = templates
        self._terms = terms

    def render(self, kind: ResponseKind, language: Language | str | None, **slots: Any) -> str:
        lang = Language.resolve(language)
        template = self._templates[kind].get(lang) or self._templates[kind][Language.EN]
        try:
            return template.format(**slots)
        except KeyError as exc:
            raise TemplateRenderError(f"Missing slot for template '{kind.value}': {exc}") from exc

    def term(self, name: str, language: Language | str | None) -> str:
        lang = Language.resolve(language)
        return self._terms[name].get(lang) or self._terms[name][Language.EN]

    def compose(
        self,
        kind: ResponseKind,
        data: Mapping[str, Any] | None,
        language: Language | str | None,
    ) -> str:
        """Dispatch on ``kind`` with the slot data each kind expects."""

        data = data or {}
        if kind in (ResponseKind.CONFIRMATION, ResponseKind.MULTI_CONFIRMATION):
            return self.confirmation(data.get("transactions", []), language)
        if kind in (ResponseKind.DEBTOR_LIST, ResponseKind.NO_DEBTORS):
            return self.debtor_list(data.get("transactions", []), language)
        if kind in (
            ResponseKind.TOTAL_INCOME,
            ResponseKind.TOTAL_INCOME_CUSTOMER,
            ResponseKind.TOTAL_DEBT,
            ResponseKind.TOTAL_DEBT_CUSTOMER,
        ):
            tx_type = (
                TransactionType.INCOME
                if kind in (ResponseKind.TOTAL_INCOME, ResponseKind.TOTAL_INCOME_CUSTOMER)
                else TransactionType.DEBT
            )
            return self.total(int(data.get("total", 0)), tx_type, language, data.get("customer"))
        return self.render(kind, language)

    def confirmation(
        self,
        transactions: Sequence[ParsedTransaction | TransactionRecord],
        language: Language | str | None,
    ) -> str:
        if not transactions:
            return self.render(ResponseKind.NOT_UNDERSTOOD, language)

        if len(transactions) == 1:
            tx = transactions[0]
            action = self.term("owed" if tx.type == TransactionType.DEBT else "paid", language)
            return self.render(
                ResponseKind.CONFIRMATION,
                language,
                customer=tx.customer,
                action=action,
                amount=format_amount(tx.amount),
                details=tx.details,
            )

        groups: dict[str, list[str]] = {}
        for tx in transactions:
            term = self.term("debt_of" if tx.type == TransactionType.DEBT else "payment_of", language)
            groups.setdefault(tx.customer, []).append(f"{term} {format_amount(tx.amount)}")

        # The template names the last customer; earlier ones are named inline.
        conjunction = f" {self.term('and', language)} "
        customers = list(groups)
        parts = [
            f"{conjunction.join(groups[customer])} {self.term('for', language)} {customer}"
            for customer in customers[:-1]
        ]
        parts.append(conjunction.join(groups[customers[-1]]))
        return self.render(
            ResponseKind.MULTI_CONFIRMATION,
            language,
            summary=conjunction.join(parts),
            customer=customers[-1],
        )

    def debtor_list(
        self,
        transactions: Sequence[TransactionRecord],
        language: Language | str | None,
    ) -> str:
        balances: dict[str, int] = {}
        for tx in transactions:
            if tx.type != TransactionType.DEBT:
                continue
            balances[tx.customer] = balances.get(tx.customer, 0) + tx.amount

        if not balances:
            return self.render(ResponseKind.NO_DEBTORS, language)

        debtors = LIST_SEPARATOR.join(
            f"{customer}, {format_amount(amount)}" for customer, amount in balances.items()
        )
        return self.render(ResponseKind.DEBTOR_LIST, language, debtors=debtors)

    def total(
        self,
        total: int,
        tx_type: TransactionType,
        language: Language | str | None,
        customer: str | None = None,
    ) -> str:
        if tx_type == TransactionType.INCOME:
            kind = ResponseKind.TOTAL_INCOME_CUSTOMER if customer else ResponseKind.TOTAL_INCOME
        else:
            kind = ResponseKind.TOTAL_DEBT_CUSTOMER if customer else ResponseKind.TOTAL_DEBT
        return self.render(kind, language, amount=format_amount(total), customer=customer)

    def capabilities(self, language: Language | str | None) -> str:
        return self.render(ResponseKind.CAPABILITIES, language)

    def info(self, language: Language | str | None) -> str:
        return self.render(ResponseKind.INFO, language)

    def not_understood(self, language: Language | str | None) -> str:
        return self.render(ResponseKind.NOT_UNDERSTOOD, language)

    def apology(self, language: Language | str | None) -> str:
        return self.render(ResponseKind.BACKEND_APOLOGY, language)


def _validate_catalog(label: str, catalog: Mapping[str, Mapping[Language, str]]) -> None:
    missing = [
        f"{key}/{language.value}"
        for key, translations in catalog.items()
        for language in Language
        if not (translations.get(language) or "").strip()
    ]
    if missing:
        raise TemplateRenderError(f"Incomplete {label} catalog, missing: {', '.join(missing)}")


DEFAULT_RENDERER = TemplateRenderer()


def compose(kind: ResponseKind, data: Mapping[str, Any] | None, language: Language | str | None) -> str:
    """Render ``kind`` with the default catalog."""

    return DEFAULT_RENDERER.compose(kind, data, language)


__all__ = [
    "DEFAULT_RENDERER",
    "LIST_SEPARATOR",
    "ResponseKind",
    "TEMPLATES",
    "TERMS",
    "TemplateRenderError",
    "TemplateRenderer",
    "compose",
    "format_amount",
    "match_customer",
]
