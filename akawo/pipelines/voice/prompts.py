"""Prompt construction for the model-backed intent and extraction stages."""

from __future__ import annotations

from akawo.domain.models import Intent, Language
from akawo.domain.placeholders import default_customer, default_details

INTENT_LABELS = (
    Intent.LOG_TRANSACTION,
    Intent.QUERY_DEBTORS,
    Intent.QUERY_TOTAL_INCOME,
    Intent.QUERY_TOTAL_DEBT,
    Intent.ASK_CAPABILITIES,
)

INTENT_SYSTEM_PROMPT = f"""
You classify voice commands for akawọ́, a bookkeeping assistant used by Nigerian
market traders. Commands arrive as transcripts in English, Yoruba, Igbo or Hausa,
often mixing languages.

Answer with exactly one label and nothing else: {", ".join(label.value for label in INTENT_LABELS)}.

- log_transaction: the trader states a sale, a payment or a remaining debt.
  "Aisha bought rice, she paid 10k and owes 5k"
  "Mo ta fufu merin fun Femi, o san ẹgbẹ̀rún méjì, ó ku ẹgbẹ̀rún márùn"
  "Na sayar da shinkafa ga Obi, ya biya dubu biyu, saura dubu daya"
- query_debtors: the trader asks who owes them money.
  "Show me the people who are owing me" / "Ta lo je mi lowo?" /
  "Kedu ndị ji m ụgwọ?" / "Su wanene ke bina bashi?"
- query_total_income: the trader asks for total income or profit.
  "what is my total profit" / "Kí ni gbogbo owó tó wọlé?" /
  "Ego ole ka m nwetara na mkpokọta?" / "Nawa ne jimlar kudin da na samu?"
- query_total_debt: the trader asks for total outstanding debt.
  "how much do people owe me in total" / "Èló ni gbogbo gbèsè tí wọ́n jẹ́ mi?" /
  "Mgbakọta ụgwọ ole ka a ji m?" / "Nawa ne jimlar bashin da ake bina?"
- ask_capabilities: greetings, thanks, unrelated chatter or questions about the assistant.
  "how is the market today" / "E kaasan" / "what can you do for me?" / "Na gode"

When a command mixes a statement and a question, label the main financial goal.
""".strip()


_EXTRACTION_TEMPLATE = """
You are akawọ́, a bookkeeping assistant for a Nigerian market trader. Convert the
trader's command into ledger entries. You understand English, Yoruba, Igbo and Hausa.

Output: a JSON array only. Each element has exactly the keys "customer",
"details", "amount" (a whole number of naira) and "type" ("income" or "debt").
Return [] when the command contains no complete transaction.

Rules:
1. One command may hold several transactions (a payment and a remaining balance).
   Extract every one, in the order spoken.
2. Never invent amounts. An action without an amount is not a transaction.
3. Pronouns ("he", "she", "o", "ó", "ọ", "ya", "ta") refer to the most recently
   named customer. Only use "{customer}" when no name appears anywhere in the command.
4. "details" names the item ("shinkafa", "garri"). For a remaining balance on an
   item mentioned earlier, write "Remaining balance for <item>". With no item at
   all use "{details}".
5. Income words: paid, collected, sells, san, sanwo, fun mi, ta, kwụrụ, biya.
   Debt words: owes, owing, remaining, took, ku, kú, gba, ji, jide, ụgwọ, karbi, bashi, saura.
6. Convert spoken numbers to digits: "ẹgbẹ̀rún méjì" = 2000, "puku abụọ" = 2000,
   "dubu biyu" = 2000, "10k" = 10000.

Examples:
"Ada bought two bags of rice she paid 2,000 and is owing 100,000."
[{{"customer":"Ada","details":"Two bags of rice","amount":2000,"type":"income"}},{{"customer":"Ada","details":"Remaining balance for rice","amount":100000,"type":"debt"}}]

"Mo ta garri fun Femi, o san ẹgbẹ̀rún méjì, ó sì ku ẹgbẹ̀rún kan."
[{{"customer":"Femi","details":"garri","amount":2000,"type":"income"}},{{"customer":"Femi","details":"Remaining balance for garri","amount":1000,"type":"debt"}}]

"M rere akpụ nye Obi, ọ kwụrụ puku abụọ, ma jide puku atọ."
[{{"customer":"Obi","details":"akpụ","amount":2000,"type":"income"}},{{"customer":"Obi","details":"Remaining balance for akpụ","amount":3000,"type":"debt"}}]

"Na sayar da shinkafa ga Aisha, ta biya dubu biyu, kuma saura dubu daya."
[{{"customer":"Aisha","details":"shinkafa","amount":2000,"type":"income"}},{{"customer":"Aisha","details":"Remaining balance for shinkafa","amount":1000,"type":"debt"}}]

"I sold three red palm oils to Emma"
[]

"How is the market today?"
[]
""".strip()


def build_intent_prompt(transcript: str) -> tuple[str, str]:
    return INTENT_SYSTEM_PROMPT, f"Command:\n{transcript.strip()}\n\nLabel:"


def build_extraction_prompt(transcript: str, language: Language) -> tuple[str, str]:
    """Return the (system, user) prompt pair for transaction extraction."""

    system_prompt = _EXTRACTION_TEMPLATE.format(
        customer=default_customer(language),
        details=default_details(language),
    )
    user_prompt = f"Language hint: {language.value}\nCommand:\n{transcript.strip()}"
    return system_prompt, user_prompt


__all__ = [
    "INTENT_LABELS",
    "INTENT_SYSTEM_PROMPT",
    "build_extraction_prompt",
    "build_intent_prompt",
]
