"""Domain types shared by the voice pipeline, the ledger and the HTTP views."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Language(str, Enum):
    """Languages a trader can speak to the assistant."""

    EN = "en"
    YO = "yo"
    IG = "ig"
    HA = "ha"

    @classmethod
    def resolve(cls, code: "str | Language | None") -> "Language":
        """Map a raw language code to a member, defaulting to English."""

        if isinstance(code, Language):
            return code
        if code:
            try:
                return cls(str(code).strip().lower())
            except ValueError:
                pass
        return cls.EN


class Intent(str, Enum):
    """Closed set of command intents."""

    LOG_TRANSACTION = "log_transaction"
    QUERY_DEBTORS = "query_debtors"
    QUERY_TOTAL_INCOME = "query_total_income"
    QUERY_TOTAL_DEBT = "query_total_debt"
    ASK_CAPABILITIES = "ask_capabilities"
    UNKNOWN = "unknown"


class TransactionType(str, Enum):
    INCOME = "income"
    DEBT = "debt"


class ParsedTransaction(BaseModel):
    """Candidate transaction extracted from a transcript, not yet persisted."""

    customer: str
    details: str
    amount: int = Field(gt=0)
    type: TransactionType

    model_config = ConfigDict(frozen=True)


class TransactionRecord(BaseModel):
    """Persisted, owner-scoped ledger entry."""

    id: UUID
    owner: str
    customer: str
    details: str
    amount: int
    type: TransactionType
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, frozen=True)


class CommandKind(str, Enum):
    TRANSACTION_LOGGED = "transaction_logged"
    QUERY_RESPONSE = "query_response"
    INFO_RESPONSE = "info_response"


class CommandResult(BaseModel):
    """Outcome of one voice command."""

    kind: CommandKind
    intent: Intent
    transcript: str
    confirmation_text: str
    audio_content: Optional[str] = None
    transactions: List[TransactionRecord] = Field(default_factory=list)


__all__ = [
    "Language",
    "Intent",
    "TransactionType",
    "ParsedTransaction",
    "TransactionRecord",
    "CommandKind",
    "CommandResult",
]
