from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Sequence
from uuid import UUID

from akawo.domain.models import Intent, Language, ParsedTransaction, TransactionRecord, TransactionType


class TransactionLedgerInterface(ABC):
    """Owner-scoped persistence contract for transaction records"""

    @abstractmethod
    async def add_many(
        self, owner: str, transactions: Sequence[ParsedTransaction]
    ) -> List[TransactionRecord]:
        ...

    @abstractmethod
    async def list_for_owner(
        self, owner: str, tx_type: Optional[TransactionType] = None
    ) -> List[TransactionRecord]:
        ...

    @abstractmethod
    async def customers(self, owner: str) -> List[str]:
        ...

    @abstractmethod
    async def total(
        self, owner: str, tx_type: TransactionType, customer: Optional[str] = None
    ) -> int:
        ...

    @abstractmethod
    async def delete(self, owner: str, record_id: UUID) -> bool:
        ...

    @abstractmethod
    async def delete_on(self, owner: str, day: date) -> int:
        ...


class IntentClassifier(ABC):
    """Map a transcript to exactly one intent; bad model output never raises."""

    @abstractmethod
    async def classify(self, text: str) -> Intent:
        ...


class TransactionExtractor(ABC):
    """Turn a transcript into candidate transactions, in spoken order"""

    @abstractmethod
    async def extract(self, text: str, language: Language) -> List[ParsedTransaction]:
        ...
