"""SQLAlchemy model for ledger transactions."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy import Enum as SqlEnum

from akawo.domain.models import TransactionType
from akawo.models.base import Base


def utcnow() -> datetime:
    """Naive UTC timestamp; every stored datetime is UTC."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


class Transaction(Base):
    """One income or debt entry owned by a trader."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    owner = Column(String(128), nullable=False, index=True)
    customer = Column(String(255), nullable=False)
    details = Column(String(512), nullable=False)
    amount = Column(Integer, nullable=False)
    type = Column(
        SqlEnum(
            TransactionType,
            name="transaction_type",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
    )
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)


__all__ = ["Transaction", "utcnow"]
