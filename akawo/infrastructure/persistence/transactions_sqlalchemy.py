from datetime import date, datetime, time, timedelta
from typing import Callable, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from akawo.application.interfaces import TransactionLedgerInterface
from akawo.domain.models import ParsedTransaction, TransactionRecord, TransactionType
from akawo.models.transaction import Transaction, utcnow

SessionFactory = Callable[[], AsyncSession]


class SQLAlchemyTransactionLedger(TransactionLedgerInterface):
    """SQLAlchemy implementation of the transaction ledger"""

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    async def add_many(
        self, owner: str, transactions: Sequence[ParsedTransaction]
    ) -> List[TransactionRecord]:
        if not transactions:
            return []

        created_at = utcnow()
        async with self._session_factory() as session:
            entities = [
                Transaction(
                    owner=owner,
                    customer=tx.customer,
                    details=tx.details,
                    amount=tx.amount,
                    type=tx.type,
                    created_at=created_at,
                )
                for tx in transactions
            ]
            session.add_all(entities)
            await session.flush()
            records = [TransactionRecord.model_validate(entity) for entity in entities]
            await session.commit()
        return records

    async def list_for_owner(
        self, owner: str, tx_type: Optional[TransactionType] = None
    ) -> List[TransactionRecord]:
        query = select(Transaction).where(Transaction.owner == owner)
        if tx_type is not None:
            query = query.where(Transaction.type == tx_type)
        query = query.order_by(Transaction.created_at.desc())

        async with self._session_factory() as session:
            result = await session.execute(query)
            return [TransactionRecord.model_validate(row) for row in result.scalars().all()]

    async def customers(self, owner: str) -> List[str]:
        query = (
            select(Transaction.customer)
            .where(Transaction.owner == owner)
            .distinct()
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            return [name for name in result.scalars().all() if name]

    async def total(
        self, owner: str, tx_type: TransactionType, customer: Optional[str] = None
    ) -> int:
        query = select(func.coalesce(func.sum(Transaction.amount), 0)).where(
            Transaction.owner == owner,
            Transaction.type == tx_type,
        )
        if customer:
            query = query.where(func.lower(Transaction.customer) == customer.lower())

        async with self._session_factory() as session:
            result = await session.execute(query)
            return int(result.scalar_one() or 0)

    async def delete(self, owner: str, record_id: UUID) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(Transaction).where(
                    Transaction.id == str(record_id),
                    Transaction.owner == owner,
                )
            )
            await session.commit()
            return result.rowcount > 0

    async def delete_on(self, owner: str, day: date) -> int:
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)
        async with self._session_factory() as session:
            result = await session.execute(
                delete(Transaction).where(
                    Transaction.owner == owner,
                    Transaction.created_at >= start,
                    Transaction.created_at < end,
                )
            )
            await session.commit()
            return int(result.rowcount or 0)
