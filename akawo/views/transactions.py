"""Pydantic schemas for ledger endpoints."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from akawo.domain.models import TransactionType


class TransactionResponse(BaseModel):
    """Persisted ledger entry as returned to the client."""

    id: UUID = Field(..., description="Record identifier")
    customer: str
    details: str
    amount: int = Field(..., description="Whole naira")
    type: TransactionType
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class DeleteTransactionsResponse(BaseModel):
    message: str
    deleted_count: Optional[int] = Field(default=None, alias="deletedCount")

    model_config = ConfigDict(populate_by_name=True)
