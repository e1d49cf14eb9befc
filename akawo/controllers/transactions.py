"""Ledger endpoints scoped to the authenticated owner."""

import logging
from datetime import date
from typing import List
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from akawo.controllers.dependencies import OwnerDep, PipelineDep
from akawo.views import DeleteTransactionsResponse, SuccessResponse, TransactionResponse

router = APIRouter(prefix="/api/v1/akawo/transactions", tags=["transactions"])

logger = logging.getLogger(__name__)


@router.get("", response_model=List[TransactionResponse])
async def list_transactions(owner_id: OwnerDep, pipeline: PipelineDep) -> List[TransactionResponse]:
    """Return the caller's records, newest first."""

    records = await pipeline.list_transactions(owner_id)
    return [TransactionResponse.model_validate(record) for record in records]


@router.delete("/{transaction_id}", response_model=SuccessResponse)
async def delete_transaction(
    transaction_id: UUID,
    owner_id: OwnerDep,
    pipeline: PipelineDep,
) -> SuccessResponse:
    deleted = await pipeline.delete_transaction(owner_id, transaction_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found",
        )
    return SuccessResponse(message="Transaction deleted successfully")


@router.delete("", response_model=DeleteTransactionsResponse)
async def delete_transactions_on(
    owner_id: OwnerDep,
    pipeline: PipelineDep,
    day: date = Query(..., alias="date", description="Calendar day (UTC), YYYY-MM-DD"),
) -> DeleteTransactionsResponse:
    """Delete every record the caller created on ``date``."""

    count = await pipeline.delete_transactions_on(owner_id, day)
    return DeleteTransactionsResponse(
        message=f"Deleted {count} transactions from {day.isoformat()}",
        deleted_count=count,
    )
