"""Pydantic schemas used as views in the MVC architecture."""

from .commands import CommandResponse
from .common import ErrorDetail, ErrorResponse, SuccessResponse
from .transactions import DeleteTransactionsResponse, TransactionResponse

__all__ = [
    "CommandResponse",
    "DeleteTransactionsResponse",
    "ErrorDetail",
    "ErrorResponse",
    "SuccessResponse",
    "TransactionResponse",
]
