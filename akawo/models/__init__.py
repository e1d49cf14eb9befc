"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .transaction import Transaction  # noqa: F401

__all__ = ["Base", "Transaction"]
