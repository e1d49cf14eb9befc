"""FastAPI routers acting as controllers in the MVC architecture."""

from . import commands, transactions

__all__ = ["commands", "transactions"]
