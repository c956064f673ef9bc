"""SQLite storage for transactions and user profiles."""

from .profiles import ProfileStore
from .schema import ensure_schema
from .transactions import TransactionStore

__all__ = [
    "ProfileStore",
    "TransactionStore",
    "ensure_schema",
]
