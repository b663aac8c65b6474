"""Database layer — async SQLite with one-time bootstrap, scoped transactions and repositories."""

from inventory.db.database import Database, TransactionScope, TransactionState, get_db, reset_db, use_db
from inventory.db.errors import (
    DatabaseError,
    InitializationError,
    NestedTransactionError,
    TransactionOutcome,
    TransactionStateError,
)
from inventory.db.schema import SCHEMA_DDL

__all__ = [
    "Database", "TransactionScope", "TransactionState", "get_db", "reset_db", "use_db",
    "DatabaseError", "InitializationError", "NestedTransactionError",
    "TransactionOutcome", "TransactionStateError",
    "SCHEMA_DDL",
]
