"""Error types and transaction outcome tags for the data-access layer.

Statement execution errors are not wrapped: the engine's ``sqlite3.Error``
subclasses (``IntegrityError``, ``OperationalError``, ...) reach callers
unchanged.
"""

from __future__ import annotations

from enum import Enum


class TransactionOutcome(str, Enum):
    COMMITTED = "committed"
    COMMITTED_AFTER_EXTERNAL_RESOLUTION = "committed_after_external_resolution"
    ROLLED_BACK = "rolled_back"
    NESTED_TRANSACTION_REJECTED = "nested_transaction_rejected"


class DatabaseError(Exception):
    """Base class for errors raised by the data-access layer itself."""


class InitializationError(DatabaseError):
    """Connecting or bootstrapping the schema failed.

    Terminal for the ``Database`` instance: every current and later caller
    receives this error, chained to the original cause.
    """


class NestedTransactionError(DatabaseError):
    outcome = TransactionOutcome.NESTED_TRANSACTION_REJECTED

    def __init__(self, message: str = "Nested transactions are not supported"):
        super().__init__(message)


class TransactionStateError(DatabaseError):
    """A transaction scope was used outside its open lifetime."""
