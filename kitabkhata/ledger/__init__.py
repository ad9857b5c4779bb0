"""Ledger core: derivation rules and the record store."""

from kitabkhata.ledger.derivation import (
    compute_derived,
    create_transaction,
    update_transaction,
)
from kitabkhata.ledger.store import (
    DuplicateTransactionError,
    LedgerError,
    RecordStore,
    TransactionNotFoundError,
)

__all__ = [
    "DuplicateTransactionError",
    "LedgerError",
    "RecordStore",
    "TransactionNotFoundError",
    "compute_derived",
    "create_transaction",
    "update_transaction",
]
