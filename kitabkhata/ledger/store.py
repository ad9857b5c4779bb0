"""
Record Store

The ordered collection of sales. It is the only state that is ever
persisted; everything else (stats, rollups, search results) is derived
from it on read.

New sales go to the front so the most recent entry is listed first,
and that order is what exports and saves see.
"""

from typing import Iterable, Iterator, Optional

from kitabkhata.models.transaction import Transaction


class RecordStore:
    """
    Mutable, ordered collection of Transaction records keyed by id.

    Updates and deletes are destructive; there is no history.
    """

    def __init__(self):
        self._records: list[Transaction] = []

    @classmethod
    def from_records(cls, records: Iterable[Transaction]) -> "RecordStore":
        """Build a store keeping the given order. Duplicate ids are rejected."""
        store = cls()
        seen: set[str] = set()
        for record in records:
            if record.id in seen:
                raise DuplicateTransactionError(f"Duplicate transaction id: {record.id}")
            seen.add(record.id)
            store._records.append(record)
        return store

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._records))

    def __contains__(self, transaction_id: object) -> bool:
        return self._index_of(transaction_id) is not None

    def _index_of(self, transaction_id: object) -> Optional[int]:
        for idx, record in enumerate(self._records):
            if record.id == transaction_id:
                return idx
        return None

    def get(self, transaction_id: str) -> Optional[Transaction]:
        idx = self._index_of(transaction_id)
        return self._records[idx] if idx is not None else None

    def add(self, transaction: Transaction) -> None:
        """Insert a new sale at the front."""
        if transaction.id in self:
            raise DuplicateTransactionError(f"Duplicate transaction id: {transaction.id}")
        self._records.insert(0, transaction)

    def replace(self, transaction: Transaction) -> Transaction:
        """
        Swap in a new version of an existing sale, keeping its position.

        Returns the version that was replaced.
        """
        idx = self._index_of(transaction.id)
        if idx is None:
            raise TransactionNotFoundError(f"Transaction not found: {transaction.id}")
        previous = self._records[idx]
        self._records[idx] = transaction
        return previous

    def remove(self, transaction_id: str) -> Transaction:
        """Delete a sale by id and return it."""
        idx = self._index_of(transaction_id)
        if idx is None:
            raise TransactionNotFoundError(f"Transaction not found: {transaction_id}")
        return self._records.pop(idx)

    def snapshot(self) -> tuple[Transaction, ...]:
        """Immutable copy of the records in store order."""
        return tuple(self._records)


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class TransactionNotFoundError(LedgerError):
    """No sale with the given id."""
    pass


class DuplicateTransactionError(LedgerError):
    """A sale with this id is already in the store."""
    pass
