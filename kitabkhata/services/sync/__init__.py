"""Debounced persistence of the ledger."""

from kitabkhata.services.sync.debouncer import DebouncedLedgerWriter, SyncStatus

__all__ = ["DebouncedLedgerWriter", "SyncStatus"]
