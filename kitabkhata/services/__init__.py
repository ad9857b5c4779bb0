"""Services package."""

from kitabkhata.services.export import backup_filename, export_csv
from kitabkhata.services.identity import (
    IdentityError,
    user_from_id_token,
    user_from_manual_login,
)
from kitabkhata.services.statement import format_currency, render_statement
from kitabkhata.services.storage import (
    ConnectionError,
    CorruptDataError,
    InMemoryStorage,
    JsonFileStorage,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)
from kitabkhata.services.sync import DebouncedLedgerWriter, SyncStatus

__all__ = [
    # Export
    "backup_filename",
    "export_csv",
    # Identity
    "IdentityError",
    "user_from_id_token",
    "user_from_manual_login",
    # Statement
    "format_currency",
    "render_statement",
    # Storage services
    "ConnectionError",
    "CorruptDataError",
    "InMemoryStorage",
    "JsonFileStorage",
    "LedgerStorageInterface",
    "NotFoundError",
    "StorageError",
    # Sync
    "DebouncedLedgerWriter",
    "SyncStatus",
]
