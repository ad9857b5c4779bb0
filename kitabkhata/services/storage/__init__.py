"""
Storage Services Package

Provides the abstract ledger storage interface and concrete backends:
a JSON key-value file, in-memory storage and Google Sheets.
"""

from kitabkhata.services.storage.interface import (
    ConnectionError,
    CorruptDataError,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)
from kitabkhata.services.storage.json_file import JsonFileStorage
from kitabkhata.services.storage.memory import InMemoryStorage
from kitabkhata.services.storage.serialization import (
    dumps_transactions,
    loads_transactions,
)

__all__ = [
    # Interface
    "LedgerStorageInterface",
    # Exceptions
    "ConnectionError",
    "CorruptDataError",
    "NotFoundError",
    "StorageError",
    # Backends
    "InMemoryStorage",
    "JsonFileStorage",
    # Serialization
    "dumps_transactions",
    "loads_transactions",
]
