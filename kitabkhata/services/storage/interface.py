"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the ledger in a local JSON file, in memory, or in Google Sheets
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The ledger is small and always written whole: there is no per-record
update, just load everything and save everything.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from kitabkhata.models.transaction import Transaction, User


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def load_transactions(self) -> list[Transaction]:
        """
        Load the whole ledger in stored order.

        Returns:
            The stored transactions, or an empty list if nothing was saved yet

        Raises:
            StorageError: If the backend cannot be read
            CorruptDataError: If stored data cannot be parsed
        """
        pass

    @abstractmethod
    async def save_transactions(self, transactions: Sequence[Transaction]) -> bool:
        """
        Replace the stored ledger with `transactions`, keeping their order.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def load_user(self) -> Optional[User]:
        """Return the remembered profile, if any."""
        pass

    @abstractmethod
    async def save_user(self, user: User) -> bool:
        """Remember the signed-in profile."""
        pass

    @abstractmethod
    async def clear_user(self) -> bool:
        """Forget the signed-in profile. The ledger itself is kept."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass


class CorruptDataError(StorageError):
    """Stored data exists but cannot be parsed into transactions."""
    pass
