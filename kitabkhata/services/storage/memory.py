"""In-memory storage, for tests and for trying the app without a file."""

from typing import Optional, Sequence

from kitabkhata.models.transaction import Transaction, User
from kitabkhata.services.storage.interface import LedgerStorageInterface
from kitabkhata.services.storage.serialization import (
    dumps_transactions,
    loads_transactions,
)


class InMemoryStorage(LedgerStorageInterface):
    """
    Keeps the serialized JSON text, not the objects, so a load after a
    save goes through the same encoding as the file backend.
    """

    def __init__(self, transactions: Sequence[Transaction] = ()):
        self._ledger_json: Optional[str] = (
            dumps_transactions(transactions) if transactions else None
        )
        self._user: Optional[User] = None
        self.save_count = 0

    async def load_transactions(self) -> list[Transaction]:
        return loads_transactions(self._ledger_json)

    async def save_transactions(self, transactions: Sequence[Transaction]) -> bool:
        self._ledger_json = dumps_transactions(transactions)
        self.save_count += 1
        return True

    async def load_user(self) -> Optional[User]:
        return self._user

    async def save_user(self, user: User) -> bool:
        self._user = user
        return True

    async def clear_user(self) -> bool:
        self._user = None
        return True
