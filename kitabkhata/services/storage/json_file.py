"""
JSON File Storage Implementation

A single JSON object used as a key-value store, the same way the shop
app kept its ledger in browser storage:

    {
        "kitab_khata_data_v6": [ ...transactions... ],
        "kitab_khata_user": { ...profile... }
    }

Writes go to a temporary file first and then replace the original, so
a crash mid-write leaves the previous ledger intact.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Sequence

import structlog

from kitabkhata.models.transaction import Transaction, User
from kitabkhata.services.storage.interface import (
    CorruptDataError,
    LedgerStorageInterface,
    StorageError,
)
from kitabkhata.services.storage.serialization import (
    transactions_from_data,
    transactions_to_data,
    user_from_data,
)


logger = structlog.get_logger(__name__)


class JsonFileStorage(LedgerStorageInterface):
    """Ledger and profile stored under two keys of one JSON file."""

    def __init__(
        self,
        path: Path,
        data_key: str = "kitab_khata_data_v6",
        user_key: str = "kitab_khata_user",
    ):
        self._path = Path(path)
        self._data_key = data_key
        self._user_key = user_key

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}") from e
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"{self._path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CorruptDataError(f"{self._path} does not hold a key-value object")
        return data

    def _write(self, key: str, value: Any) -> None:
        data = self._read()
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                dir=self._path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    async def load_transactions(self) -> list[Transaction]:
        transactions = transactions_from_data(self._read().get(self._data_key))
        logger.debug("ledger_read", path=str(self._path), count=len(transactions))
        return transactions

    async def save_transactions(self, transactions: Sequence[Transaction]) -> bool:
        self._write(self._data_key, transactions_to_data(transactions))
        logger.debug("ledger_written", path=str(self._path), count=len(transactions))
        return True

    async def load_user(self) -> Optional[User]:
        return user_from_data(self._read().get(self._user_key))

    async def save_user(self, user: User) -> bool:
        self._write(self._user_key, user.model_dump(mode="json"))
        return True

    async def clear_user(self) -> bool:
        self._write(self._user_key, None)
        return True
