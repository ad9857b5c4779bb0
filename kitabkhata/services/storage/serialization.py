"""
JSON representation of the ledger.

A JSON array of transaction objects with camelCase keys. Amounts are
written as decimal strings so they load back exactly; plain JSON
numbers written by older versions of the app are accepted too.
Stored balance and status are ignored on load and recomputed.
"""

import json
from typing import Any, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from kitabkhata.models.transaction import Transaction, User
from kitabkhata.services.storage.interface import CorruptDataError


_TRANSACTION_LIST = TypeAdapter(list[Transaction])


def transactions_to_data(transactions: Sequence[Transaction]) -> list[dict]:
    return [t.to_storage_dict() for t in transactions]


def transactions_from_data(data: Any) -> list[Transaction]:
    """Parse already-decoded JSON. None means nothing stored."""
    if data is None:
        return []
    try:
        return _TRANSACTION_LIST.validate_python(data)
    except ValidationError as e:
        raise CorruptDataError(f"Stored ledger is not valid: {e}") from e


def dumps_transactions(transactions: Sequence[Transaction]) -> str:
    return json.dumps(transactions_to_data(transactions), ensure_ascii=False)


def loads_transactions(text: Optional[str]) -> list[Transaction]:
    if not text:
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptDataError(f"Stored ledger is not JSON: {e}") from e
    return transactions_from_data(data)


def user_from_data(data: Any) -> Optional[User]:
    if not data:
        return None
    try:
        return User.model_validate(data)
    except ValidationError as e:
        raise CorruptDataError(f"Stored profile is not valid: {e}") from e
