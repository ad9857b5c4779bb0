"""
Derivation Engine

Pure rules that turn what the shopkeeper typed into a ledger record.

Balance is price minus payment, with no clamping: an overpaid sale
carries a negative balance. Status is decided in a fixed order:

    balance <= 0      -> Paid
    amount_paid == 0  -> Unpaid
    otherwise         -> Partial

So a free item (price 0, paid 0) is Paid, because the balance check
comes first. Inputs are not validated here; TransactionInput does that.
"""

from decimal import Decimal
from uuid import uuid4

from kitabkhata.models.transaction import (
    Transaction,
    TransactionInput,
    TransactionStatus,
)


def compute_derived(
    total_price: Decimal,
    amount_paid: Decimal,
) -> tuple[Decimal, TransactionStatus]:
    """Return (balance, status) for a price and a payment."""
    balance = total_price - amount_paid

    if balance <= 0:
        status = TransactionStatus.PAID
    elif amount_paid == 0:
        status = TransactionStatus.UNPAID
    else:
        status = TransactionStatus.PARTIAL

    return balance, status


def create_transaction(data: TransactionInput) -> Transaction:
    """Record a new sale under a fresh id."""
    return Transaction(id=str(uuid4()), **data.model_dump())


def update_transaction(existing: Transaction, data: TransactionInput) -> Transaction:
    """
    Replace every field of an existing sale except its id.

    There is no partial merge: a field missing from `data` takes its
    default, it does not keep the old value.
    """
    return Transaction(id=existing.id, **data.model_dump())
