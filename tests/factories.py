"""Builders for test records."""

from datetime import date
from decimal import Decimal

from kitabkhata.ledger import create_transaction
from kitabkhata.models import Transaction, TransactionInput


def make_input(**overrides) -> TransactionInput:
    """A valid cash sale; override any field by attribute name."""
    fields = {
        "sale_date": date(2024, 3, 10),
        "customer_name": "Ravi Kumar",
        "book_title": "NCERT Physics XII",
        "total_price": Decimal("500"),
        "amount_paid": Decimal("200"),
    }
    fields.update(overrides)
    return TransactionInput(**fields)


def make_transaction(id: str = None, **overrides) -> Transaction:
    data = make_input(**overrides)
    if id is None:
        return create_transaction(data)
    return Transaction(id=id, **data.model_dump())
