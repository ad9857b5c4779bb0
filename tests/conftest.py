"""Shared fixtures for KitabKhata tests."""

from datetime import date
from decimal import Decimal

import pytest

from kitabkhata.models import Transaction, User

from tests.factories import make_transaction


@pytest.fixture
def user() -> User:
    return User(
        name="Vikas Ji",
        email="vikas.ji@shop.local",
        picture="https://ui-avatars.com/api/?name=Vikas%20Ji",
        id="local-1700000000000",
    )


@pytest.fixture
def ledger() -> list[Transaction]:
    """Three sales, newest first, two of them to Ravi."""
    return [
        make_transaction(
            id="t3",
            sale_date=date(2024, 3, 12),
            customer_name="Ravi Kumar",
            book_title="RD Sharma Maths",
            total_price=Decimal("800"),
            amount_paid=Decimal("0"),
        ),
        make_transaction(
            id="t2",
            sale_date=date(2024, 3, 11),
            customer_name="Sunita Devi",
            book_title="Lucent GK",
            total_price=Decimal("300"),
            amount_paid=Decimal("300"),
        ),
        make_transaction(
            id="t1",
            sale_date=date(2024, 3, 10),
            customer_name="Ravi Kumar",
            book_title="NCERT Physics XII",
            total_price=Decimal("500"),
            amount_paid=Decimal("200"),
        ),
    ]
