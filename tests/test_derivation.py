"""Tests for balance/status derivation and record creation."""

from datetime import date
from decimal import Decimal

import pytest

from kitabkhata.ledger import compute_derived, create_transaction, update_transaction
from kitabkhata.models import PaymentMethod, TransactionStatus

from tests.factories import make_input, make_transaction


class TestComputeDerived:

    @pytest.mark.parametrize(
        "price, paid, balance, status",
        [
            ("500", "0", "500", TransactionStatus.UNPAID),
            ("500", "200", "300", TransactionStatus.PARTIAL),
            ("500", "500", "0", TransactionStatus.PAID),
            ("500", "520", "-20", TransactionStatus.PAID),
            ("0", "0", "0", TransactionStatus.PAID),
        ],
    )
    def test_rules(self, price, paid, balance, status):
        assert compute_derived(Decimal(price), Decimal(paid)) == (Decimal(balance), status)

    @pytest.mark.parametrize(
        "price, paid, status",
        [
            # paid >= price
            ("0.01", "0.01", TransactionStatus.PAID),
            ("100", "100.01", TransactionStatus.PAID),
            ("0", "5", TransactionStatus.PAID),
            ("999999.99", "999999.99", TransactionStatus.PAID),
            # nothing paid on a non-zero price
            ("0.01", "0", TransactionStatus.UNPAID),
            ("1", "0", TransactionStatus.UNPAID),
            ("999999.99", "0", TransactionStatus.UNPAID),
            ("100", "0.00", TransactionStatus.UNPAID),
            # something paid, less than price
            ("0.02", "0.01", TransactionStatus.PARTIAL),
            ("100", "99.99", TransactionStatus.PARTIAL),
            ("100", "0.01", TransactionStatus.PARTIAL),
            ("999999.99", "1", TransactionStatus.PARTIAL),
        ],
    )
    def test_region_boundaries(self, price, paid, status):
        balance, derived = compute_derived(Decimal(price), Decimal(paid))
        assert derived == status
        assert balance == Decimal(price) - Decimal(paid)

    def test_overpayment_is_not_clamped(self):
        balance, _ = compute_derived(Decimal("100"), Decimal("150.50"))
        assert balance == Decimal("-50.50")

    def test_paise_do_not_drift(self):
        balance, status = compute_derived(Decimal("0.30"), Decimal("0.10") + Decimal("0.20"))
        assert balance == 0
        assert status == TransactionStatus.PAID


class TestCreateTransaction:

    def test_copies_every_field(self):
        data = make_input(
            payment_method=PaymentMethod.CHEQUE,
            cheque_number="004512",
            notes="Pay by Diwali",
        )
        t = create_transaction(data)
        assert t.customer_name == data.customer_name
        assert t.book_title == data.book_title
        assert t.sale_date == data.sale_date
        assert t.cheque_number == "004512"
        assert t.notes == "Pay by Diwali"
        assert t.balance == Decimal("300")
        assert t.status == TransactionStatus.PARTIAL

    def test_fresh_ids(self):
        data = make_input()
        ids = {create_transaction(data).id for _ in range(50)}
        assert len(ids) == 50


class TestUpdateTransaction:

    def test_keeps_id_and_recomputes(self):
        existing = make_transaction(id="t1", amount_paid=Decimal("0"))
        assert existing.status == TransactionStatus.UNPAID

        updated = update_transaction(existing, make_input(amount_paid=Decimal("500")))
        assert updated.id == "t1"
        assert updated.balance == Decimal("0")
        assert updated.status == TransactionStatus.PAID

    def test_replaces_instead_of_merging(self):
        existing = make_transaction(id="t1", notes="old note")
        updated = update_transaction(existing, make_input(sale_date=date(2024, 4, 1)))
        assert updated.notes is None
        assert updated.sale_date == date(2024, 4, 1)
