"""Tests for rupee formatting and the printed account statement."""

from datetime import date
from decimal import Decimal

import pytest

from kitabkhata.config import ShopSettings
from kitabkhata.queries import rollup
from kitabkhata.services.statement import format_currency, group_indian, render_statement


class TestFormatting:

    @pytest.mark.parametrize(
        "digits, grouped",
        [
            ("0", "0"),
            ("999", "999"),
            ("1500", "1,500"),
            ("100250", "1,00,250"),
            ("12345678", "1,23,45,678"),
        ],
    )
    def test_group_indian(self, digits, grouped):
        assert group_indian(digits) == grouped

    @pytest.mark.parametrize(
        "amount, text",
        [
            ("1500", "₹1,500"),
            ("100250.5", "₹1,00,250.50"),
            ("0", "₹0"),
            ("-20", "-₹20"),
            ("0.005", "₹0.01"),
        ],
    )
    def test_format_currency(self, amount, text):
        assert format_currency(Decimal(amount)) == text


class TestRenderStatement:

    def _shop(self):
        return ShopSettings(
            name="VIKAS PUSTAK BHANDAR",
            tagline="Books",
            address="Gandhi Chowk",
            phone="+91 98765-43210",
            email="shop@example.com",
            gstin="07AAAAA0000A1Z5",
        )

    def test_statement_contents(self, ledger):
        records, stats = rollup(ledger, "Ravi Kumar")
        text = render_statement(self._shop(), "Ravi Kumar", records, stats, date(2024, 3, 15))

        assert "VIKAS PUSTAK BHANDAR" in text
        assert "GSTIN: 07AAAAA0000A1Z5" in text
        assert "DATE: 15/03/2024" in text
        assert "Party: Ravi Kumar" in text
        assert "Total Value: ₹1,300" in text
        assert "Net Due:     ₹1,100" in text
        assert "RD Sharma Maths" in text
        assert "NCERT Physics XII" in text
        assert "Lucent GK" not in text
        assert "Total Balance Due:" in text
        assert "Authorised Signatory" in text

    def test_rows_follow_given_order(self, ledger):
        records, stats = rollup(ledger, "Ravi Kumar")
        text = render_statement(self._shop(), "Ravi Kumar", records, stats, date(2024, 3, 15))
        assert text.index("RD Sharma Maths") < text.index("NCERT Physics XII")

    def test_empty_account(self):
        records, stats = rollup([], "Nobody")
        text = render_statement(self._shop(), "Nobody", records, stats, date(2024, 3, 15))
        assert "No entries for this party." in text
        assert "Net Due:     ₹0" in text

    def test_long_titles_are_cut(self, ledger):
        records, stats = rollup(ledger, "Ravi Kumar")
        text = render_statement(self._shop(), "Ravi Kumar", records, stats, date(2024, 3, 15))
        assert all(len(line) <= 78 for line in text.splitlines())
