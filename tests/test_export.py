"""Tests for CSV backup export."""

import csv
import io
from datetime import date
from decimal import Decimal

from kitabkhata.services.export import CSV_HEADER, backup_filename, export_csv

from tests.factories import make_transaction


class TestCsvExport:

    def test_header_and_rows_in_ledger_order(self, ledger):
        rows = list(csv.reader(io.StringIO(export_csv(ledger))))
        assert rows[0] == CSV_HEADER
        assert [r[1] for r in rows[1:]] == ["Ravi Kumar", "Sunita Devi", "Ravi Kumar"]

    def test_row_values(self):
        t = make_transaction(
            sale_date=date(2024, 3, 10),
            customer_name="Ravi",
            book_title="GK",
            total_price=Decimal("500"),
            amount_paid=Decimal("520"),
        )
        rows = list(csv.reader(io.StringIO(export_csv([t]))))
        assert rows[1] == ["2024-03-10", "Ravi", "GK", "500", "520", "-20", "Cash"]

    def test_fields_with_commas_are_quoted(self):
        t = make_transaction(customer_name="Sharma, R.K.", book_title='Atlas "Big"')
        text = export_csv([t])
        assert '"Sharma, R.K."' in text
        rows = list(csv.reader(io.StringIO(text)))
        assert rows[1][1] == "Sharma, R.K."
        assert rows[1][2] == 'Atlas "Big"'

    def test_empty_ledger_is_header_only(self):
        assert export_csv([]) == ",".join(CSV_HEADER) + "\n"

    def test_backup_filename(self):
        assert backup_filename(date(2024, 3, 10)) == "Ledger_Backup_2024-03-10.csv"
