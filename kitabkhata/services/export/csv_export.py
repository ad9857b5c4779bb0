"""
CSV Export

A plain backup of the whole ledger that opens in any spreadsheet.
Rows follow ledger order; they are not re-sorted.
"""

import csv
import io
from datetime import date
from typing import Iterable

from kitabkhata.models.transaction import Transaction


CSV_HEADER = [
    "Date",
    "Customer",
    "Item",
    "Total Price",
    "Amount Paid",
    "Balance Due",
    "Method",
]


def transaction_to_csv_row(transaction: Transaction) -> list[str]:
    return [
        transaction.sale_date.isoformat(),
        transaction.customer_name,
        transaction.book_title,
        str(transaction.total_price),
        str(transaction.amount_paid),
        str(transaction.balance),
        transaction.payment_method.value,
    ]


def write_csv(transactions: Iterable[Transaction], handle) -> int:
    """Write header and rows to an open text handle. Returns the row count."""
    writer = csv.writer(handle, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    count = 0
    for transaction in transactions:
        writer.writerow(transaction_to_csv_row(transaction))
        count += 1
    return count


def export_csv(transactions: Iterable[Transaction]) -> str:
    """The whole ledger as CSV text."""
    buffer = io.StringIO()
    write_csv(transactions, buffer)
    return buffer.getvalue()


def backup_filename(today: date) -> str:
    return f"Ledger_Backup_{today.isoformat()}.csv"
