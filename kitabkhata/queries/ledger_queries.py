"""
Ledger Queries

DESIGN DECISION: Every read view of the ledger is a pure function of
the records. Nothing here caches or mutates, so a view can be
recomputed on every render and tested without a UI.

Two notions of "same customer" live here on purpose:
- search() matches a term case-insensitively anywhere in the name
- rollup() matches the name exactly, case included

"Ravi" and "ravi" are one hit in search but two separate accounts.
"""

from decimal import Decimal
from typing import Iterable, Optional

from kitabkhata.models.transaction import (
    CustomerStats,
    LedgerStats,
    SortOrder,
    Transaction,
)


def search(
    records: Iterable[Transaction],
    term: Optional[str] = "",
    order: SortOrder = SortOrder.DESC,
) -> list[Transaction]:
    """
    Filter by customer name or item, then order by sale date.

    An empty term matches everything. Sales on the same date keep their
    original relative order in both directions.
    """
    needle = (term or "").lower()

    matches = [
        record for record in records
        if needle in record.customer_name.lower()
        or needle in record.book_title.lower()
    ]

    # list.sort is stable, including with reverse=True
    matches.sort(key=lambda r: r.sale_date, reverse=order == SortOrder.DESC)
    return matches


def rollup(
    records: Iterable[Transaction],
    customer_name: Optional[str],
) -> tuple[list[Transaction], CustomerStats]:
    """
    One customer's account: their sales in ledger order and the totals.

    No customer selected is not an error; it gives no records and zero totals.
    """
    if not customer_name:
        return [], CustomerStats()

    account = [r for r in records if r.customer_name == customer_name]

    stats = CustomerStats(
        total=sum((r.total_price for r in account), Decimal("0")),
        paid=sum((r.amount_paid for r in account), Decimal("0")),
        due=sum((r.balance for r in account), Decimal("0")),
    )
    return account, stats


def ledger_stats(records: Iterable[Transaction]) -> LedgerStats:
    """Totals over the whole ledger in a single pass."""
    total_sales = Decimal("0")
    total_received = Decimal("0")
    total_pending = Decimal("0")
    count = 0

    for record in records:
        total_sales += record.total_price
        total_received += record.amount_paid
        total_pending += record.balance
        count += 1

    return LedgerStats(
        total_sales=total_sales,
        total_received=total_received,
        total_pending=total_pending,
        transaction_count=count,
    )


def customer_names(records: Iterable[Transaction]) -> list[str]:
    """Distinct customer names, in the order they first appear."""
    return list(dict.fromkeys(r.customer_name for r in records))
