"""
Account Statement

Plain-text statement for one customer, ready to print or download.
It only reads the rollup (records and totals); it never changes data.
"""

from datetime import date
from typing import Sequence

from kitabkhata.config import ShopSettings
from kitabkhata.models.transaction import CustomerStats, Transaction
from kitabkhata.services.statement.formatting import format_currency


STATEMENT_WIDTH = 78

BUSINESS_TERMS = [
    "Certified credit statement for accounting.",
    "Please settle your balance due by next month.",
    "No return policy on educational goods.",
]


def _rule(char: str = "-") -> str:
    return char * STATEMENT_WIDTH


def _row(day: str, item: str, price: str, paid: str, balance: str) -> str:
    if len(item) > 30:
        item = item[:29] + "…"
    return f"{day:<12}{item:<30}{price:>12}{paid:>12}{balance:>12}"


def render_statement(
    shop: ShopSettings,
    customer_name: str,
    records: Sequence[Transaction],
    stats: CustomerStats,
    printed_on: date,
) -> str:
    """Render the account bill for `customer_name`."""
    lines = [
        _rule("="),
        shop.name.center(STATEMENT_WIDTH).rstrip(),
        shop.tagline.center(STATEMENT_WIDTH).rstrip(),
        shop.address.center(STATEMENT_WIDTH).rstrip(),
        f"PH: {shop.phone} | EMAIL: {shop.email}".center(STATEMENT_WIDTH).rstrip(),
        f"GSTIN: {shop.gstin}".center(STATEMENT_WIDTH).rstrip(),
        _rule("="),
        f"ACCOUNT BILL{('DATE: ' + printed_on.strftime('%d/%m/%Y')):>{STATEMENT_WIDTH - 12}}",
        "",
        f"Party: {customer_name}",
        f"Total Value: {format_currency(stats.total)}",
        f"Amount Paid: {format_currency(stats.paid)}",
        f"Net Due:     {format_currency(stats.due)}",
        _rule(),
        _row("DATE", "BOOK / ITEM DESCRIPTION", "PRICE", "PAID", "BALANCE"),
        _rule(),
    ]

    for record in records:
        lines.append(_row(
            record.sale_date.isoformat(),
            record.book_title,
            format_currency(record.total_price),
            format_currency(record.amount_paid),
            format_currency(record.balance),
        ))

    if not records:
        lines.append("No entries for this party.")

    lines.extend([
        _rule(),
        f"{'Total Balance Due:':<54}{format_currency(stats.due):>24}",
        _rule(),
        "Business Terms:",
        *(f"  * {term}" for term in BUSINESS_TERMS),
        "",
        f"{'Party Signature':<39}{'Authorised Signatory':>39}",
    ])
    return "\n".join(lines) + "\n"
