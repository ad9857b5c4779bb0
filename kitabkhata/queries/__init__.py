"""Read-side views over the ledger."""

from kitabkhata.queries.ledger_queries import (
    customer_names,
    ledger_stats,
    rollup,
    search,
)

__all__ = ["customer_names", "ledger_stats", "rollup", "search"]
