"""
Audit Logger

DESIGN DECISION: Every change to the ledger is logged.
This provides:
1. Traceability of edits and deletions
2. Debugging capability when a save fails
3. A history the shopkeeper can be shown

The audit logger:
- Writes structured JSON lines through structlog
- Never raises into the caller; a bad event or a broken sink must not block a sale
- Keeps the most recent events in memory for display
"""

import logging
from collections import deque
from typing import Callable, Optional

import structlog

from kitabkhata.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from kitabkhata.models.transaction import Transaction


_configured = False


def configure_logging(debug: bool = False) -> None:
    """Configure structlog once for the whole process."""
    global _configured
    if _configured:
        return

    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if debug else logging.INFO,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


class AuditLogger:
    """
    Central audit logging service.

    Logs every event to the structured local log and keeps the last
    `history_size` events for the UI.
    """

    def __init__(self, history_size: int = 200):
        self._logger = structlog.get_logger("kitabkhata.audit")
        self._history: deque[AuditEvent] = deque(maxlen=history_size)

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Newest first."""
        return list(reversed(self._history))

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its own severity."""
        self._history.append(event)
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            logging.getLogger(__name__).warning("audit log write failed: %s", e)

    def _record(self, build: Callable[..., AuditEvent], *args, **kwargs) -> None:
        try:
            event = build(*args, **kwargs)
        except Exception as e:
            logging.getLogger(__name__).warning("audit event %s not built: %s", build.__name__, e)
            return
        self.log(event)

    def log_transaction_created(self, transaction: Transaction) -> None:
        self._record(
            AuditEventBuilder.transaction_created,
            transaction_id=transaction.id,
            customer_name=transaction.customer_name,
            total_price=str(transaction.total_price),
        )

    def log_transaction_updated(self, transaction: Transaction) -> None:
        self._record(
            AuditEventBuilder.transaction_updated,
            transaction_id=transaction.id,
            customer_name=transaction.customer_name,
            balance=str(transaction.balance),
        )

    def log_transaction_deleted(self, transaction_id: str) -> None:
        self._record(AuditEventBuilder.transaction_deleted, transaction_id)

    def log_ledger_loaded(self, record_count: int) -> None:
        self._record(AuditEventBuilder.ledger_loaded, record_count)

    def log_ledger_saved(self, record_count: int) -> None:
        self._record(AuditEventBuilder.ledger_saved, record_count)

    def log_save_failed(self, record_count: int, error_message: str) -> None:
        self._record(AuditEventBuilder.save_failed, record_count, error_message)

    def log_insight_requested(self, record_count: int) -> None:
        self._record(AuditEventBuilder.insight_requested, record_count)

    def log_insight_resolved(self, succeeded: bool, error_message: Optional[str] = None) -> None:
        self._record(AuditEventBuilder.insight_resolved, succeeded, error_message)

    def log_user_signed_in(self, user_id: str, name: str) -> None:
        self._record(AuditEventBuilder.user_signed_in, user_id, name)

    def log_user_signed_out(self, user_id: str) -> None:
        self._record(AuditEventBuilder.user_signed_out, user_id)

    def log_ledger_exported(self, record_count: int) -> None:
        self._record(AuditEventBuilder.ledger_exported, record_count)

    def log_statement_printed(self, customer_name: str, due: str) -> None:
        self._record(AuditEventBuilder.statement_printed, customer_name, due)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        self._record(AuditEventBuilder.system_error, error_type, error_message, details)
