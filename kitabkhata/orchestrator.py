"""
Main Orchestrator for KitabKhata

This module ties together all the components and defines the
end-to-end flows for:
1. Recording a sale (validate → derive → store → debounced save)
2. Reading the ledger (search, dashboard totals, customer accounts)
3. Outputs (CSV backup, printed statement, AI summary)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing enters the ledger without passing validation
- Every change schedules a save; a failed save is reported, not dropped
- Every change is audited

One LedgerSession owns the state, so changes are applied one at a
time in the order they arrive.
"""

from datetime import date
from typing import Any, Optional, Union

import structlog

from kitabkhata import state as reducers
from kitabkhata.agents import (
    InsightRequest,
    InsightResult,
    InsightState,
    LedgerInsightAgent,
)
from kitabkhata.audit import AuditLogger, configure_logging
from kitabkhata.config import Settings, ShopSettings, get_settings
from kitabkhata.models.transaction import (
    CustomerStats,
    LedgerStats,
    Transaction,
    TransactionInput,
    User,
    ValidationResult,
)
from kitabkhata.services.export import export_csv
from kitabkhata.services.statement import format_currency, render_statement
from kitabkhata.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    LedgerStorageInterface,
    StorageError,
)
from kitabkhata.services.sync import DebouncedLedgerWriter, SyncStatus
from kitabkhata.state import AppState
from kitabkhata.validation import InvalidTransactionError, TransactionValidator


logger = structlog.get_logger(__name__)

INSIGHT_NOT_CONFIGURED = "AI insights are not configured. Set GEMINI_API_KEY to enable them."


class LedgerSession:
    """
    One shopkeeper's working session over the ledger.

    Flow:
    1. open() → load profile and ledger from storage
    2. save_transaction() / delete_transaction() → state changes + save scheduled
    3. views (visible_transactions, stats, account) → derived on every call
    4. close() → write anything still pending

    Saves only happen while someone is signed in, like the shop app.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        validator: Optional[TransactionValidator] = None,
        insight_agent: Optional[LedgerInsightAgent] = None,
        audit_logger: Optional[AuditLogger] = None,
        shop: Optional[ShopSettings] = None,
        debounce_seconds: float = 0.8,
    ):
        self._storage = storage
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._insight = InsightRequest(insight_agent) if insight_agent else None
        self._shop = shop or ShopSettings()
        self._writer = DebouncedLedgerWriter(
            storage,
            delay_seconds=debounce_seconds,
            on_saved=self._audit_logger.log_ledger_saved,
            on_error=lambda error, count: self._audit_logger.log_save_failed(count, str(error)),
        )
        self._state = AppState()

    # -------------------------------------------------------------------------
    # State and status
    # -------------------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    @property
    def sync_status(self) -> SyncStatus:
        return self._writer.status

    @property
    def last_sync_error(self) -> Optional[StorageError]:
        return self._writer.last_error

    @property
    def insight(self) -> InsightResult:
        if self._insight is None:
            return InsightResult()
        return self._insight.result

    @property
    def insight_enabled(self) -> bool:
        return self._insight is not None

    def _schedule_save(self) -> None:
        if self._state.user is None:
            return
        self._writer.schedule(self._state.transactions)

    # -------------------------------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------------------------------

    async def open(self) -> AppState:
        """
        Load the remembered profile and the ledger.

        Raises:
            StorageError: If storage cannot be read
        """
        user = await self._storage.load_user()
        transactions = await self._storage.load_transactions()
        self._state = reducers.load_transactions(AppState(user=user), transactions)
        self._audit_logger.log_ledger_loaded(len(transactions))
        return self._state

    async def sign_in(self, user: User) -> AppState:
        self._state = reducers.sign_in(self._state, user)
        await self._storage.save_user(user)
        self._schedule_save()
        self._audit_logger.log_user_signed_in(user.id, user.name)
        return self._state

    async def sign_out(self) -> AppState:
        """Write pending changes, then forget the profile. The ledger stays."""
        user = self._state.user
        await self._writer.close()
        await self._storage.clear_user()
        self._state = reducers.sign_out(self._state)
        if self._insight is not None:
            self._insight.reset()
        if user is not None:
            self._audit_logger.log_user_signed_out(user.id)
        return self._state

    async def flush(self) -> bool:
        """Save now instead of waiting for the quiet period."""
        return await self._writer.flush()

    async def close(self) -> bool:
        return await self._writer.close()

    # -------------------------------------------------------------------------
    # Ledger changes
    # -------------------------------------------------------------------------

    async def save_transaction(
        self,
        data: Union[TransactionInput, dict[str, Any]],
        today: Optional[date] = None,
    ) -> tuple[Transaction, ValidationResult]:
        """
        Add a sale, or update the one being edited.

        Returns:
            (saved_transaction, validation_result) - the result may carry warnings

        Raises:
            pydantic.ValidationError: If the data is malformed
            InvalidTransactionError: If the data fails business checks
        """
        if not isinstance(data, TransactionInput):
            data = self._validator.parse(data)

        result = self._validator.validate(data, today=today)
        if not result.is_valid:
            raise InvalidTransactionError(result)

        is_update = self._state.editing_id is not None
        self._state, saved = reducers.save_transaction(self._state, data)
        self._schedule_save()

        if is_update:
            self._audit_logger.log_transaction_updated(saved)
        else:
            self._audit_logger.log_transaction_created(saved)
        return saved, result

    async def delete_transaction(self, transaction_id: str) -> AppState:
        """
        Raises:
            TransactionNotFoundError: If the id is not in the ledger
        """
        self._state = reducers.delete_transaction(self._state, transaction_id)
        self._schedule_save()
        self._audit_logger.log_transaction_deleted(transaction_id)
        return self._state

    # -------------------------------------------------------------------------
    # View changes
    # -------------------------------------------------------------------------

    def begin_edit(self, transaction_id: str) -> AppState:
        self._state = reducers.begin_edit(self._state, transaction_id)
        return self._state

    def cancel_edit(self) -> AppState:
        self._state = reducers.cancel_edit(self._state)
        return self._state

    def set_search_term(self, term: str) -> AppState:
        self._state = reducers.set_search_term(self._state, term)
        return self._state

    def toggle_sort_order(self) -> AppState:
        self._state = reducers.toggle_sort_order(self._state)
        return self._state

    def select_customer(self, customer_name: Optional[str]) -> AppState:
        self._state = reducers.select_customer(self._state, customer_name)
        return self._state

    # -------------------------------------------------------------------------
    # Read views
    # -------------------------------------------------------------------------

    def visible_transactions(self) -> list[Transaction]:
        return reducers.visible_transactions(self._state)

    def stats(self) -> LedgerStats:
        return reducers.dashboard_stats(self._state)

    def account(self) -> tuple[list[Transaction], CustomerStats]:
        return reducers.selected_account(self._state)

    # -------------------------------------------------------------------------
    # Outputs
    # -------------------------------------------------------------------------

    # *_payload() builds a file without auditing; record_*() audits a download.

    def csv_payload(self) -> str:
        """Whole ledger as CSV, in ledger order."""
        return export_csv(self._state.transactions)

    def statement_payload(self, printed_on: Optional[date] = None) -> str:
        """
        Printable statement for the selected customer.

        Raises:
            ValueError: If no customer is selected
        """
        customer = self._require_customer()
        records, stats = self.account()
        return render_statement(
            shop=self._shop,
            customer_name=customer,
            records=records,
            stats=stats,
            printed_on=printed_on or date.today(),
        )

    def record_export(self) -> None:
        self._audit_logger.log_ledger_exported(len(self._state.transactions))

    def record_statement_printed(self) -> None:
        customer = self._require_customer()
        _, stats = self.account()
        self._audit_logger.log_statement_printed(customer, format_currency(stats.due))

    def export_csv(self) -> str:
        """CSV backup, audited as an export."""
        csv_text = self.csv_payload()
        self.record_export()
        return csv_text

    def customer_statement(self, printed_on: Optional[date] = None) -> str:
        """Statement for the selected customer, audited as printed."""
        statement = self.statement_payload(printed_on)
        self.record_statement_printed()
        return statement

    def _require_customer(self) -> str:
        customer = self._state.selected_customer
        if not customer:
            raise ValueError("Select a customer to print their statement")
        return customer

    async def request_insight(self) -> InsightResult:
        """
        Ask the AI for a summary of the whole ledger.

        Raises:
            InsightBusyError: If an analysis is already running
        """
        if self._insight is None:
            return InsightResult(state=InsightState.RESOLVED, error=INSIGHT_NOT_CONFIGURED)

        self._audit_logger.log_insight_requested(len(self._state.transactions))
        result = await self._insight.run(self._state.transactions)
        self._audit_logger.log_insight_resolved(result.succeeded, result.detail)
        return result


def create_storage(settings: Optional[Settings] = None) -> LedgerStorageInterface:
    """Build the storage backend named in LEDGER_STORAGE_BACKEND."""
    settings = settings or get_settings()
    storage_settings = settings.storage

    if storage_settings.backend == "memory":
        return InMemoryStorage()

    if storage_settings.backend == "sheets":
        from kitabkhata.services.storage.google_sheets import (
            GoogleSheetsClient,
            GoogleSheetsLedgerStorage,
        )
        return GoogleSheetsLedgerStorage(GoogleSheetsClient(settings.google_sheets))

    return JsonFileStorage(
        storage_settings.data_path,
        data_key=storage_settings.data_key,
        user_key=storage_settings.user_key,
    )


def create_session(
    settings: Optional[Settings] = None,
    storage: Optional[LedgerStorageInterface] = None,
) -> LedgerSession:
    """
    Factory function to create a fully wired session.

    The AI agent is optional: without a Gemini key the session works
    and request_insight() explains that insights are off.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(debug=app_settings.debug_mode)

    storage = storage or create_storage(settings)

    try:
        insight_agent = LedgerInsightAgent(settings.gemini)
    except Exception as e:
        logger.warning("insight_agent_unavailable", error=str(e))
        insight_agent = None

    return LedgerSession(
        storage=storage,
        validator=TransactionValidator(app_settings),
        insight_agent=insight_agent,
        shop=settings.shop,
        debounce_seconds=settings.storage.debounce_seconds,
    )
