"""
Application State

Everything the dashboard needs to remember, in one immutable value.
Each user action is a reducer: a pure function taking the current
state and returning the next one. No reducer touches storage, the
clock or the network, so the whole UI flow can be tested directly.

    state = AppState()
    state = sign_in(state, user)
    state, saved = save_transaction(state, data)
    visible = visible_transactions(state)
"""

from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from kitabkhata.ledger import (
    RecordStore,
    TransactionNotFoundError,
    create_transaction,
    update_transaction,
)
from kitabkhata.models.transaction import (
    CustomerStats,
    LedgerStats,
    SortOrder,
    Transaction,
    TransactionInput,
    User,
)
from kitabkhata.queries import ledger_stats, rollup, search


class AppState(BaseModel):
    """Snapshot of the ledger plus what the shopkeeper is looking at."""
    model_config = ConfigDict(frozen=True)

    transactions: tuple[Transaction, ...] = ()
    user: Optional[User] = None
    search_term: str = ""
    sort_order: SortOrder = SortOrder.DESC
    selected_customer: Optional[str] = None
    editing_id: Optional[str] = None

    @property
    def is_signed_in(self) -> bool:
        return self.user is not None

    @property
    def editing(self) -> Optional[Transaction]:
        if self.editing_id is None:
            return None
        return next((t for t in self.transactions if t.id == self.editing_id), None)


def _with_store(state: AppState) -> RecordStore:
    return RecordStore.from_records(state.transactions)


# =============================================================================
# LEDGER REDUCERS
# =============================================================================

def load_transactions(state: AppState, transactions: Iterable[Transaction]) -> AppState:
    """Replace the ledger with freshly loaded records."""
    store = RecordStore.from_records(transactions)
    return state.model_copy(update={"transactions": store.snapshot(), "editing_id": None})


def add_transaction(state: AppState, data: TransactionInput) -> tuple[AppState, Transaction]:
    store = _with_store(state)
    created = create_transaction(data)
    store.add(created)
    return state.model_copy(update={"transactions": store.snapshot()}), created


def edit_transaction(
    state: AppState,
    transaction_id: str,
    data: TransactionInput,
) -> tuple[AppState, Transaction]:
    """
    Raises:
        TransactionNotFoundError: If the id is not in the ledger
    """
    store = _with_store(state)
    existing = store.get(transaction_id)
    if existing is None:
        raise TransactionNotFoundError(f"Transaction not found: {transaction_id}")
    updated = update_transaction(existing, data)
    store.replace(updated)
    return state.model_copy(update={"transactions": store.snapshot()}), updated


def save_transaction(state: AppState, data: TransactionInput) -> tuple[AppState, Transaction]:
    """
    The form's Save button: update the record being edited, or add a
    new one. Either way the form is closed afterwards.
    """
    if state.editing_id is not None:
        state, saved = edit_transaction(state, state.editing_id, data)
    else:
        state, saved = add_transaction(state, data)
    return state.model_copy(update={"editing_id": None}), saved


def delete_transaction(state: AppState, transaction_id: str) -> AppState:
    """
    Raises:
        TransactionNotFoundError: If the id is not in the ledger
    """
    store = _with_store(state)
    store.remove(transaction_id)
    editing_id = None if state.editing_id == transaction_id else state.editing_id
    return state.model_copy(update={"transactions": store.snapshot(), "editing_id": editing_id})


def begin_edit(state: AppState, transaction_id: str) -> AppState:
    store = _with_store(state)
    if transaction_id not in store:
        raise TransactionNotFoundError(f"Transaction not found: {transaction_id}")
    return state.model_copy(update={"editing_id": transaction_id})


def cancel_edit(state: AppState) -> AppState:
    return state.model_copy(update={"editing_id": None})


# =============================================================================
# VIEW REDUCERS
# =============================================================================

def set_search_term(state: AppState, term: str) -> AppState:
    return state.model_copy(update={"search_term": term or ""})


def set_sort_order(state: AppState, order: SortOrder) -> AppState:
    return state.model_copy(update={"sort_order": SortOrder(order)})


def toggle_sort_order(state: AppState) -> AppState:
    flipped = SortOrder.ASC if state.sort_order == SortOrder.DESC else SortOrder.DESC
    return set_sort_order(state, flipped)


def select_customer(state: AppState, customer_name: Optional[str]) -> AppState:
    """Open a customer's account, or go back to the ledger with None."""
    return state.model_copy(update={"selected_customer": customer_name or None})


def sign_in(state: AppState, user: User) -> AppState:
    return state.model_copy(update={"user": user})


def sign_out(state: AppState) -> AppState:
    """Forget the user and the view; the ledger itself stays."""
    return AppState(transactions=state.transactions)


# =============================================================================
# DERIVED VIEWS
# =============================================================================

def visible_transactions(state: AppState) -> list[Transaction]:
    return search(state.transactions, state.search_term, state.sort_order)


def dashboard_stats(state: AppState) -> LedgerStats:
    return ledger_stats(state.transactions)


def selected_account(state: AppState) -> tuple[list[Transaction], CustomerStats]:
    return rollup(state.transactions, state.selected_customer)
