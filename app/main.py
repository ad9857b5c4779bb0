"""
Streamlit Frontend for KitabKhata

The daily screen for a small book shop: record a sale, see who owes
what, print a customer's bill and back the ledger up.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every number on screen is derived from the ledger, never typed twice
3. Clear error messages in simple language
4. Visual feedback for every save
5. No hidden actions

Each browser tab holds its own LedgerSession. Streamlit reruns the
script on every click, so every change is flushed to storage before
the run ends instead of waiting for the debounce timer.
"""

import asyncio
from datetime import date
from decimal import Decimal

import streamlit as st
from pydantic import ValidationError

from kitabkhata.agents import InsightBusyError
from kitabkhata.ledger import LedgerError
from kitabkhata.models import PaymentMethod, SortOrder, TransactionStatus
from kitabkhata.orchestrator import LedgerSession, create_session
from kitabkhata.services.export import backup_filename
from kitabkhata.services.identity import (
    IdentityError,
    user_from_id_token,
    user_from_manual_login,
)
from kitabkhata.services.statement import format_currency
from kitabkhata.services.storage import StorageError
from kitabkhata.services.sync import SyncStatus
from kitabkhata.validation import InvalidTransactionError


# Page configuration
st.set_page_config(
    page_title="KitabKhata",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
</style>
""", unsafe_allow_html=True)

STATUS_BADGES = {
    TransactionStatus.PAID: "🟢 Paid",
    TransactionStatus.PARTIAL: "🟡 Partial",
    TransactionStatus.UNPAID: "🔴 Unpaid",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def _apply_and_flush(session: LedgerSession, coro):
    result = await coro
    await session.flush()
    return result


def get_session() -> LedgerSession:
    """Get or create this tab's ledger session."""
    if "ledger" not in st.session_state:
        session = create_session()
        try:
            run_async(session.open())
        except StorageError as e:
            st.error(f"Could not load your ledger: {e}")
        st.session_state.ledger = session
    return st.session_state.ledger


def show_sync_status(session: LedgerSession):
    if session.sync_status == SyncStatus.FAILED:
        st.sidebar.error(
            f"⚠️ Last save failed: {session.last_sync_error}. "
            "Your changes are kept and will be saved on the next change."
        )
        if st.sidebar.button("🔁 Retry save"):
            run_async(session.flush())
            st.rerun()
    elif session.sync_status == SyncStatus.SYNCED:
        st.sidebar.caption("✅ All changes saved")
    else:
        st.sidebar.caption("⏳ Saving...")


def main():
    """Main application entry point."""
    session = get_session()

    if not session.state.is_signed_in:
        render_login_page(session)
        return

    user = session.state.user
    st.sidebar.title("📒 KitabKhata")
    if user.picture:
        st.sidebar.image(user.picture, width=64)
    st.sidebar.markdown(f"**{user.name}**  \n{user.email}")
    show_sync_status(session)

    if st.sidebar.button("🚪 Sign out"):
        run_async(session.sign_out())
        st.rerun()

    st.sidebar.markdown("---")
    st.sidebar.download_button(
        "⬇️ Download CSV backup",
        data=session.csv_payload(),
        file_name=backup_filename(date.today()),
        mime="text/csv",
        on_click=session.record_export,
    )

    if session.state.selected_customer:
        render_account_page(session)
    else:
        render_dashboard(session)


def render_login_page(session: LedgerSession):
    """Shop login: a name, or a Google ID token."""
    st.title("📒 KitabKhata")
    st.markdown("Digital bookkeeping for your shop.")

    name = st.text_input("Your name", placeholder="e.g., Vikas Ji")
    if st.button("Enter shop", type="primary"):
        try:
            run_async(_apply_and_flush(session, session.sign_in(user_from_manual_login(name))))
            st.rerun()
        except IdentityError as e:
            st.error(str(e))

    with st.expander("Sign in with Google"):
        credential = st.text_input("Google ID token", type="password")
        if st.button("Use Google account") and credential:
            try:
                run_async(_apply_and_flush(session, session.sign_in(user_from_id_token(credential))))
                st.rerun()
            except IdentityError as e:
                st.error(str(e))


def render_dashboard(session: LedgerSession):
    """Totals, AI summary, the sale form and the ledger table."""
    st.title("📊 Ledger")

    flash = st.session_state.pop("flash", None)
    if flash:
        message, warnings = flash
        st.success(message)
        for warning in warnings:
            st.warning(warning)

    stats = session.stats()
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Sales", format_currency(stats.total_sales))
    col2.metric("Received", format_currency(stats.total_received))
    col3.metric("Pending", format_currency(stats.total_pending))
    col4.metric("Entries", stats.transaction_count)

    render_insight_panel(session)

    st.markdown("---")
    render_transaction_form(session)

    st.markdown("---")
    render_ledger_table(session)


def render_insight_panel(session: LedgerSession):
    with st.expander("🤖 AI Analysis", expanded=session.insight.display_text is not None):
        if st.button("Analyse my ledger", disabled=not session.insight_enabled):
            with st.spinner("Reading your ledger..."):
                try:
                    run_async(session.request_insight())
                except InsightBusyError as e:
                    st.warning(str(e))

        result = session.insight
        # Model output is shown as text, never as HTML
        if result.value:
            st.info(result.value)
        elif result.error:
            st.error(result.error)
        elif not session.insight_enabled:
            st.caption("Set GEMINI_API_KEY to enable AI analysis.")


def render_transaction_form(session: LedgerSession):
    """Add a sale, or edit the one picked from the table."""
    editing = session.state.editing
    st.subheader("✏️ Edit Entry" if editing else "➕ New Sale")

    methods = list(PaymentMethod)
    with st.form("transaction_form", clear_on_submit=editing is None):
        col1, col2 = st.columns(2)
        with col1:
            sale_date = st.date_input("Date *", value=editing.sale_date if editing else date.today())
            customer_name = st.text_input("Customer *", value=editing.customer_name if editing else "")
            book_title = st.text_input("Book / Item *", value=editing.book_title if editing else "")
            notes = st.text_area("Notes (optional)", value=(editing.notes or "") if editing else "")
        with col2:
            total_price = st.number_input(
                "Total Price (₹) *",
                value=float(editing.total_price) if editing else 0.0,
                min_value=0.0,
                step=1.0,
                format="%.2f",
            )
            amount_paid = st.number_input(
                "Amount Paid (₹)",
                value=float(editing.amount_paid) if editing else 0.0,
                min_value=0.0,
                step=1.0,
                format="%.2f",
            )
            payment_method = st.selectbox(
                "Payment Method",
                options=methods,
                index=methods.index(editing.payment_method) if editing else 0,
                format_func=lambda m: m.value,
            )
            cheque_number = st.text_input(
                "Cheque Number (cheques only)",
                value=(editing.cheque_number or "") if editing else "",
            )

        col1, col2 = st.columns(2)
        submitted = col1.form_submit_button("💾 Save", type="primary")
        cancelled = col2.form_submit_button("Cancel") if editing else False

    if cancelled:
        session.cancel_edit()
        st.rerun()

    if not submitted:
        return

    data = {
        "date": sale_date.isoformat(),
        "customerName": customer_name,
        "bookTitle": book_title,
        "totalPrice": Decimal(str(total_price)),
        "amountPaid": Decimal(str(amount_paid)),
        "paymentMethod": payment_method.value,
        "chequeNumber": cheque_number,
        "notes": notes,
    }
    try:
        saved, result = run_async(_apply_and_flush(session, session.save_transaction(data)))
    except ValidationError as e:
        for err in e.errors():
            st.error(err["msg"])
        return
    except InvalidTransactionError as e:
        st.error(str(e))
        return
    except LedgerError as e:
        st.error(f"Could not save: {e}")
        return

    # Shown on the next run, after the rerun below
    st.session_state.flash = (
        f"Saved sale to {saved.customer_name} - balance {format_currency(saved.balance)}",
        result.warnings,
    )
    st.rerun()


def render_ledger_table(session: LedgerSession):
    st.subheader("📋 Entries")

    col1, col2 = st.columns([4, 1])
    with col1:
        term = st.text_input(
            "Search",
            value=session.state.search_term,
            placeholder="Customer or book",
        )
        if term != session.state.search_term:
            session.set_search_term(term)
    with col2:
        arrow = "⬇️ Newest" if session.state.sort_order == SortOrder.DESC else "⬆️ Oldest"
        if st.button(arrow):
            session.toggle_sort_order()
            st.rerun()

    visible = session.visible_transactions()
    if not visible:
        st.info("No entries yet. Add your first sale above.")
        return

    for t in visible:
        col1, col2, col3, col4, col5 = st.columns([2, 3, 3, 2, 2])
        col1.write(t.sale_date.strftime("%d %b %Y"))
        if col2.button(t.customer_name, key=f"cust-{t.id}"):
            session.select_customer(t.customer_name)
            st.rerun()
        col3.write(t.book_title)
        col4.write(f"{format_currency(t.balance)}  \n{STATUS_BADGES[t.status]}")
        with col5:
            edit_col, delete_col = st.columns(2)
            if edit_col.button("✏️", key=f"edit-{t.id}"):
                session.begin_edit(t.id)
                st.rerun()
            if delete_col.button("🗑️", key=f"delete-{t.id}"):
                try:
                    run_async(_apply_and_flush(session, session.delete_transaction(t.id)))
                except LedgerError as e:
                    st.error(str(e))
                st.rerun()


def render_account_page(session: LedgerSession):
    """One customer's account with a printable bill."""
    customer = session.state.selected_customer
    st.title(f"👤 {customer}")

    if st.button("← Back to ledger"):
        session.select_customer(None)
        st.rerun()

    records, stats = session.account()
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Value", format_currency(stats.total))
    col2.metric("Amount Paid", format_currency(stats.paid))
    col3.metric("Net Due", format_currency(stats.due))

    st.download_button(
        "🖨️ Download statement",
        data=session.statement_payload(date.today()),
        file_name=f"Statement_{customer.replace(' ', '_')}.txt",
        mime="text/plain",
        on_click=session.record_statement_printed,
    )

    st.table([
        {
            "Date": t.sale_date.strftime("%d/%m/%Y"),
            "Item": t.book_title,
            "Price": format_currency(t.total_price),
            "Paid": format_currency(t.amount_paid),
            "Balance": format_currency(t.balance),
            "Status": t.status.value,
        }
        for t in records
    ])


if __name__ == "__main__":
    main()
