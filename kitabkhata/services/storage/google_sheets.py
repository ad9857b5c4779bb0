"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as a backend because:
1. The shopkeeper can open the ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (one shop is fine)
- No transactions (each save rewrites the whole sheet)
- Limited query capabilities (we filter in Python)

The implementation follows the abstract interface, so the ledger core
never knows which backend it is talking to.
"""

from typing import Optional, Sequence

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from kitabkhata.config import GoogleSheetsSettings, get_settings
from kitabkhata.models.transaction import Transaction, User
from kitabkhata.services.storage.interface import (
    ConnectionError,
    CorruptDataError,
    LedgerStorageInterface,
    StorageError,
)
from kitabkhata.services.storage.serialization import (
    transactions_from_data,
    transactions_to_data,
    user_from_data,
)


logger = structlog.get_logger(__name__)


# Column mappings for the Ledger sheet, same names as the JSON keys
TRANSACTION_COLUMNS = [
    "id",
    "date",
    "customerName",
    "bookTitle",
    "totalPrice",
    "amountPaid",
    "balance",
    "paymentMethod",
    "chequeNumber",
    "notes",
    "status",
]

PROFILE_COLUMNS = ["name", "email", "picture", "id"]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(self, title: str, columns: list[str], rows: int) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_ledger_sheet(self) -> gspread.Worksheet:
        """Get or create the Ledger worksheet."""
        return self._get_or_create_sheet(
            self._settings.ledger_sheet_name, TRANSACTION_COLUMNS, rows=1000
        )

    def get_profile_sheet(self) -> gspread.Worksheet:
        """Get or create the Profile worksheet."""
        return self._get_or_create_sheet(
            self._settings.profile_sheet_name, PROFILE_COLUMNS, rows=10
        )


def _rows_to_dicts(rows: list[list[str]], columns: list[str]) -> list[dict]:
    """Map data rows (header excluded) to dicts, dropping blank cells and rows."""
    records = []
    for row in rows:
        if not row or not row[0]:  # Skip empty rows
            continue
        records.append({
            column: value
            for column, value in zip(columns, row)
            if value != ""
        })
    return records


class GoogleSheetsLedgerStorage(LedgerStorageInterface):
    """
    Google Sheets implementation of ledger storage.

    One sale per row in ledger order. Balance and status columns are
    written for people reading the sheet and ignored on load.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _transaction_to_row(self, data: dict) -> list[str]:
        return [str(data.get(column, "")) for column in TRANSACTION_COLUMNS]

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_not_exception_type(CorruptDataError),
        reraise=True,
    )
    async def load_transactions(self) -> list[Transaction]:
        try:
            sheet = self._client.get_ledger_sheet()
            all_rows = sheet.get_all_values()[1:]  # Skip header
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read ledger: {e}")

        return transactions_from_data(_rows_to_dicts(all_rows, TRANSACTION_COLUMNS))

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def save_transactions(self, transactions: Sequence[Transaction]) -> bool:
        """Rewrite the whole sheet with the current ledger."""
        rows = [TRANSACTION_COLUMNS] + [
            self._transaction_to_row(data)
            for data in transactions_to_data(transactions)
        ]
        try:
            sheet = self._client.get_ledger_sheet()
            sheet.clear()
            sheet.update(range_name="A1", values=rows, value_input_option="RAW")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save ledger: {e}")

        logger.info("ledger_sheet_written", rows=len(transactions))
        return True

    async def load_user(self) -> Optional[User]:
        try:
            sheet = self._client.get_profile_sheet()
            all_rows = sheet.get_all_values()[1:]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read profile: {e}")

        profiles = _rows_to_dicts(all_rows, PROFILE_COLUMNS)
        return user_from_data(profiles[0]) if profiles else None

    async def save_user(self, user: User) -> bool:
        try:
            sheet = self._client.get_profile_sheet()
            sheet.clear()
            sheet.update(
                range_name="A1",
                values=[PROFILE_COLUMNS, [user.name, user.email, user.picture, user.id]],
                value_input_option="RAW",
            )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save profile: {e}")
        return True

    async def clear_user(self) -> bool:
        try:
            sheet = self._client.get_profile_sheet()
            sheet.clear()
            sheet.append_row(PROFILE_COLUMNS)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to clear profile: {e}")
        return True
