"""
Core Data Models for KitabKhata

These models define the strict schemas for every record in the ledger.
They are designed to:
1. Reject bad amounts at the boundary (negative, NaN, infinity)
2. Keep balance and status derived, never stored independently
3. Serialize to the same JSON shape the shop app has always written
4. Support the audit trail

DESIGN DECISION: Money is Decimal everywhere. Sums over thousands of
sales must not drift the way binary floats do.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    computed_field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class PaymentMethod(str, Enum):
    """How the customer paid."""
    CASH = "Cash"
    UPI = "UPI"
    CHEQUE = "Cheque"


class TransactionStatus(str, Enum):
    """
    Payment status of a single sale.

    Always derived from price and payment, see
    kitabkhata.ledger.derivation.compute_derived.
    """
    PAID = "Paid"
    PARTIAL = "Partial"
    UNPAID = "Unpaid"


class SortOrder(str, Enum):
    """Direction for date ordering."""
    DESC = "desc"
    ASC = "asc"


Money = Annotated[Decimal, Field(ge=0, allow_inf_nan=False)]


# =============================================================================
# TRANSACTION MODELS
# =============================================================================

class TransactionInput(BaseModel):
    """
    Everything the shopkeeper types in for one sale.

    This is the full field set minus id, balance and status. It is also
    the validation boundary: bad amounts are rejected here, not coerced.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        extra="ignore",
    )

    sale_date: date = Field(
        ...,
        alias="date",
        description="Calendar date of the sale"
    )
    customer_name: str = Field(
        ...,
        alias="customerName",
        description="Customer name, the grouping key for accounts"
    )
    book_title: str = Field(
        ...,
        alias="bookTitle",
        description="Item sold"
    )
    total_price: Money = Field(
        ...,
        alias="totalPrice",
        description="Billed amount in INR"
    )
    amount_paid: Money = Field(
        ...,
        alias="amountPaid",
        description="Cumulative payment received in INR"
    )
    payment_method: PaymentMethod = Field(
        default=PaymentMethod.CASH,
        alias="paymentMethod",
    )
    cheque_number: Optional[str] = Field(
        default=None,
        alias="chequeNumber",
        validate_default=True,
        description="Only kept for cheque payments"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
    )

    @field_validator('sale_date', mode='before')
    @classmethod
    def parse_calendar_date(cls, v):
        """Accept full ISO timestamps and keep only the calendar date."""
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
        return v

    @field_validator('cheque_number')
    @classmethod
    def cheque_number_only_for_cheques(
        cls,
        v: Optional[str],
        info: ValidationInfo,
    ) -> Optional[str]:
        """A cheque number exists for cheque payments and nothing else."""
        method = info.data.get("payment_method")
        if method != PaymentMethod.CHEQUE:
            return None
        if not v:
            raise ValueError("Cheque number is required for cheque payments")
        return v

    @field_validator('notes')
    @classmethod
    def blank_notes_are_absent(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class Transaction(TransactionInput):
    """
    One sale in the ledger.

    The id is assigned once and never changes. Balance and status are
    computed properties: they are written to JSON for readers of the
    file but ignored when a record is loaded back.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        min_length=1,
        description="Opaque unique identifier"
    )

    @computed_field
    @property
    def balance(self) -> Decimal:
        """Outstanding amount, negative when overpaid."""
        from kitabkhata.ledger.derivation import compute_derived

        return compute_derived(self.total_price, self.amount_paid)[0]

    @computed_field
    @property
    def status(self) -> TransactionStatus:
        from kitabkhata.ledger.derivation import compute_derived

        return compute_derived(self.total_price, self.amount_paid)[1]

    def to_input(self) -> TransactionInput:
        """The editable part of this record, e.g. to prefill an edit form."""
        return TransactionInput.model_validate(
            self.model_dump(exclude={"id", "balance", "status"})
        )

    def to_storage_dict(self) -> dict:
        """
        Serialized shape: camelCase keys, amounts as exact decimal
        strings, absent optional fields omitted.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# DERIVED STATISTICS
# =============================================================================

class LedgerStats(BaseModel):
    """Totals over the whole ledger. Recomputed on every read, never stored."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    total_sales: Decimal = Field(default=Decimal("0"), alias="totalSales")
    total_received: Decimal = Field(default=Decimal("0"), alias="totalReceived")
    total_pending: Decimal = Field(default=Decimal("0"), alias="totalPending")
    transaction_count: int = Field(default=0, ge=0, alias="transactionCount")


class CustomerStats(BaseModel):
    """Totals for one customer's account."""
    model_config = ConfigDict(frozen=True)

    total: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")
    due: Decimal = Decimal("0")


# =============================================================================
# IDENTITY
# =============================================================================

class User(BaseModel):
    """
    Signed-in shop operator.

    Only used for display; it never gates access to the ledger.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    name: str = Field(..., min_length=1)
    email: str
    picture: str
    id: str = Field(..., min_length=1)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'overpaid', 'future_date')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Outcome of checking a TransactionInput before it is saved."""

    validated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    is_valid: bool = Field(
        ...,
        description="False when any error-level issue was found"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
