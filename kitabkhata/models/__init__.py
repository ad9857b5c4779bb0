"""
Data Models Package

This package contains all Pydantic models used in KitabKhata.
All data flowing through the system must conform to these schemas.
"""

from kitabkhata.models.transaction import (
    CustomerStats,
    LedgerStats,
    PaymentMethod,
    SortOrder,
    Transaction,
    TransactionInput,
    TransactionStatus,
    User,
    ValidationIssue,
    ValidationResult,
)
from kitabkhata.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "CustomerStats",
    "LedgerStats",
    "PaymentMethod",
    "SortOrder",
    "Transaction",
    "TransactionInput",
    "TransactionStatus",
    "User",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
