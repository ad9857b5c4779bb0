"""Validation package."""

from kitabkhata.validation.validator import InvalidTransactionError, TransactionValidator

__all__ = ["InvalidTransactionError", "TransactionValidator"]
