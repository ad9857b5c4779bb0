"""Audit logging package."""

from kitabkhata.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
