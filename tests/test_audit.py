"""Tests for the audit logger and settings loading."""

from kitabkhata.audit import AuditLogger
from kitabkhata.models.audit import AuditEventBuilder
from kitabkhata.config import AppSettings, GeminiSettings, StorageSettings
from kitabkhata.models import AuditEventType, AuditSeverity

from tests.factories import make_transaction


class TestAuditLogger:

    def test_recent_events_newest_first(self):
        audit = AuditLogger()
        audit.log_ledger_loaded(3)
        audit.log_transaction_created(make_transaction(id="t9"))
        events = audit.recent_events
        assert [e.event_type for e in events] == [
            AuditEventType.TRANSACTION_CREATED,
            AuditEventType.LEDGER_LOADED,
        ]
        assert events[0].entity_id == "t9"

    def test_history_is_bounded(self):
        audit = AuditLogger(history_size=2)
        for count in range(5):
            audit.log_ledger_saved(count)
        assert len(audit.recent_events) == 2
        assert audit.recent_events[0].details["record_count"] == 4

    def test_error_events(self):
        audit = AuditLogger()
        audit.log_save_failed(2, "disk full")
        audit.log_error("StorageError", "boom", {"path": "x.json"})
        save_failed, system_error = reversed(audit.recent_events)
        assert save_failed.severity == AuditSeverity.ERROR
        assert system_error.event_type == AuditEventType.SYSTEM_ERROR
        assert system_error.details == {"path": "x.json"}

    def test_long_customer_name_is_audited(self):
        audit = AuditLogger()
        long_name = "A" * 600
        audit.log_transaction_created(make_transaction(id="t1", customer_name=long_name))
        audit.log_transaction_updated(make_transaction(id="t1", customer_name=long_name))
        audit.log_statement_printed(long_name, "₹10")
        audit.log_user_signed_in("u1", long_name)

        events = audit.recent_events
        assert len(events) == 4
        assert all(long_name not in e.description for e in events)
        assert events[-1].details["customer_name"] == long_name

    def test_unbuildable_event_does_not_raise(self, monkeypatch):
        def broken(*args, **kwargs):
            raise ValueError("description too long")

        monkeypatch.setattr(AuditEventBuilder, "transaction_deleted", broken)
        audit = AuditLogger()
        audit.log_transaction_deleted("t1")
        assert audit.recent_events == []

    def test_timestamps_are_timezone_aware(self):
        event = AuditEventBuilder.ledger_saved(1)
        assert event.timestamp.tzinfo is not None
        assert event.timestamp.utcoffset().total_seconds() == 0


class TestSettings:

    def test_storage_defaults(self, monkeypatch):
        monkeypatch.delenv("LEDGER_STORAGE_BACKEND", raising=False)
        settings = StorageSettings(_env_file=None)
        assert settings.backend == "json"
        assert settings.data_key == "kitab_khata_data_v6"
        assert settings.user_key == "kitab_khata_user"
        assert settings.debounce_seconds == 0.8

    def test_storage_from_environment(self, monkeypatch):
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("LEDGER_STORAGE_DEBOUNCE_SECONDS", "2")
        settings = StorageSettings(_env_file=None)
        assert settings.backend == "memory"
        assert settings.debounce_seconds == 2.0

    def test_gemini_from_environment(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "abc")
        settings = GeminiSettings(_env_file=None)
        assert settings.api_key == "abc"
        assert settings.model_name == "gemini-1.5-flash"

    def test_app_thresholds(self):
        settings = AppSettings(_env_file=None)
        assert settings.future_date_tolerance_days == 1
        assert settings.max_transaction_amount == 1000000.0
