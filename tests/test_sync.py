"""Tests for the debounced ledger writer."""

import asyncio
from unittest.mock import MagicMock

import pytest

from kitabkhata.services.storage import InMemoryStorage, StorageError
from kitabkhata.services.sync import DebouncedLedgerWriter, SyncStatus

from tests.factories import make_transaction


class FlakyStorage(InMemoryStorage):
    """Fails the first `failures` saves with `error`."""

    def __init__(self, failures: int = 1, error: Exception = None):
        super().__init__()
        self.failures = failures
        self.error = error or StorageError("quota exceeded")

    async def save_transactions(self, transactions):
        if self.failures > 0:
            self.failures -= 1
            raise self.error
        return await super().save_transactions(transactions)


@pytest.mark.asyncio
class TestDebouncedLedgerWriter:

    async def test_burst_is_written_once_with_latest_snapshot(self):
        storage = InMemoryStorage()
        writer = DebouncedLedgerWriter(storage, delay_seconds=0.05)

        a = make_transaction(id="a")
        b = make_transaction(id="b")
        writer.schedule([a])
        writer.schedule([b, a])
        assert writer.status == SyncStatus.PENDING

        await asyncio.sleep(0.15)
        await writer.wait()

        assert storage.save_count == 1
        assert [t.id for t in await storage.load_transactions()] == ["b", "a"]
        assert writer.status == SyncStatus.SYNCED
        assert not writer.has_pending

    async def test_nothing_written_before_quiet_period(self):
        storage = InMemoryStorage()
        writer = DebouncedLedgerWriter(storage, delay_seconds=10)
        writer.schedule([make_transaction(id="a")])
        await asyncio.sleep(0.01)
        assert storage.save_count == 0
        assert writer.has_pending
        await writer.close()
        assert storage.save_count == 1

    async def test_flush_writes_immediately(self):
        storage = InMemoryStorage()
        saved = MagicMock()
        writer = DebouncedLedgerWriter(storage, delay_seconds=10, on_saved=saved)
        writer.schedule([make_transaction(id="a"), make_transaction(id="b")])

        assert await writer.flush() is True
        assert storage.save_count == 1
        saved.assert_called_once_with(2)

    async def test_flush_with_nothing_pending(self):
        storage = InMemoryStorage()
        writer = DebouncedLedgerWriter(storage)
        assert await writer.flush() is True
        assert storage.save_count == 0

    async def test_failure_is_reported_and_kept(self):
        storage = FlakyStorage(failures=1)
        on_error = MagicMock()
        writer = DebouncedLedgerWriter(storage, delay_seconds=10, on_error=on_error)
        writer.schedule([make_transaction(id="a")])

        assert await writer.flush() is False
        assert writer.status == SyncStatus.FAILED
        assert isinstance(writer.last_error, StorageError)
        assert writer.has_pending
        on_error.assert_called_once()
        assert on_error.call_args.args[1] == 1

        # A later flush retries the kept snapshot
        assert await writer.flush() is True
        assert writer.status == SyncStatus.SYNCED
        assert writer.last_error is None
        assert [t.id for t in await storage.load_transactions()] == ["a"]

    async def test_unexpected_backend_error_is_wrapped_and_kept(self):
        storage = FlakyStorage(failures=1, error=TimeoutError("read timed out"))
        on_error = MagicMock()
        writer = DebouncedLedgerWriter(storage, delay_seconds=10, on_error=on_error)
        writer.schedule([make_transaction(id="a")])

        assert await writer.flush() is False
        assert writer.status == SyncStatus.FAILED
        assert isinstance(writer.last_error, StorageError)
        assert isinstance(writer.last_error.__cause__, TimeoutError)
        assert "read timed out" in str(writer.last_error)
        assert writer.has_pending
        on_error.assert_called_once()

        assert await writer.flush() is True
        assert writer.status == SyncStatus.SYNCED
        assert [t.id for t in await storage.load_transactions()] == ["a"]

    async def test_unexpected_error_from_timer_save_is_reported(self):
        storage = FlakyStorage(failures=1, error=RuntimeError("socket closed"))
        writer = DebouncedLedgerWriter(storage, delay_seconds=0.01)
        writer.schedule([make_transaction(id="a")])

        await asyncio.sleep(0.05)
        await writer.wait()
        assert writer.status == SyncStatus.FAILED
        assert writer.has_pending

    async def test_newer_snapshot_replaces_failed_one(self):
        storage = FlakyStorage(failures=1)
        writer = DebouncedLedgerWriter(storage, delay_seconds=10)
        writer.schedule([make_transaction(id="old")])
        await writer.flush()

        writer.schedule([make_transaction(id="new")])
        assert writer.status == SyncStatus.FAILED
        assert await writer.flush() is True
        assert [t.id for t in await storage.load_transactions()] == ["new"]

    async def test_default_delay(self):
        writer = DebouncedLedgerWriter(InMemoryStorage())
        assert writer.delay_seconds == 0.8


def test_schedule_outside_loop_raises():
    writer = DebouncedLedgerWriter(InMemoryStorage())
    with pytest.raises(RuntimeError):
        writer.schedule([make_transaction(id="a")])
