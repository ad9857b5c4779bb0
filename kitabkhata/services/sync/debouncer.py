"""
Debounced Ledger Writer

Every change to the ledger asks for a save, but the shopkeeper often
makes several edits in a row. The writer waits for a quiet period
after the last change and then writes the latest snapshot once.

    schedule(A)  schedule(B)  schedule(C) ..quiet.. save(C)

Only the newest snapshot is ever written (last write wins). A failed
save is never dropped silently: the status becomes FAILED, the error
is kept in `last_error` and handed to `on_error`, and the snapshot
stays pending so the next change or an explicit flush() retries it.
"""

import asyncio
from enum import Enum
from typing import Callable, Iterable, Optional

import structlog

from kitabkhata.models.transaction import Transaction
from kitabkhata.services.storage import LedgerStorageInterface, StorageError


logger = structlog.get_logger(__name__)


class SyncStatus(str, Enum):
    """Where the latest change is on its way to storage."""
    SYNCED = "synced"    # Storage matches the ledger
    PENDING = "pending"  # Waiting for the quiet period
    SAVING = "saving"    # Write in progress
    FAILED = "failed"    # Last write failed, snapshot still pending


class DebouncedLedgerWriter:
    """
    Schedules whole-ledger saves after `delay_seconds` of quiet.

    Must be used from inside a running asyncio event loop.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        delay_seconds: float = 0.8,
        on_saved: Optional[Callable[[int], None]] = None,
        on_error: Optional[Callable[[StorageError, int], None]] = None,
    ):
        self._storage = storage
        self._delay = delay_seconds
        self._on_saved = on_saved
        self._on_error = on_error

        self._pending: Optional[tuple[Transaction, ...]] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._tasks: set[asyncio.Task] = set()
        self._lock = asyncio.Lock()

        self.status = SyncStatus.SYNCED
        self.last_error: Optional[StorageError] = None

    @property
    def delay_seconds(self) -> float:
        return self._delay

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def schedule(self, transactions: Iterable[Transaction]) -> None:
        """Replace the pending snapshot and restart the quiet period."""
        self._pending = tuple(transactions)
        if self.status is not SyncStatus.FAILED:
            self.status = SyncStatus.PENDING

        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._delay, self._start_flush)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _start_flush(self) -> None:
        self._timer = None
        task = asyncio.get_running_loop().create_task(self.flush())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def flush(self) -> bool:
        """
        Write the pending snapshot now.

        Returns False if the write failed, True otherwise (including
        when there was nothing to write).
        """
        self._cancel_timer()

        async with self._lock:
            snapshot = self._pending
            if snapshot is None:
                return self.status is not SyncStatus.FAILED

            self._pending = None
            self.status = SyncStatus.SAVING
            try:
                await self._storage.save_transactions(snapshot)
            except asyncio.CancelledError:
                self._restore(snapshot)
                self.status = SyncStatus.PENDING
                raise
            except StorageError as e:
                return self._fail(snapshot, e)
            except Exception as e:
                # Backends may leak timeouts or client errors
                error = StorageError(f"Save failed: {type(e).__name__}: {e}")
                error.__cause__ = e
                return self._fail(snapshot, error)

            self.last_error = None
            self.status = SyncStatus.PENDING if self._pending is not None else SyncStatus.SYNCED
            logger.debug("ledger_saved", count=len(snapshot))
            if self._on_saved:
                self._on_saved(len(snapshot))
            return True

    def _restore(self, snapshot: tuple[Transaction, ...]) -> None:
        # A newer snapshot may have been scheduled while we were saving
        if self._pending is None:
            self._pending = snapshot

    def _fail(self, snapshot: tuple[Transaction, ...], error: StorageError) -> bool:
        self._restore(snapshot)
        self.last_error = error
        self.status = SyncStatus.FAILED
        logger.error("ledger_save_failed", error=str(error), count=len(snapshot))
        if self._on_error:
            self._on_error(error, len(snapshot))
        return False

    async def wait(self) -> None:
        """Wait for saves that have already started."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> bool:
        """Write anything still pending and wait for running saves."""
        await self.wait()
        return await self.flush()
