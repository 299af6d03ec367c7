# pm_workspace_core/pm_workspace/services/sync_debounce.py
"""
Debounced sync coalescer.

Rapid edits (every drag release, every lane rename) each produce a full
payload; only the latest one needs to reach the external sync call. The
debouncer keeps the newest payload and fires it once ``delay_ms`` has passed
without a new submission. Time is read from an injected clock and the owner
drives it with ``poll``, so no timer thread is involved.

State: idle -> pending -> saving -> saved | error -> idle
"""
from __future__ import annotations

from enum import Enum
import logging
import time
from typing import Any, Callable, Generic, Optional, TypeVar

from pm_workspace.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

SAVED_DISPLAY_MS = 1500
ERROR_DISPLAY_MS = 3000


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class SyncState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class SyncDebouncer(Generic[T]):
    def __init__(
        self,
        sync_fn: Callable[[T], Any],
        delay_ms: Optional[int] = None,
        clock: Callable[[], int] = _monotonic_ms,
    ):
        self.sync_fn = sync_fn
        self.delay_ms = settings.SYNC_DEBOUNCE_MS if delay_ms is None else delay_ms
        if self.delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        self.clock = clock

        self.state = SyncState.IDLE
        self._latest: Optional[T] = None
        self._has_pending = False
        self._due_at: Optional[int] = None
        self._state_changed_at = clock()
        self.submitted = 0
        self.fired = 0

    @property
    def has_pending(self) -> bool:
        return self._has_pending

    def _set_state(self, state: SyncState, now: int) -> None:
        self.state = state
        self._state_changed_at = now

    def submit(self, payload: T) -> None:
        """Replace any waiting payload and restart the quiet period."""
        now = self.clock()
        self._latest = payload
        self._has_pending = True
        self._due_at = now + self.delay_ms
        self.submitted += 1
        self._set_state(SyncState.PENDING, now)

    def poll(self, now: Optional[int] = None) -> bool:
        """Fire the pending payload if its quiet period is over. Returns True if it fired."""
        now = self.clock() if now is None else now
        if self._has_pending and self._due_at is not None and now >= self._due_at:
            return self._fire(now)

        # "saved" / "error" are shown briefly, then settle back to idle
        if self.state == SyncState.SAVED and now - self._state_changed_at >= SAVED_DISPLAY_MS:
            self._set_state(SyncState.IDLE, now)
        elif self.state == SyncState.ERROR and now - self._state_changed_at >= ERROR_DISPLAY_MS:
            self._set_state(SyncState.IDLE, now)
        return False

    def flush(self) -> bool:
        """Fire the pending payload now, ignoring the quiet period."""
        if not self._has_pending:
            return False
        return self._fire(self.clock())

    def cancel(self) -> None:
        """Drop the pending payload without syncing it."""
        if self._has_pending:
            logger.info("sync.cancelled", extra={"count": self.submitted - self.fired})
        self._latest = None
        self._has_pending = False
        self._due_at = None
        if self.state == SyncState.PENDING:
            self._set_state(SyncState.IDLE, self.clock())

    def _fire(self, now: int) -> bool:
        payload = self._latest
        self._latest = None
        self._has_pending = False
        self._due_at = None
        self._set_state(SyncState.SAVING, now)
        try:
            self.sync_fn(payload)
        except Exception as e:
            self._set_state(SyncState.ERROR, self.clock())
            logger.error("sync.failed", extra={"reason": str(e)[:200]})
            raise
        self.fired += 1
        self._set_state(SyncState.SAVED, self.clock())
        logger.info("sync.done", extra={"count": self.submitted, "applied": self.fired})
        return True


__all__ = ["SyncState", "SyncDebouncer", "SAVED_DISPLAY_MS", "ERROR_DISPLAY_MS"]
