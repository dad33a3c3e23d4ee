"""
Long-press confirmation
Hold-to-confirm gesture guarding destructive bulk actions

LongPressGesture models the button itself (progress 0-100 while held,
fires once at 100). HoldRegistry is the server-side counterpart: the client
begins a hold, and the bulk action only runs when it consumes a hold that
has lasted the full duration.

Author: TM3
Date: 2026-02-10
"""
import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from app.core.config import settings
from app.core.exceptions import HoldNotCompletedException

logger = logging.getLogger(__name__)

# holds never consumed or released expire after this
HOLD_TTL_MS = 60_000


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class LongPressGesture:
    """
    Press-and-hold state machine

    Usage:
        gesture = LongPressGesture(on_complete=delete_all, duration_ms=2000)
        gesture.start()
        ...
        gesture.tick()   # call periodically while pressed
        gesture.cancel() # pointer released early
    """

    def __init__(
        self,
        on_complete: Callable[[], None],
        duration_ms: Optional[int] = None,
        clock: Callable[[], float] = _monotonic_ms,
        disabled: bool = False,
    ):
        self.on_complete = on_complete
        self.duration_ms = duration_ms or settings.LONG_PRESS_MS
        self.clock = clock
        self.disabled = disabled
        self.pressing = False
        self.completed = False
        self._started_at: Optional[float] = None
        self._progress = 0.0

    def start(self) -> None:
        if self.disabled or self.completed:
            return
        self.pressing = True
        self._started_at = self.clock()
        self._progress = 0.0

    def progress(self) -> float:
        """0-100 while pressed"""
        if self.pressing and self._started_at is not None:
            elapsed = self.clock() - self._started_at
            self._progress = min(elapsed / self.duration_ms * 100, 100.0)
        return self._progress

    def tick(self) -> float:
        """Update progress and fire on_complete exactly once at 100"""
        value = self.progress()
        if self.pressing and value >= 100 and not self.completed:
            self.completed = True
            self.pressing = False
            self.on_complete()
        return value

    def cancel(self) -> None:
        self.pressing = False
        self._started_at = None
        self._progress = 0.0

    def set_disabled(self, disabled: bool) -> None:
        """Re-enabling arms the gesture again"""
        self.disabled = disabled
        if disabled:
            self.cancel()
        else:
            self.completed = False


@dataclass
class Hold:
    id: str
    action: str
    started_at: float


class HoldRegistry:
    """Server-side hold tokens for bulk destructive actions"""

    def __init__(
        self,
        duration_ms: Optional[int] = None,
        clock: Callable[[], float] = _monotonic_ms,
        ttl_ms: float = HOLD_TTL_MS,
    ):
        self.duration_ms = duration_ms or settings.LONG_PRESS_MS
        self.clock = clock
        self.ttl_ms = ttl_ms
        self._holds: Dict[str, Hold] = {}
        self._lock = threading.Lock()

    def begin(self, action: str) -> Hold:
        hold = Hold(id=uuid.uuid4().hex, action=action, started_at=self.clock())
        with self._lock:
            self._holds = {
                key: held for key, held in self._holds.items()
                if hold.started_at - held.started_at < self.ttl_ms
            }
            self._holds[hold.id] = hold
        return hold

    def release(self, hold_id: str) -> None:
        """Pointer released early: the hold can no longer be used"""
        with self._lock:
            self._holds.pop(hold_id, None)

    def consume(self, hold_id: str, action: str) -> Hold:
        """
        Use a hold once

        Raises:
            HoldNotCompletedException: Unknown/used hold, other action, or released too early
        """
        with self._lock:
            hold = self._holds.pop(hold_id, None)
        if hold is None:
            raise HoldNotCompletedException(hold_id, "unknown or already used")
        if hold.action != action:
            raise HoldNotCompletedException(hold_id, f"hold was started for {hold.action}")
        elapsed = self.clock() - hold.started_at
        if elapsed < self.duration_ms:
            raise HoldNotCompletedException(hold_id, f"held {int(elapsed)}ms of {self.duration_ms}ms")
        logger.info(f"Hold {hold_id} consumed for {action}")
        return hold


hold_registry = HoldRegistry()
