"""
Per warehouse-day locks - prevents double allocation of a slot.

Each ScheduleStore owns one DayLockRegistry. The registry hands out one
re-entrant lock per (warehouse, date) key, created on first use, and
drops locks for days that have passed.
"""
import logging
import threading
from contextlib import contextmanager
from datetime import date
from typing import Optional

from dockslot.errors import LockTimeoutError

logger = logging.getLogger(__name__)

LOCK_WAIT_SECONDS = 5.0


def _lock_key(warehouse_id: str, slot_date: date) -> str:
    return f"dockslot:lock:{warehouse_id}:{slot_date.isoformat()}"


class DayLockRegistry:
    def __init__(self, wait: float = LOCK_WAIT_SECONDS):
        self.wait = wait
        self._guard = threading.Lock()
        self._locks: dict[tuple[str, date], threading.RLock] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, key: tuple[str, date]) -> bool:
        return key in self._locks

    def _get_lock(self, warehouse_id: str, slot_date: date) -> threading.RLock:
        with self._guard:
            lock = self._locks.get((warehouse_id, slot_date))
            if lock is None:
                lock = threading.RLock()
                self._locks[(warehouse_id, slot_date)] = lock
            return lock

    @contextmanager
    def hold(self, warehouse_id: str, slot_date: date, wait: Optional[float] = None):
        """
        Acquire the lock guarding one warehouse's slots on one day.
        Makes availability check + allocation a single atomic step.

        Usage:
            with registry.hold(warehouse_id, slot_date):
                # check and mutate the day's slots safely
        """
        wait = self.wait if wait is None else wait
        lock = self._get_lock(warehouse_id, slot_date)
        if not lock.acquire(timeout=wait):
            logger.warning(
                "Lock acquisition timed out for %s", _lock_key(warehouse_id, slot_date),
                extra={"warehouse_id": warehouse_id, "slot_date": slot_date,
                       "error_code": LockTimeoutError.error_code},
            )
            raise LockTimeoutError(f"Could not acquire lock for {warehouse_id} on {slot_date} within {wait}s")
        try:
            yield
        finally:
            lock.release()

    def prune_before(self, cutoff: date) -> int:
        """
        Drop locks for days before cutoff. A lock currently held by
        another thread is kept. Returns how many were dropped.
        """
        dropped = 0
        with self._guard:
            for key in [k for k in self._locks if k[1] < cutoff]:
                lock = self._locks[key]
                if not lock.acquire(blocking=False):
                    continue
                try:
                    del self._locks[key]
                    dropped += 1
                finally:
                    lock.release()
        if dropped:
            logger.debug("Pruned %d day locks before %s", dropped, cutoff)
        return dropped
