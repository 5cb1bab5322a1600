"""Lock table serializing concurrent check-in attempts."""

import threading
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Protocol


class LockTable(Protocol):
    """Key-to-expiry map with atomic acquire-if-absent."""

    def try_acquire(self, key: Hashable, hold_seconds: float) -> bool:
        """Hold a key unless it is already held; return True when acquired."""

    def release_after(self, key: Hashable, delay_seconds: float) -> None:
        """Keep a held key only for the given delay."""

    def release(self, key: Hashable) -> None:
        """Free a key immediately."""

    def is_held(self, key: Hashable) -> bool:
        """Return True while a key is held and not expired."""


@dataclass
class InMemoryLockTable(LockTable):
    """Process-local lock table; entries expire on their own."""

    clock: Callable[[], float] = time.monotonic
    _expires_at: dict[Hashable, float] = field(default_factory=dict, init=False)
    _mutex: threading.Lock = field(default_factory=threading.Lock, init=False)

    def try_acquire(self, key: Hashable, hold_seconds: float) -> bool:
        """Atomically hold a key if it is free or its hold has lapsed."""
        now = self.clock()
        with self._mutex:
            self._prune(now)
            if key in self._expires_at:
                return False
            self._expires_at[key] = now + hold_seconds
            return True

    def release_after(self, key: Hashable, delay_seconds: float) -> None:
        """Shorten a hold to the grace delay."""
        if delay_seconds <= 0:
            self.release(key)
            return
        now = self.clock()
        with self._mutex:
            self._prune(now)
            if key in self._expires_at:
                self._expires_at[key] = now + delay_seconds

    def release(self, key: Hashable) -> None:
        """Drop a key from the table."""
        with self._mutex:
            self._expires_at.pop(key, None)

    def is_held(self, key: Hashable) -> bool:
        """Return True while a key is held and its hold has not lapsed."""
        now = self.clock()
        with self._mutex:
            self._prune(now)
            return key in self._expires_at

    def _prune(self, now: float) -> None:
        expired = [key for key, expires in self._expires_at.items() if now >= expires]
        for key in expired:
            del self._expires_at[key]

    def __len__(self) -> int:
        now = self.clock()
        with self._mutex:
            self._prune(now)
            return len(self._expires_at)
