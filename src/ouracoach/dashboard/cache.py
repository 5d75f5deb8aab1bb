"""Process-local TTL cache for dashboard payloads.

Keys are namespaced by user (``"<user_id>:..."``) so one user's entries can be
dropped without touching anyone else's. Entries expire lazily on read; nothing
is persisted and there is no size bound.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        entry = self._store.get(key) if isinstance(key, str) else None
        return entry is not None and self._clock() < entry.expires_at

    def get(self, key: str) -> Any | None:
        """Return the value for `key`, or None if missing or expired."""
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._store[key]
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: float) -> None:
        self._store[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def clear_user(self, user_id: str) -> int:
        """Drop every entry belonging to `user_id`. Returns the number removed."""
        prefix = f"{user_id}:"
        stale = [key for key in self._store if key.startswith(prefix)]
        for key in stale:
            del self._store[key]
        return len(stale)

    def clear(self) -> None:
        self._store.clear()

    def prune(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        now = self._clock()
        expired = [key for key, entry in self._store.items() if now >= entry.expires_at]
        for key in expired:
            del self._store[key]
        return len(expired)
