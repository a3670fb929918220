from __future__ import annotations

import time
from typing import Callable, Protocol


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str, ttl_s: int | None = None) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store with per-key expiry.

    Plain get/put only: no compare-and-swap, so concurrent read-modify-write
    callers can overwrite each other.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._data: dict[str, tuple[str, float | None]] = {}

    def get(self, key: str) -> str | None:
        item = self._data.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at is not None and self._clock() >= expires_at:
            self._data.pop(key, None)
            return None
        return value

    def put(self, key: str, value: str, ttl_s: int | None = None) -> None:
        expires_at = self._clock() + ttl_s if ttl_s else None
        self._data[key] = (value, expires_at)
