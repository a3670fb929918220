from __future__ import annotations

import time
from typing import Callable

from .kv_store import KeyValueStore


class SessionGate:
    """Tracks which sessions have passed the human-verification challenge.

    Every decision is a fresh store read. The marker value holds the epoch
    second it stops being valid, so expiry holds even against a store that
    ignores the TTL hint.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        ttl_s: int = 3600,
        key_prefix: str = "session:",
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._ttl_s = ttl_s
        self._key_prefix = key_prefix
        self._clock = clock

    def _key(self, session_id: str) -> str:
        return f"{self._key_prefix}{session_id}"

    def requires_challenge(self, session_id: str | None) -> bool:
        if not session_id:
            return True
        marker = self._store.get(self._key(session_id))
        if marker is None:
            return True
        try:
            verified_until = float(marker)
        except ValueError:
            return True
        return self._clock() >= verified_until

    def mark_verified(self, session_id: str) -> None:
        verified_until = self._clock() + self._ttl_s
        self._store.put(self._key(session_id), repr(verified_until), ttl_s=self._ttl_s)
