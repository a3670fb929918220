from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from .kv_store import KeyValueStore
from .models import HistoryEntry

logger = logging.getLogger(__name__)

_ENTRIES = TypeAdapter(list[HistoryEntry])


class HistoryStore:
    """Newest-first log of recent analyses, capped at `cap` entries.

    append() is an unconditional read-modify-write; two concurrent appends
    can race and the later write wins.
    """

    def __init__(self, store: KeyValueStore, *, key: str = "analysis_history", cap: int = 10):
        self._store = store
        self._key = key
        self._cap = cap

    def list(self) -> list[HistoryEntry]:
        raw = self._store.get(self._key)
        if not raw:
            return []
        try:
            return _ENTRIES.validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable history: %s", e.error_count())
            return []

    def append(self, entry: HistoryEntry) -> None:
        entries = [entry, *self.list()][: self._cap]
        self._store.put(self._key, _ENTRIES.dump_json(entries, by_alias=True).decode())
