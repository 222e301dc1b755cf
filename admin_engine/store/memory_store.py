"""
In-memory implementation of RecordStore.

Used by the `--demo` CLI mode and by tests. Records live only for the lifetime
of the process.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Any, Iterable, Mapping, Sequence

from .api import Record, RecordStore
from .cypher import build_create_query, build_fetch_query

logger = logging.getLogger(__name__)


class InMemoryRecordStore(RecordStore):
    """
    Thread-safe RecordStore backed by per-label lists.

    Parameters
    ----------
    seed:
        Optional initial records as (label, properties) pairs.

    Notes
    -----
    Labels and limits are checked with the same query builders as the Neo4j
    store, so invalid input fails the same way.
    """

    def __init__(self, seed: Iterable[tuple[str, Mapping[str, Any]]] = ()) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, list[Record]] = {}
        self._ids = itertools.count(1)
        self.create_calls: list[tuple[str, dict[str, Any]]] = []
        for label, properties in seed:
            self._insert(label, properties)

    def _insert(self, label: str, properties: Mapping[str, Any]) -> None:
        _query, params = build_create_query(label, properties)
        with self._lock:
            record = Record.of(params["props"], element_id=f"{label}:{next(self._ids)}")
            self._records.setdefault(label, []).append(record)

    def fetch_list(self, label: str, limit: int) -> Sequence[Record]:
        """See RecordStore.fetch_list."""
        build_fetch_query(label, limit)
        with self._lock:
            return list(self._records.get(label, [])[:limit])

    def create_record(self, label: str, properties: Mapping[str, Any]) -> None:
        """See RecordStore.create_record."""
        self._insert(label, properties)
        with self._lock:
            self.create_calls.append((label, dict(properties)))
        logger.debug("Created in-memory %s", label)

    def count(self, label: str) -> int:
        with self._lock:
            return len(self._records.get(label, []))

    def close(self) -> None:
        pass
