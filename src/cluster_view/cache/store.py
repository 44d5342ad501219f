"""Cache store protocol and built-in backends.

The cache is populated by a separate ingestion process; this package only
reads from it. Built-in backends:
- InMemoryCache: dict-backed, used by tests and embedding applications
- FileCache: JSON-lines file, one record per line

Custom backends just need ``get_all(namespace)`` and ``get(namespace, id)``.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from cluster_view.models import CacheData

logger = logging.getLogger(__name__)


class CacheStoreError(Exception):
    """Raised when a cache backend cannot be read."""


@runtime_checkable
class Cache(Protocol):
    """Protocol for namespace-scoped, read-only cache views."""

    def get_all(self, namespace: str) -> list[CacheData]:
        """Return every record in *namespace*, in the store's own order."""
        ...

    def get(self, namespace: str, record_id: str) -> CacheData | None:
        """Return one record, or None if it is not cached."""
        ...


class InMemoryCache:
    """Dict-backed cache. Thread-safe via a lock.

    Records keep insertion order within a namespace.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, CacheData]] = {}
        self._lock = threading.Lock()

    def get_all(self, namespace: str) -> list[CacheData]:
        with self._lock:
            return list(self._data.get(namespace, {}).values())

    def get(self, namespace: str, record_id: str) -> CacheData | None:
        with self._lock:
            return self._data.get(namespace, {}).get(record_id)

    def merge(self, namespace: str, record: CacheData) -> None:
        """Insert or replace a record."""
        with self._lock:
            self._data.setdefault(namespace, {})[record.id] = record

    def evict(self, namespace: str, record_id: str) -> bool:
        """Remove a record. Returns True if it was present."""
        with self._lock:
            return self._data.get(namespace, {}).pop(record_id, None) is not None


class FileCache:
    """JSON-lines cache file written by an external ingestion job.

    Each line is ``{"namespace": ..., "id": ..., "attributes": {...}}``.
    Lines that cannot be parsed are skipped. A later line with the same
    namespace and id replaces the earlier one.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get_all(self, namespace: str) -> list[CacheData]:
        return list(self._read_namespace(namespace).values())

    def get(self, namespace: str, record_id: str) -> CacheData | None:
        return self._read_namespace(namespace).get(record_id)

    def _read_namespace(self, namespace: str) -> dict[str, CacheData]:
        if not self._path.exists():
            return {}
        records: dict[str, CacheData] = {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                for lineno, line in enumerate(f, start=1):
                    stripped = line.strip()
                    if not stripped:
                        continue
                    entry = _parse_line(stripped)
                    if entry is None:
                        logger.debug("Skipping unreadable cache line %s:%d", self._path, lineno)
                        continue
                    entry_namespace, record = entry
                    if entry_namespace == namespace:
                        records[record.id] = record
        except OSError as exc:
            raise CacheStoreError(f"Cannot read cache file {self._path}: {exc}") from exc
        return records


def _parse_line(line: str) -> tuple[str, CacheData] | None:
    try:
        data: Any = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict) or not isinstance(data.get("namespace"), str):
        return None
    try:
        record = CacheData(id=data.get("id"), attributes=data.get("attributes") or {})
    except ValidationError:
        return None
    return data["namespace"], record
