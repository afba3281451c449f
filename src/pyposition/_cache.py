"""Write-through cache of resolved positions keyed by request fingerprint."""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import threading
from collections.abc import Mapping
from typing import Any

from pyposition.models.requests import PositionRequest

_logger = logging.getLogger(__name__)


def fingerprint(request: PositionRequest) -> str:
    """Canonical cache key for *request*.

    Covers the variant tag and every field at its exact value. Mapping keys
    are sorted; sequences keep their order.
    """
    canonical = json.dumps(
        {"kind": request.kind, "request": request.to_wire()},
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class ResolutionCache:
    """Map request fingerprints to previously produced responses.

    Entries are never expired here; callers own eviction through
    :meth:`clear` or by restoring a pruned :meth:`snapshot`.
    """

    def __init__(self, entries: Mapping[str, dict[str, Any]] | None = None) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, dict[str, Any]] = {}
        if entries:
            self.restore(entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def lookup(self, request: PositionRequest) -> dict[str, Any] | None:
        key = fingerprint(request)
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            _logger.debug("Cache miss for %s request %s", request.kind, key[:12])
            return None
        _logger.debug("Cache hit for %s request %s", request.kind, key[:12])
        return copy.deepcopy(entry)

    def insert(self, request: PositionRequest, response: Mapping[str, Any]) -> None:
        """Store *response* for *request*. Empty responses are not cached."""
        if not response:
            return
        key = fingerprint(request)
        value = copy.deepcopy(dict(response))
        with self._lock:
            self._entries[key] = value
        _logger.debug("Cached %s request %s", request.kind, key[:12])

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Copy of every entry, keyed by fingerprint."""
        with self._lock:
            return copy.deepcopy(self._entries)

    def restore(self, entries: Mapping[str, dict[str, Any]]) -> None:
        """Merge persisted entries into the cache, skipping empty ones."""
        loaded = {str(k): copy.deepcopy(dict(v)) for k, v in entries.items() if v}
        with self._lock:
            self._entries.update(loaded)
