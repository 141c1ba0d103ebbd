"""Short-lived analytics result cache owned by the calling layer.

The engine never reads or writes this cache. A miss must always be
equivalent to a hit, so callers may skip it entirely.
"""

from __future__ import annotations

import hashlib
import json
import threading
import time
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel

from leave_engine.config import settings as app_settings

T = TypeVar("T")


def settings_fingerprint(team_settings: Any) -> str:
    """sha256 of the settings serialized with sorted keys."""
    if isinstance(team_settings, BaseModel):
        payload = team_settings.model_dump(mode="json")
    else:
        payload = team_settings if team_settings is not None else {}
    raw = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class AnalyticsCache:
    """TTL cache keyed by ``team:year:role:settings-hash``."""

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None
            else app_settings.ANALYTICS_CACHE_TTL_SECONDS
        )
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def build_key(team_id: str, year: int, role: str, team_settings: Any) -> str:
        return f"{team_id}:{year}:{role}:{settings_fingerprint(team_settings)}"

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() > expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        with self._lock:
            self._entries[key] = (self._clock() + ttl, value)

    def get_or_compute(self, key: str, factory: Callable[[], T]) -> T:
        """Return the cached value or compute, store and return it.

        ``factory`` runs outside the lock; two concurrent misses may both
        compute, which is harmless because results are identical.
        """
        cached = self.get(key)
        if cached is not None:
            return cached
        value = factory()
        self.set(key, value)
        return value

    def invalidate(self, team_id: Optional[str] = None) -> int:
        """Drop every entry, or only those of ``team_id``. Returns the count."""
        with self._lock:
            if team_id is None:
                dropped = len(self._entries)
                self._entries.clear()
                return dropped
            prefix = f"{team_id}:"
            stale = [k for k in self._entries if k.startswith(prefix)]
            for k in stale:
                del self._entries[k]
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
