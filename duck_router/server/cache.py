"""In-memory TTL cache for serialized route responses."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Any, Callable, Generic, Iterable, Mapping, TypeVar
from urllib.parse import urlencode

__all__ = ["CacheEntry", "CachedResponse", "TTLCache", "build_cache_key"]

V = TypeVar("V")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _handle_expiry(
    expires_at: datetime, now: datetime, *, on_expire: Callable[[], None]
) -> bool:
    if now < expires_at:
        return False
    on_expire()
    return True


@dataclass(frozen=True)
class CachedResponse:
    """Serialized response replayed on a cache hit."""

    body: bytes
    status_code: int = 200
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    expires_at: datetime


class TTLCache(Generic[V]):
    """Thread-safe key/value store whose entries expire after a TTL.

    Expiry is checked lazily on :meth:`get`; nothing sweeps the store in the
    background.
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _utc_now
        self._entries: dict[str, CacheEntry[V]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> V | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if _handle_expiry(
                entry.expires_at,
                self._clock(),
                on_expire=lambda: self._entries.pop(key, None),
            ):
                return None
            return entry.value

    def set(self, key: str, value: V, ttl_seconds: int) -> None:
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        with self._lock:
            self._entries[key] = CacheEntry(value=value, expires_at=expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def build_cache_key(
    method: str, path: str, query_items: Iterable[tuple[str, Any]] = ()
) -> str:
    """Compose ``METHOD:path?query`` with the query re-serialized in sorted order."""

    normalized = sorted((str(name), str(value)) for name, value in query_items)
    query = urlencode(normalized)
    suffix = f"?{query}" if query else ""
    return f"{method.upper()}:{path}{suffix}"
