"""In-memory translation cache shared by all translation sessions.

Keys are a SHA-256 of the source text plus the language pair and provider id,
so the same text translated by two providers or into two languages never
collides, and raw subtitle text is never used as a key. The cache lives for the
process; there is no persistence.
"""

from __future__ import annotations

import hashlib
import threading
import time
from dataclasses import dataclass
from typing import NamedTuple

DEFAULT_MAX_SIZE = 10000
EVICTION_FRACTION = 0.1


class CacheKey(NamedTuple):
    text_hash: str
    source_language: str
    target_language: str
    provider_id: str


@dataclass(frozen=True)
class CacheEntry:
    translation: str
    inserted_at: float


def cache_key(text: str, source_language: str, target_language: str, provider_id: str) -> CacheKey:
    """Compute the cache key for a text unit and translation direction."""
    text_hash = hashlib.sha256(text.encode("utf-8")).hexdigest()
    # ProviderId members and their plain string ids map to the same key
    provider = getattr(provider_id, "value", provider_id)
    return CacheKey(text_hash, source_language, target_language, str(provider))


class SegmentCache:
    """Bounded translation store with oldest-first eviction.

    All operations take an internal lock, so one instance can be shared by
    concurrent sessions.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE) -> None:
        if max_size < 1:
            raise ValueError(f"Cache max_size must be positive, got {max_size}")
        self.max_size = max_size
        # dict preserves insertion order; re-inserted keys move to the end
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(
        self, text: str, source_language: str, target_language: str, provider_id: str
    ) -> str | None:
        key = cache_key(text, source_language, target_language, provider_id)
        with self._lock:
            entry = self._entries.get(key)
        return entry.translation if entry else None

    def get_multiple(
        self,
        texts: list[str],
        source_language: str,
        target_language: str,
        provider_id: str,
    ) -> dict[str, str]:
        """Look up many texts at once. Only hits are included in the result."""
        keys = {text: cache_key(text, source_language, target_language, provider_id) for text in texts}
        found: dict[str, str] = {}
        with self._lock:
            for text, key in keys.items():
                entry = self._entries.get(key)
                if entry is not None:
                    found[text] = entry.translation
        return found

    def put(
        self,
        text: str,
        translation: str,
        source_language: str,
        target_language: str,
        provider_id: str,
    ) -> None:
        key = cache_key(text, source_language, target_language, provider_id)
        with self._lock:
            self._insert(key, translation)

    def put_multiple(
        self,
        translations: dict[str, str],
        source_language: str,
        target_language: str,
        provider_id: str,
    ) -> None:
        items = [
            (cache_key(text, source_language, target_language, provider_id), translation)
            for text, translation in translations.items()
        ]
        with self._lock:
            for key, translation in items:
                self._insert(key, translation)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def _insert(self, key: CacheKey, translation: str) -> None:
        """Insert or overwrite an entry. Caller holds the lock."""
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_size:
            self._evict_oldest(max(1, int(self.max_size * EVICTION_FRACTION)))
        self._entries[key] = CacheEntry(translation=translation, inserted_at=time.time())

    def _evict_oldest(self, count: int) -> None:
        # Insertion order is inserted_at order, and stays exact under clock skew
        for key in list(self._entries)[:count]:
            del self._entries[key]
