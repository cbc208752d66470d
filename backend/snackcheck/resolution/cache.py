"""
Session-scoped resolution cache: normalized ingredient name -> IngredientRecord.
In-memory only, with TTL and max-entry eviction. Shared by concurrent resolver
threads, so every read and write holds the lock.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

from snackcheck.config import get_cache_max_entries, get_cache_ttl_seconds
from snackcheck.models.ingredient import IngredientRecord
from snackcheck.normalization import normalize_ingredient_key
from snackcheck.resolution.common_ingredients import common_ingredient_records

logger = logging.getLogger(__name__)

# Higher rank may overwrite lower; equal rank overwrites (last writer wins).
_PROVENANCE_RANK = {"ai": 1, "openfoodfacts": 2, "seed": 3}


@dataclass
class _CacheEntry:
    record: IngredientRecord
    rank: int
    stored_at: Optional[float]  # None = seeded, never expires


class ResolutionCache:
    """
    Thread-safe name -> record store. Pass one instance per session into the
    resolver and orchestrator; separate sessions should not share an instance.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        max_entries: Optional[int] = None,
        seed: bool = True,
    ):
        self._ttl = get_cache_ttl_seconds() if ttl_seconds is None else ttl_seconds
        self._max_entries = get_cache_max_entries() if max_entries is None else max_entries
        self._seed = seed
        self._lock = threading.Lock()
        self._entries: dict[str, _CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        if seed:
            self._load_seed()

    def _load_seed(self) -> None:
        for record in common_ingredient_records():
            key = normalize_ingredient_key(record.name)
            self._entries[key] = _CacheEntry(record, _PROVENANCE_RANK["seed"], None)
        logger.debug("RESOLUTION_CACHE seeded entries=%d", len(self._entries))

    def _expired(self, entry: _CacheEntry, now: float) -> bool:
        return entry.stored_at is not None and now - entry.stored_at > self._ttl

    def get(self, name: str) -> Optional[IngredientRecord]:
        key = normalize_ingredient_key(name)
        if not key:
            return None
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._expired(entry, time.time()):
                del self._entries[key]
                entry = None
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry.record

    def put(self, name: str, record: IngredientRecord) -> bool:
        """
        Store a record under the normalized name. Returns False when an existing,
        unexpired entry came from a higher-confidence tier and was kept.
        """
        key = normalize_ingredient_key(name)
        if not key:
            return False
        rank = _PROVENANCE_RANK.get(record.provenance, 0)
        now = time.time()
        with self._lock:
            existing = self._entries.get(key)
            if existing is not None and not self._expired(existing, now) and existing.rank > rank:
                logger.debug(
                    "RESOLUTION_CACHE kept key=%s existing=%s incoming=%s",
                    key, existing.record.provenance, record.provenance,
                )
                return False
            self._entries[key] = _CacheEntry(record, rank, now)
            self._evict(now)
        return True

    def _timed_count(self) -> int:
        return sum(1 for e in self._entries.values() if e.stored_at is not None)

    def _evict(self, now: float) -> None:
        """
        Drop expired entries, then the oldest resolved ones, until the resolved
        entries fit in max_entries. Seeded entries do not count toward the bound.
        """
        if self._timed_count() <= self._max_entries:
            return
        for k in [k for k, e in self._entries.items() if self._expired(e, now)]:
            del self._entries[k]
        timed = sorted(
            (e.stored_at, k) for k, e in self._entries.items() if e.stored_at is not None
        )
        overflow = len(timed) - self._max_entries
        if overflow <= 0:
            return
        for _, k in timed[:overflow]:
            del self._entries[k]
        logger.info("RESOLUTION_CACHE evicted=%d size=%d", overflow, len(self._entries))

    def clear(self) -> None:
        """Drop everything, then restore the seeded entries if this cache was seeded."""
        with self._lock:
            self._entries = {}
            self._hits = 0
            self._misses = 0
            if self._seed:
                self._load_seed()

    def stats(self) -> dict:
        with self._lock:
            return {
                "total_entries": len(self._entries),
                "seeded_entries": sum(1 for e in self._entries.values() if e.stored_at is None),
                "hits": self._hits,
                "misses": self._misses,
            }

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
