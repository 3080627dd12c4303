"""Result cache for catalog listings and derived aggregates.

Keys are derived from the full query (namespace, filters, pagination and
user), so two logically identical requests always land on the same entry no
matter how their parameters were ordered. Entries expire after their TTL and
are never invalidated automatically: every write path must call
``clear(user_id)``.

Two backends share the same interface:

* :class:`InMemoryResultCache` - process-local, bounded, with an explicit
  eviction policy (``fifo`` drops the oldest inserted entry, ``lru`` the
  least recently read one).
* :class:`DjangoResultCache` - delegates to a configured Django cache alias
  so several worker processes see the same entries. Per-user invalidation is
  done by bumping a generation number that is part of every key.
"""

from __future__ import annotations

import base64
import json
import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Optional

from django.conf import settings
from django.core.cache import caches
from django.core.exceptions import ImproperlyConfigured

from core.enums import EvictionPolicy
from core.exceptions import CacheBackendError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

MISSING = object()


@dataclass(frozen=True)
class CacheKey:
    value: str
    user_id: Optional[int] = None


def make_key(namespace: str, user_id: Optional[int], **parts: Any) -> CacheKey:
    payload = {"namespace": namespace, "user_id": user_id, **parts}
    raw = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    encoded = base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")
    return CacheKey(value=f"{namespace}:{encoded}", user_id=user_id)


class ResultCache(ABC):
    def __init__(self, *, default_ttl: float) -> None:
        self.default_ttl = default_ttl
        self.hits = 0
        self.misses = 0

    @abstractmethod
    def get(self, key: CacheKey) -> Any:
        """Return the cached value or :data:`MISSING`."""

    @abstractmethod
    def set(self, key: CacheKey, value: Any, ttl: Optional[float] = None) -> None:
        ...

    @abstractmethod
    def evict(self, key: CacheKey) -> None:
        ...

    @abstractmethod
    def clear(self, user_id: Optional[int] = None) -> None:
        ...

    def _record(self, hit: bool) -> None:
        if hit:
            self.hits += 1
        else:
            self.misses += 1

    def stats(self) -> Dict[str, Any]:
        lookups = self.hits + self.misses
        return {
            "backend": self.backend_name,
            "hits": self.hits,
            "misses": self.misses,
            "hit_ratio": round(self.hits / lookups, 4) if lookups else 0.0,
        }

    backend_name = "abstract"


@dataclass
class _Entry:
    value: Any
    inserted_at: float
    ttl: float
    user_id: Optional[int]

    def expired(self, now: float) -> bool:
        return now > self.inserted_at + self.ttl


class InMemoryResultCache(ResultCache):
    backend_name = "memory"

    def __init__(
        self,
        *,
        max_entries: int = 1000,
        default_ttl: float = 300,
        policy: EvictionPolicy = EvictionPolicy.FIFO,
        clock: Clock = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        super().__init__(default_ttl=default_ttl)
        self.max_entries = max_entries
        self.policy = policy
        self._clock = clock
        self._entries: "OrderedDict[str, _Entry]" = OrderedDict()
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: CacheKey) -> Any:
        with self._lock:
            entry = self._entries.get(key.value)
            if entry is None:
                self._record(False)
                return MISSING
            if entry.expired(self._clock()):
                del self._entries[key.value]
                self._record(False)
                return MISSING
            if self.policy is EvictionPolicy.LRU:
                self._entries.move_to_end(key.value)
            self._record(True)
            return entry.value

    def set(self, key: CacheKey, value: Any, ttl: Optional[float] = None) -> None:
        with self._lock:
            if key.value in self._entries:
                del self._entries[key.value]
            elif len(self._entries) >= self.max_entries:
                victim, _ = self._entries.popitem(last=False)
                logger.debug("Evicted %s (%s, capacity %s)", victim, self.policy.value, self.max_entries)
            self._entries[key.value] = _Entry(
                value=value,
                inserted_at=self._clock(),
                ttl=self.default_ttl if ttl is None else ttl,
                user_id=key.user_id,
            )

    def evict(self, key: CacheKey) -> None:
        with self._lock:
            self._entries.pop(key.value, None)

    def clear(self, user_id: Optional[int] = None) -> None:
        with self._lock:
            if user_id is None:
                self._entries.clear()
                return
            stale = [name for name, entry in self._entries.items() if entry.user_id == user_id]
            for name in stale:
                del self._entries[name]

    def stats(self) -> Dict[str, Any]:
        data = super().stats()
        data.update({"size": len(self._entries), "max_size": self.max_entries, "policy": self.policy.value})
        return data


class DjangoResultCache(ResultCache):
    backend_name = "django"

    _GLOBAL_GENERATION = "catalog:generation"

    def __init__(self, *, alias: str = "default", default_ttl: float = 300) -> None:
        super().__init__(default_ttl=default_ttl)
        self.alias = alias

    @property
    def _backend(self):
        return caches[self.alias]

    def _generation(self, name: str) -> int:
        value = self._backend.get(name)
        if value is None:
            self._backend.add(name, 1, timeout=None)
            value = self._backend.get(name) or 1
        return int(value)

    def _user_generation_key(self, user_id: Optional[int]) -> str:
        return f"{self._GLOBAL_GENERATION}:{user_id}"

    def _full_key(self, key: CacheKey) -> str:
        global_gen = self._generation(self._GLOBAL_GENERATION)
        user_gen = self._generation(self._user_generation_key(key.user_id))
        return f"catalog:{global_gen}:{user_gen}:{key.value}"

    def get(self, key: CacheKey) -> Any:
        try:
            value = self._backend.get(self._full_key(key), MISSING)
        except Exception as exc:
            raise CacheBackendError(str(exc)) from exc
        self._record(value is not MISSING)
        return value

    def set(self, key: CacheKey, value: Any, ttl: Optional[float] = None) -> None:
        timeout = self.default_ttl if ttl is None else ttl
        try:
            self._backend.set(self._full_key(key), value, timeout=timeout)
        except Exception as exc:
            raise CacheBackendError(str(exc)) from exc

    def evict(self, key: CacheKey) -> None:
        try:
            self._backend.delete(self._full_key(key))
        except Exception as exc:
            raise CacheBackendError(str(exc)) from exc

    def clear(self, user_id: Optional[int] = None) -> None:
        name = self._GLOBAL_GENERATION if user_id is None else self._user_generation_key(user_id)
        try:
            self._generation(name)
            self._backend.incr(name)
        except Exception as exc:
            raise CacheBackendError(str(exc)) from exc

    def stats(self) -> Dict[str, Any]:
        data = super().stats()
        data.update({"size": None, "max_size": None, "alias": self.alias})
        return data


def build_result_cache() -> ResultCache:
    backend = getattr(settings, "CATALOG_CACHE_BACKEND", "memory")
    default_ttl = getattr(settings, "CATALOG_CACHE_TTL_LISTING", 300)

    if backend == "memory":
        try:
            policy = EvictionPolicy(getattr(settings, "CATALOG_CACHE_POLICY", "fifo"))
        except ValueError as exc:
            raise ImproperlyConfigured(f"Unsupported CATALOG_CACHE_POLICY: {exc}") from exc
        return InMemoryResultCache(
            max_entries=getattr(settings, "CATALOG_CACHE_MAX_ENTRIES", 1000),
            default_ttl=default_ttl,
            policy=policy,
        )
    if backend == "django":
        return DjangoResultCache(
            alias=getattr(settings, "CATALOG_CACHE_ALIAS", "default"),
            default_ttl=default_ttl,
        )
    raise ImproperlyConfigured(f"Unsupported CATALOG_CACHE_BACKEND '{backend}'.")


_default_cache: Optional[ResultCache] = None
_default_cache_lock = Lock()


def get_result_cache() -> ResultCache:
    global _default_cache
    with _default_cache_lock:
        if _default_cache is None:
            _default_cache = build_result_cache()
        return _default_cache


def reset_result_cache() -> None:
    """Drop the process-wide cache so the next call rebuilds it from settings."""
    global _default_cache
    with _default_cache_lock:
        _default_cache = None
