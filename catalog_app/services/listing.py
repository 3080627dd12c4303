import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from django.conf import settings

from core.exceptions import CacheBackendError
from core.schemas import PageRequest, ProductFilters

from ..cache import MISSING, CacheKey, ResultCache, get_result_cache, make_key
from ..serializers import ProductSerializer
from ..store import ProductStore
from . import query

logger = logging.getLogger(__name__)

NS_LISTING = "products"
NS_SEARCH = "products-search"
NS_SUMMARY = "products-summary"
NS_FILTER_OPTIONS = "products-filter-options"


@dataclass
class CachedResult:
    value: Any
    cache_hit: bool
    elapsed_ms: float

    def performance(self) -> Dict[str, Any]:
        return {"query_time_ms": round(self.elapsed_ms, 3), "cache_hit": self.cache_hit}


class CatalogListingService:
    """Cached read side of the catalog.

    The cache is advisory: when the backend raises, the lookup counts as a
    miss and the store is queried as usual.
    """

    def __init__(self, store: Optional[ProductStore] = None, cache: Optional[ResultCache] = None) -> None:
        self.store = store or ProductStore()
        self.cache = cache or get_result_cache()

    def list_products(self, user_id: int, filters: ProductFilters, page: PageRequest) -> CachedResult:
        key = make_key(NS_LISTING, user_id, filters=filters.to_dict(), pagination=page.to_dict())

        def compute():
            listing = query.run_query(self.store.get_products(user_id), filters, page)
            return {
                "results": ProductSerializer(listing.items, many=True).data,
                "pagination": listing.pagination_dict(),
                "filters": filters.to_dict(),
            }

        return self._cached(key, compute, settings.CATALOG_CACHE_TTL_LISTING)

    def search(self, user_id: int, text: str, limit: int = 20) -> CachedResult:
        key = make_key(NS_SEARCH, user_id, query=(text or "").strip().lower(), limit=limit)

        def compute():
            found = query.quick_search(self.store.get_products(user_id), text, limit)
            return ProductSerializer(found, many=True).data

        return self._cached(key, compute, settings.CATALOG_CACHE_TTL_SEARCH)

    def summary(self, user_id: int) -> CachedResult:
        key = make_key(NS_SUMMARY, user_id)
        return self._cached(
            key,
            lambda: query.summarize(self.store.get_products(user_id)),
            settings.CATALOG_CACHE_TTL_SUMMARY,
        )

    def filter_options(self, user_id: int) -> CachedResult:
        key = make_key(NS_FILTER_OPTIONS, user_id)
        return self._cached(
            key,
            lambda: query.filter_options(self.store.get_products(user_id)),
            settings.CATALOG_CACHE_TTL_FILTER_OPTIONS,
        )

    def invalidate(self, user_id: Optional[int] = None) -> None:
        try:
            self.cache.clear(user_id)
        except CacheBackendError as exc:
            logger.warning("Cache clear failed for user=%s: %s", user_id, exc)

    def cache_stats(self) -> Dict[str, Any]:
        return self.cache.stats()

    def _cached(self, key: CacheKey, compute: Callable[[], Any], ttl: float) -> CachedResult:
        started = time.perf_counter()
        try:
            cached = self.cache.get(key)
        except CacheBackendError as exc:
            logger.warning("Cache read failed, treating as miss: %s", exc)
            cached = MISSING

        if cached is not MISSING:
            return CachedResult(cached, True, (time.perf_counter() - started) * 1000)

        value = compute()
        try:
            self.cache.set(key, value, ttl)
        except CacheBackendError as exc:
            logger.warning("Cache write failed, result not cached: %s", exc)
        return CachedResult(value, False, (time.perf_counter() - started) * 1000)
