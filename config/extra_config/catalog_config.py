"""Catalog listing cache and spreadsheet import settings."""

import os

from .environment import env_bool, env_int

# "memory" keeps results in a process-local dict; "django" goes through the
# Django cache named by CATALOG_CACHE_ALIAS so several workers share entries.
CATALOG_CACHE_BACKEND = os.getenv("CATALOG_CACHE_BACKEND", "memory").strip().lower()
CATALOG_CACHE_ALIAS = os.getenv("CATALOG_CACHE_ALIAS", "default")
CATALOG_CACHE_MAX_ENTRIES = env_int("CATALOG_CACHE_MAX_ENTRIES", 1000)
CATALOG_CACHE_POLICY = os.getenv("CATALOG_CACHE_POLICY", "fifo").strip().lower()

# Seconds.
CATALOG_CACHE_TTL_LISTING = env_int("CATALOG_CACHE_TTL_LISTING", 5 * 60)
CATALOG_CACHE_TTL_SEARCH = env_int("CATALOG_CACHE_TTL_SEARCH", 5 * 60)
CATALOG_CACHE_TTL_SUMMARY = env_int("CATALOG_CACHE_TTL_SUMMARY", 10 * 60)
CATALOG_CACHE_TTL_FILTER_OPTIONS = env_int("CATALOG_CACHE_TTL_FILTER_OPTIONS", 15 * 60)

CATALOG_IMPORT_MATCH_BY_NAME = env_bool("CATALOG_IMPORT_MATCH_BY_NAME", True)
CATALOG_IMPORT_MATCH_BY_SUPPLIER_CODE = env_bool("CATALOG_IMPORT_MATCH_BY_SUPPLIER_CODE", False)
# When false the preview endpoint is a pure dry run; when true it writes every
# row that does not collide with an existing product.
CATALOG_IMPORT_PREVIEW_COMMITS = env_bool("CATALOG_IMPORT_PREVIEW_COMMITS", True)
CATALOG_IMPORT_MAX_UPLOAD_BYTES = env_int("CATALOG_IMPORT_MAX_UPLOAD_BYTES", 10 * 1024 * 1024)

CACHES = {
    "default": {
        "BACKEND": os.getenv("CACHE_BACKEND", "django.core.cache.backends.locmem.LocMemCache"),
        "LOCATION": os.getenv("CACHE_LOCATION", "catalog-default"),
    }
}

__all__ = [
    "CATALOG_CACHE_BACKEND",
    "CATALOG_CACHE_ALIAS",
    "CATALOG_CACHE_MAX_ENTRIES",
    "CATALOG_CACHE_POLICY",
    "CATALOG_CACHE_TTL_LISTING",
    "CATALOG_CACHE_TTL_SEARCH",
    "CATALOG_CACHE_TTL_SUMMARY",
    "CATALOG_CACHE_TTL_FILTER_OPTIONS",
    "CATALOG_IMPORT_MATCH_BY_NAME",
    "CATALOG_IMPORT_MATCH_BY_SUPPLIER_CODE",
    "CATALOG_IMPORT_PREVIEW_COMMITS",
    "CATALOG_IMPORT_MAX_UPLOAD_BYTES",
    "CACHES",
]
