"""Test settings for pytest.

Uses SQLite for speed and to avoid requiring PostgreSQL during tests.
"""

from .settings import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "catalog-tests",
    }
}

CATALOG_CACHE_BACKEND = "memory"
CATALOG_CACHE_POLICY = "fifo"
CATALOG_IMPORT_MATCH_BY_NAME = True
CATALOG_IMPORT_MATCH_BY_SUPPLIER_CODE = False
CATALOG_IMPORT_PREVIEW_COMMITS = True

LOGGING_CONFIG = None

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
