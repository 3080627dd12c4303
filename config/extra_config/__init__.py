"""Modularized Django settings for the catalog service."""

from .environment import BASE_DIR, ROOT_DIR  # noqa: F401
from .apps_config import (  # noqa: F401
    DEFAULT_AUTO_FIELD,
    INSTALLED_APPS,
    MIDDLEWARE,
    ROOT_URLCONF,
    TEMPLATES,
    WSGI_APPLICATION,
)
from .database_config import DATABASES  # noqa: F401
from .auth_config import AUTH_PASSWORD_VALIDATORS  # noqa: F401
from .internationalization_config import LANGUAGE_CODE, TIME_ZONE, USE_I18N, USE_TZ  # noqa: F401
from .static_config import (  # noqa: F401
    DATA_UPLOAD_MAX_MEMORY_SIZE,
    FILE_UPLOAD_MAX_MEMORY_SIZE,
    MEDIA_ROOT,
    MEDIA_URL,
    STATIC_ROOT,
    STATIC_URL,
)
from .rest_framework_config import REST_FRAMEWORK  # noqa: F401
from .swagger_config import SWAGGER_SETTINGS, SWAGGER_USE_SESSION_AUTH  # noqa: F401
from .cors_config import (  # noqa: F401
    CORS_ALLOWED_ORIGINS,
    CORS_ALLOW_CREDENTIALS,
    CORS_ALLOW_HEADERS,
    CORS_EXPOSE_HEADERS,
    CSRF_TRUSTED_ORIGINS,
)
from .logging_config import LOGGING, LOGGING_CONFIG  # noqa: F401
from .catalog_config import (  # noqa: F401
    CACHES,
    CATALOG_CACHE_ALIAS,
    CATALOG_CACHE_BACKEND,
    CATALOG_CACHE_MAX_ENTRIES,
    CATALOG_CACHE_POLICY,
    CATALOG_CACHE_TTL_FILTER_OPTIONS,
    CATALOG_CACHE_TTL_LISTING,
    CATALOG_CACHE_TTL_SEARCH,
    CATALOG_CACHE_TTL_SUMMARY,
    CATALOG_IMPORT_MATCH_BY_NAME,
    CATALOG_IMPORT_MATCH_BY_SUPPLIER_CODE,
    CATALOG_IMPORT_MAX_UPLOAD_BYTES,
    CATALOG_IMPORT_PREVIEW_COMMITS,
)

__all__ = [
    "BASE_DIR",
    "ROOT_DIR",
    "DEFAULT_AUTO_FIELD",
    "INSTALLED_APPS",
    "MIDDLEWARE",
    "ROOT_URLCONF",
    "TEMPLATES",
    "WSGI_APPLICATION",
    "DATABASES",
    "AUTH_PASSWORD_VALIDATORS",
    "LANGUAGE_CODE",
    "TIME_ZONE",
    "USE_I18N",
    "USE_TZ",
    "STATIC_URL",
    "STATIC_ROOT",
    "MEDIA_URL",
    "MEDIA_ROOT",
    "FILE_UPLOAD_MAX_MEMORY_SIZE",
    "DATA_UPLOAD_MAX_MEMORY_SIZE",
    "REST_FRAMEWORK",
    "SWAGGER_SETTINGS",
    "SWAGGER_USE_SESSION_AUTH",
    "CORS_ALLOWED_ORIGINS",
    "CORS_ALLOW_CREDENTIALS",
    "CORS_ALLOW_HEADERS",
    "CORS_EXPOSE_HEADERS",
    "CSRF_TRUSTED_ORIGINS",
    "LOGGING",
    "LOGGING_CONFIG",
    "CACHES",
    "CATALOG_CACHE_ALIAS",
    "CATALOG_CACHE_BACKEND",
    "CATALOG_CACHE_MAX_ENTRIES",
    "CATALOG_CACHE_POLICY",
    "CATALOG_CACHE_TTL_FILTER_OPTIONS",
    "CATALOG_CACHE_TTL_LISTING",
    "CATALOG_CACHE_TTL_SEARCH",
    "CATALOG_CACHE_TTL_SUMMARY",
    "CATALOG_IMPORT_MATCH_BY_NAME",
    "CATALOG_IMPORT_MATCH_BY_SUPPLIER_CODE",
    "CATALOG_IMPORT_MAX_UPLOAD_BYTES",
    "CATALOG_IMPORT_PREVIEW_COMMITS",
]
