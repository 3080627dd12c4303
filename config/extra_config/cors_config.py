"""CORS/CSRF configuration for the back-office front-end."""

import os

from corsheaders.defaults import default_headers

from .environment import env_bool


def _parse_space_separated(raw: str) -> list[str]:
    return [
        value
        for value in (part.strip() for part in raw.replace(",", " ").split())
        if value
    ]


# Local admin front-end dev servers and the docker-compose service names.
DEFAULT_ORIGINS = [
    "http://localhost:5000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8000",
    "http://127.0.0.1:8000",
    "http://web:8000",
]


_env_origins = _parse_space_separated(os.getenv("CORS_ALLOWED_ORIGINS", ""))
CORS_ALLOWED_ORIGINS = _env_origins or DEFAULT_ORIGINS
CORS_ALLOW_CREDENTIALS = env_bool("CORS_ALLOW_CREDENTIALS", True)
# Excel downloads need the filename header visible to the browser.
CORS_EXPOSE_HEADERS = ["Content-Disposition", "X-Cache-Hit"]
CORS_ALLOW_HEADERS = list(default_headers) + ["x-requested-with"]


_env_csrf = _parse_space_separated(os.getenv("CSRF_TRUSTED_ORIGINS", ""))
CSRF_TRUSTED_ORIGINS = _env_csrf or [
    origin.rstrip("/") for origin in CORS_ALLOWED_ORIGINS if origin.startswith("http")
]


__all__ = [
    "CORS_ALLOWED_ORIGINS",
    "CORS_ALLOW_CREDENTIALS",
    "CORS_EXPOSE_HEADERS",
    "CORS_ALLOW_HEADERS",
    "CSRF_TRUSTED_ORIGINS",
]
