"""Environment loading and typed env helpers for the catalog service."""

import os
from pathlib import Path
from typing import Iterable, Tuple

from dotenv import load_dotenv

os.environ.setdefault("PGCLIENTENCODING", "UTF8")

BASE_DIR = Path(__file__).resolve().parent.parent.parent
ROOT_DIR = BASE_DIR

ENV_FILES: Iterable[Tuple[Path, bool]] = (
    (ROOT_DIR / ".env", False),
    (ROOT_DIR / ".env.local", True),
)


def _should_load(env_file: Path) -> bool:
    if env_file.name == ".env.local" and os.getenv("IS_DOCKER"):
        return False
    return env_file.exists()


for env_file, override in ENV_FILES:
    if _should_load(env_file):
        load_dotenv(env_file, override=override)


def env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


__all__ = ["BASE_DIR", "ROOT_DIR"]
