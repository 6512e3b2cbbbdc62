"""Application configuration helpers backed by environment variables."""

from __future__ import annotations

import os
from functools import lru_cache

_TRUE_VALUES = {"1", "true", "yes", "on"}

STORAGE_BACKEND_MEMORY = "memory"
STORAGE_BACKEND_DATABASE = "database"
_STORAGE_BACKENDS = {STORAGE_BACKEND_MEMORY, STORAGE_BACKEND_DATABASE}

DEFAULT_DATABASE_URL = "sqlite:///./bookmarks.db"


def _read_flag(name: str) -> bool | None:
    """Return the parsed boolean value for ``name`` if explicitly set."""

    value = os.getenv(name)
    if value is None:
        return None
    normalized = value.strip()
    if not normalized:
        return None
    return normalized.lower() in _TRUE_VALUES


__all__ = [
    "STORAGE_BACKEND_MEMORY",
    "STORAGE_BACKEND_DATABASE",
    "get_database_url",
    "get_storage_backend",
    "is_create_all_enabled",
    "is_seed_default_folders_enabled",
]


def get_database_url() -> str:
    """Return the SQLAlchemy URL used by the database storage backend.

    Not cached: tests switch ``DATABASE_URL`` between cases and the engine
    helper in :mod:`bookmark_manager.db` rebuilds itself when it changes.
    """

    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


@lru_cache(maxsize=1)
def get_storage_backend() -> str:
    """Return the configured storage backend name.

    ``STORAGE_BACKEND`` accepts ``memory`` (the default) or ``database``.
    Unknown values raise ``ValueError`` so a typo fails at startup instead of
    silently falling back to the in-memory store.
    """

    raw = (os.getenv("STORAGE_BACKEND") or "").strip().lower()
    if not raw:
        return STORAGE_BACKEND_MEMORY
    if raw not in _STORAGE_BACKENDS:
        raise ValueError(
            f"Unsupported STORAGE_BACKEND {raw!r}; expected one of {sorted(_STORAGE_BACKENDS)}"
        )
    return raw


@lru_cache(maxsize=1)
def is_create_all_enabled() -> bool:
    """Return ``True`` when tables should be created at startup."""

    flag = _read_flag("SQLMODEL_CREATE_ALL")
    if flag is None:
        return False
    return flag


@lru_cache(maxsize=1)
def is_seed_default_folders_enabled() -> bool:
    """Return ``True`` when an empty store should receive the starter folders."""

    flag = _read_flag("SEED_DEFAULT_FOLDERS")
    if flag is None:
        return False
    return flag
