"""Storage engine for folders and bookmarks.

Two interchangeable backends implement :class:`Storage`:

- :class:`MemoryStorage`: dicts held for the process lifetime
- :class:`DatabaseStorage`: SQLModel tables on any SQLAlchemy URL
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import (
    STORAGE_BACKEND_DATABASE,
    get_storage_backend,
    is_seed_default_folders_enabled,
)
from .base import DEFAULT_FOLDER_NAMES, Storage
from .database import DatabaseStorage
from .memory import MemoryStorage


logger = logging.getLogger(__name__)


def build_storage(backend: Optional[str] = None, *, seed: Optional[bool] = None) -> Storage:
    """Create the storage backend selected by ``STORAGE_BACKEND``.

    The database backend initialises its schema through
    :func:`bookmark_manager.db.init_db`. When ``seed`` (or
    ``SEED_DEFAULT_FOLDERS``) is enabled an empty store receives the
    starter folders.
    """

    backend = backend or get_storage_backend()
    if backend == STORAGE_BACKEND_DATABASE:
        from ..db import init_db

        init_db()
        storage: Storage = DatabaseStorage()
    else:
        storage = MemoryStorage()
    if seed is None:
        seed = is_seed_default_folders_enabled()
    if seed:
        created = storage.seed_default_folders()
        if created:
            logger.info("Seeded default folders: %s", ", ".join(f.name for f in created))
    logger.info("Storage backend ready: %s", storage.name)
    return storage


__all__ = [
    "DEFAULT_FOLDER_NAMES",
    "Storage",
    "MemoryStorage",
    "DatabaseStorage",
    "build_storage",
]
