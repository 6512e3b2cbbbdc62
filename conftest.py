from __future__ import annotations

import importlib
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

for name in [
    "bookmark_manager.models",
    "bookmark_manager.storage",
    "bookmark_manager.main",
]:
    importlib.import_module(name)


@pytest.fixture(autouse=True)
def _reset_config_caches():
    from bookmark_manager.config import (
        get_storage_backend,
        is_create_all_enabled,
        is_seed_default_folders_enabled,
    )

    caches = (get_storage_backend, is_create_all_enabled, is_seed_default_folders_enabled)
    for cached in caches:
        cached.cache_clear()
    try:
        yield
    finally:
        for cached in caches:
            cached.cache_clear()
