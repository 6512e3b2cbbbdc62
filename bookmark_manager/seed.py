"""Simple seeding utility to add the starter folders into the store.

Usage:
  STORAGE_BACKEND=database DATABASE_URL=... python -m bookmark_manager.seed
"""

from __future__ import annotations

from typing import List

from .schemas import Folder
from .storage import Storage, build_storage


def seed(storage: Storage | None = None) -> List[Folder]:
    storage = storage if storage is not None else build_storage(seed=False)
    return storage.seed_default_folders()


def main():
    created = seed()
    if created:
        print("Seeded folders: " + ", ".join(f"{f.id}:{f.name}" for f in created))
    else:
        print("Folders already present; nothing to seed")


if __name__ == "__main__":
    main()
