"""In-process storage backend: dicts keyed by id, guarded by one lock."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Optional

from ..exceptions import ReferentialIntegrityError, ValidationError
from ..schemas import (
    Bookmark,
    BookmarkCreate,
    BookmarkUpdate,
    BookmarkWithFolder,
    Folder,
    User,
    UserCreate,
)
from .base import Storage, normalize_bookmark_title, normalize_folder_name


logger = logging.getLogger(__name__)


class MemoryStorage(Storage):
    """Process-lifetime store backed by dicts keyed by id.

    Every public method holds ``self._lock`` for its whole duration, so
    multi-step mutations (folder delete plus its bookmarks) and read-time
    projections never interleave with another request's writes.
    """

    name = "memory"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: Dict[int, User] = {}
        self._folders: Dict[int, str] = {}
        self._bookmarks: Dict[int, Bookmark] = {}
        self._next_user_id = 1
        self._next_folder_id = 1
        self._next_bookmark_id = 1

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy() if user else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user.model_copy()
            return None

    def create_user(self, data: UserCreate) -> User:
        username = (data.username or "").strip()
        if not username:
            raise ValidationError("Username is required")
        with self._lock:
            if any(u.username == username for u in self._users.values()):
                raise ValidationError(
                    "Username already exists",
                    errors=[{"loc": ["body", "username"], "msg": "Username already exists", "type": "unique"}],
                )
            user = User(id=self._next_user_id, username=username, password=data.password)
            self._next_user_id += 1
            self._users[user.id] = user
            return user.model_copy()

    # Folders

    def _count_bookmarks(self, folder_id: int) -> int:
        return sum(1 for bm in self._bookmarks.values() if bm.folder_id == folder_id)

    def _folder_out(self, folder_id: int) -> Folder:
        return Folder(
            id=folder_id,
            name=self._folders[folder_id],
            bookmark_count=self._count_bookmarks(folder_id),
        )

    def list_folders(self) -> List[Folder]:
        with self._lock:
            return [self._folder_out(folder_id) for folder_id in sorted(self._folders)]

    def get_folder(self, folder_id: int) -> Optional[Folder]:
        with self._lock:
            if folder_id not in self._folders:
                return None
            return self._folder_out(folder_id)

    def create_folder(self, name: str) -> Folder:
        normalized = normalize_folder_name(name)
        with self._lock:
            folder_id = self._next_folder_id
            self._next_folder_id += 1
            self._folders[folder_id] = normalized
            logger.info("Created folder id=%s", folder_id)
            return Folder(id=folder_id, name=normalized, bookmark_count=0)

    def update_folder(self, folder_id: int, name: str) -> Optional[Folder]:
        normalized = normalize_folder_name(name)
        with self._lock:
            if folder_id not in self._folders:
                return None
            self._folders[folder_id] = normalized
            return self._folder_out(folder_id)

    def delete_folder(self, folder_id: int) -> bool:
        with self._lock:
            if folder_id not in self._folders:
                return False
            doomed = [bm_id for bm_id, bm in self._bookmarks.items() if bm.folder_id == folder_id]
            for bm_id in doomed:
                del self._bookmarks[bm_id]
            del self._folders[folder_id]
            logger.info("Deleted folder id=%s cascaded_bookmarks=%s", folder_id, len(doomed))
            return True

    # Bookmarks

    def _with_folder(self, bookmark: Bookmark) -> BookmarkWithFolder:
        folder_name = None
        if bookmark.folder_id is not None:
            folder_name = self._folders.get(bookmark.folder_id)
        return BookmarkWithFolder(**bookmark.model_dump(), folder_name=folder_name)

    def _project(self, bookmarks: Iterable[Bookmark]) -> List[BookmarkWithFolder]:
        return [self._with_folder(bm) for bm in sorted(bookmarks, key=lambda bm: bm.id)]

    def _require_folder(self, folder_id: Optional[int]) -> None:
        if folder_id is not None and folder_id not in self._folders:
            raise ReferentialIntegrityError(folder_id)

    def list_bookmarks(self) -> List[BookmarkWithFolder]:
        with self._lock:
            return self._project(self._bookmarks.values())

    def list_bookmarks_by_folder(self, folder_id: int) -> List[BookmarkWithFolder]:
        with self._lock:
            return self._project(bm for bm in self._bookmarks.values() if bm.folder_id == folder_id)

    def get_bookmark(self, bookmark_id: int) -> Optional[BookmarkWithFolder]:
        with self._lock:
            bookmark = self._bookmarks.get(bookmark_id)
            if bookmark is None:
                return None
            return self._with_folder(bookmark)

    def create_bookmark(self, data: BookmarkCreate) -> Bookmark:
        title = normalize_bookmark_title(data.title)
        with self._lock:
            self._require_folder(data.folder_id)
            bookmark = Bookmark(
                id=self._next_bookmark_id,
                title=title,
                url=data.url,
                folder_id=data.folder_id,
                favicon=data.favicon,
            )
            self._next_bookmark_id += 1
            self._bookmarks[bookmark.id] = bookmark
            logger.info("Created bookmark id=%s folder_id=%s", bookmark.id, bookmark.folder_id)
            return bookmark.model_copy()

    def update_bookmark(self, bookmark_id: int, data: BookmarkUpdate) -> Optional[Bookmark]:
        changes = data.model_dump(exclude_unset=True)
        if "title" in changes:
            changes["title"] = normalize_bookmark_title(changes["title"])
        with self._lock:
            existing = self._bookmarks.get(bookmark_id)
            if existing is None:
                return None
            if "folder_id" in changes:
                self._require_folder(changes["folder_id"])
            updated = existing.model_copy(update=changes)
            self._bookmarks[bookmark_id] = updated
            return updated.model_copy()

    def delete_bookmark(self, bookmark_id: int) -> bool:
        with self._lock:
            return self._bookmarks.pop(bookmark_id, None) is not None

    def search_bookmarks(self, term: str) -> List[BookmarkWithFolder]:
        needle = (term or "").lower()
        with self._lock:
            return self._project(
                bm
                for bm in self._bookmarks.values()
                if needle in bm.title.lower() or needle in bm.url.lower()
            )
