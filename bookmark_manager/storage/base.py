"""Storage contract shared by the in-memory and database backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from ..exceptions import ValidationError
from ..schemas import (
    Bookmark,
    BookmarkCreate,
    BookmarkUpdate,
    BookmarkWithFolder,
    Folder,
    User,
    UserCreate,
)


DEFAULT_FOLDER_NAMES = ("Development", "Learning", "Work")


def normalize_folder_name(name: Optional[str]) -> str:
    """Return the stripped folder name or raise :class:`ValidationError`."""

    normalized = (name or "").strip()
    if not normalized:
        raise ValidationError(
            "Folder name is required",
            errors=[{"loc": ["body", "name"], "msg": "Folder name is required", "type": "missing"}],
        )
    return normalized


def normalize_bookmark_title(title: Optional[str]) -> str:
    """Return the stripped bookmark title or raise :class:`ValidationError`."""

    normalized = (title or "").strip()
    if not normalized:
        raise ValidationError(
            "Bookmark title is required",
            errors=[{"loc": ["body", "title"], "msg": "Bookmark title is required", "type": "missing"}],
        )
    return normalized


class Storage(ABC):
    """Single source of truth for users, folders and bookmarks.

    Implementations must keep these guarantees regardless of medium:

    * ids are assigned by the store, increase monotonically and are never
      handed out twice;
    * a non-null ``folder_id`` on create/update must name an existing folder
      (:class:`~bookmark_manager.exceptions.ReferentialIntegrityError`);
    * deleting a folder deletes its bookmarks in the same atomic step;
    * ``bookmark_count`` and ``folder_name`` are computed on every read.

    Lookups of unknown ids return ``None`` and deletes return ``False``;
    neither is an error.
    """

    name: str = "abstract"

    # Users

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, data: UserCreate) -> User: ...

    # Folders

    @abstractmethod
    def list_folders(self) -> List[Folder]: ...

    @abstractmethod
    def get_folder(self, folder_id: int) -> Optional[Folder]: ...

    @abstractmethod
    def create_folder(self, name: str) -> Folder: ...

    @abstractmethod
    def update_folder(self, folder_id: int, name: str) -> Optional[Folder]: ...

    @abstractmethod
    def delete_folder(self, folder_id: int) -> bool: ...

    # Bookmarks

    @abstractmethod
    def list_bookmarks(self) -> List[BookmarkWithFolder]: ...

    @abstractmethod
    def list_bookmarks_by_folder(self, folder_id: int) -> List[BookmarkWithFolder]: ...

    @abstractmethod
    def get_bookmark(self, bookmark_id: int) -> Optional[BookmarkWithFolder]: ...

    @abstractmethod
    def create_bookmark(self, data: BookmarkCreate) -> Bookmark: ...

    @abstractmethod
    def update_bookmark(self, bookmark_id: int, data: BookmarkUpdate) -> Optional[Bookmark]: ...

    @abstractmethod
    def delete_bookmark(self, bookmark_id: int) -> bool: ...

    @abstractmethod
    def search_bookmarks(self, term: str) -> List[BookmarkWithFolder]: ...

    def seed_default_folders(self) -> List[Folder]:
        """Create the starter folders when the store has none yet."""

        if self.list_folders():
            return []
        return [self.create_folder(name) for name in DEFAULT_FOLDER_NAMES]
