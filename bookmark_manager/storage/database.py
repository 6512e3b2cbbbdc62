"""Relational storage backend on SQLModel tables.

Works on any SQLAlchemy URL; SQLite connections get foreign keys and a
Unicode-aware ``lower()`` from :func:`bookmark_manager.db.configure_sqlite`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlmodel import Session, func, select

from .. import models, schemas
from ..db import configure_sqlite, get_session_ctx
from ..exceptions import ReferentialIntegrityError, StorageUnavailable, ValidationError
from .base import Storage, normalize_bookmark_title, normalize_folder_name


logger = logging.getLogger(__name__)

_LIKE_ESCAPE = "\\"


def _like_pattern(term: str) -> str:
    escaped = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"


def _user_to_out(row: models.User) -> schemas.User:
    return schemas.User(id=row.id, username=row.username, password=row.password)


def _folder_to_out(row: models.Folder, bookmark_count: int = 0) -> schemas.Folder:
    return schemas.Folder(id=row.id, name=row.name, bookmark_count=int(bookmark_count or 0))


def _bookmark_to_out(row: models.Bookmark) -> schemas.Bookmark:
    return schemas.Bookmark(
        id=row.id,
        title=row.title,
        url=row.url,
        folder_id=row.folder_id,
        favicon=row.favicon,
    )


def _bookmark_with_folder(row: models.Bookmark, folder_name: Optional[str]) -> schemas.BookmarkWithFolder:
    return schemas.BookmarkWithFolder(
        id=row.id,
        title=row.title,
        url=row.url,
        folder_id=row.folder_id,
        favicon=row.favicon,
        folder_name=folder_name,
    )


class DatabaseStorage(Storage):
    """Relational store using SQLModel sessions, one session per operation.

    Foreign keys are declared with ``ON DELETE CASCADE`` but the folder
    delete still removes bookmarks explicitly inside the same transaction so
    the cascade holds on engines that do not enforce foreign keys.
    """

    name = "database"

    def __init__(self, engine: Optional[Engine] = None) -> None:
        if engine is not None:
            configure_sqlite(engine)
        self._engine = engine

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with get_session_ctx(self._engine) as session:
                yield session
        except IntegrityError:
            raise
        except (DBAPIError, PoolTimeoutError) as exc:
            logger.error("Database unavailable: %s", exc.__class__.__name__, exc_info=True)
            raise StorageUnavailable("Database unavailable") from exc

    def _bookmarks_with_folder(self, session: Session, *clauses) -> List[schemas.BookmarkWithFolder]:
        stmt = select(models.Bookmark, models.Folder.name).outerjoin(
            models.Folder, models.Bookmark.folder_id == models.Folder.id
        )
        for clause in clauses:
            stmt = stmt.where(clause)
        stmt = stmt.order_by(models.Bookmark.id)
        return [_bookmark_with_folder(row, name) for row, name in session.exec(stmt).all()]

    def _require_folder(self, session: Session, folder_id: Optional[int]) -> None:
        if folder_id is not None and session.get(models.Folder, folder_id) is None:
            raise ReferentialIntegrityError(folder_id)

    # Users

    def get_user(self, user_id: int) -> Optional[schemas.User]:
        with self._session() as session:
            row = session.get(models.User, user_id)
            return _user_to_out(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[schemas.User]:
        with self._session() as session:
            row = session.exec(select(models.User).where(models.User.username == username)).first()
            return _user_to_out(row) if row else None

    def create_user(self, data: schemas.UserCreate) -> schemas.User:
        username = (data.username or "").strip()
        if not username:
            raise ValidationError("Username is required")
        with self._session() as session:
            row = models.User(username=username, password=data.password)
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ValidationError(
                    "Username already exists",
                    errors=[{"loc": ["body", "username"], "msg": "Username already exists", "type": "unique"}],
                ) from exc
            session.refresh(row)
            return _user_to_out(row)

    # Folders

    def _folder_counts_stmt(self):
        return (
            select(models.Folder, func.count(models.Bookmark.id))
            .outerjoin(models.Bookmark, models.Bookmark.folder_id == models.Folder.id)
            .group_by(models.Folder.id)
        )

    def list_folders(self) -> List[schemas.Folder]:
        with self._session() as session:
            stmt = self._folder_counts_stmt().order_by(models.Folder.id)
            return [_folder_to_out(row, count) for row, count in session.exec(stmt).all()]

    def get_folder(self, folder_id: int) -> Optional[schemas.Folder]:
        with self._session() as session:
            stmt = self._folder_counts_stmt().where(models.Folder.id == folder_id)
            result = session.exec(stmt).first()
            if result is None:
                return None
            row, count = result
            return _folder_to_out(row, count)

    def create_folder(self, name: str) -> schemas.Folder:
        normalized = normalize_folder_name(name)
        with self._session() as session:
            row = models.Folder(name=normalized)
            session.add(row)
            session.commit()
            session.refresh(row)
            logger.info("Created folder id=%s", row.id)
            return _folder_to_out(row, 0)

    def update_folder(self, folder_id: int, name: str) -> Optional[schemas.Folder]:
        normalized = normalize_folder_name(name)
        with self._session() as session:
            row = session.get(models.Folder, folder_id)
            if row is None:
                return None
            row.name = normalized
            session.add(row)
            session.commit()
        return self.get_folder(folder_id)

    def delete_folder(self, folder_id: int) -> bool:
        with self._session() as session:
            row = session.get(models.Folder, folder_id)
            if row is None:
                return False
            doomed = session.exec(
                select(models.Bookmark).where(models.Bookmark.folder_id == folder_id)
            ).all()
            for bookmark in doomed:
                session.delete(bookmark)
            session.flush()
            session.delete(row)
            session.commit()
            logger.info("Deleted folder id=%s cascaded_bookmarks=%s", folder_id, len(doomed))
            return True

    # Bookmarks

    def list_bookmarks(self) -> List[schemas.BookmarkWithFolder]:
        with self._session() as session:
            return self._bookmarks_with_folder(session)

    def list_bookmarks_by_folder(self, folder_id: int) -> List[schemas.BookmarkWithFolder]:
        with self._session() as session:
            return self._bookmarks_with_folder(session, models.Bookmark.folder_id == folder_id)

    def get_bookmark(self, bookmark_id: int) -> Optional[schemas.BookmarkWithFolder]:
        with self._session() as session:
            rows = self._bookmarks_with_folder(session, models.Bookmark.id == bookmark_id)
            return rows[0] if rows else None

    def create_bookmark(self, data: schemas.BookmarkCreate) -> schemas.Bookmark:
        title = normalize_bookmark_title(data.title)
        with self._session() as session:
            self._require_folder(session, data.folder_id)
            row = models.Bookmark(
                title=title,
                url=data.url,
                folder_id=data.folder_id,
                favicon=data.favicon,
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                # folder deleted between the check and the insert
                session.rollback()
                raise ReferentialIntegrityError(data.folder_id) from exc
            session.refresh(row)
            logger.info("Created bookmark id=%s folder_id=%s", row.id, row.folder_id)
            return _bookmark_to_out(row)

    def update_bookmark(
        self, bookmark_id: int, data: schemas.BookmarkUpdate
    ) -> Optional[schemas.Bookmark]:
        changes = data.model_dump(exclude_unset=True)
        if "title" in changes:
            changes["title"] = normalize_bookmark_title(changes["title"])
        with self._session() as session:
            row = session.get(models.Bookmark, bookmark_id)
            if row is None:
                return None
            if "folder_id" in changes:
                self._require_folder(session, changes["folder_id"])
            for key, value in changes.items():
                setattr(row, key, value)
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ReferentialIntegrityError(changes.get("folder_id")) from exc
            session.refresh(row)
            return _bookmark_to_out(row)

    def delete_bookmark(self, bookmark_id: int) -> bool:
        with self._session() as session:
            row = session.get(models.Bookmark, bookmark_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    def search_bookmarks(self, term: str) -> List[schemas.BookmarkWithFolder]:
        like = _like_pattern(term or "")
        with self._session() as session:
            return self._bookmarks_with_folder(
                session,
                or_(
                    func.lower(models.Bookmark.title).like(func.lower(like), escape=_LIKE_ESCAPE),
                    func.lower(models.Bookmark.url).like(func.lower(like), escape=_LIKE_ESCAPE),
                ),
            )
