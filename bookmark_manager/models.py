from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlmodel import Field, SQLModel


# sqlite_autoincrement keeps SQLite from handing out the id of a deleted
# highest row again; Postgres sequences never reuse ids.


class User(SQLModel, table=True):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        {"sqlite_autoincrement": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(sa_column=Column(String, nullable=False))
    password: str = Field(sa_column=Column(String, nullable=False))


class Folder(SQLModel, table=True):
    __tablename__ = "folders"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(sa_column=Column(String, nullable=False))


class Bookmark(SQLModel, table=True):
    __tablename__ = "bookmarks"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(sa_column=Column(Text, nullable=False))
    url: str = Field(sa_column=Column(Text, nullable=False))
    folder_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("folders.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        ),
    )
    favicon: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))


__all__ = [
    "User",
    "Folder",
    "Bookmark",
]
