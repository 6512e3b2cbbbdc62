"""Tests for environment-driven configuration helpers."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    monkeypatch.delenv("STORAGE_BACKEND", raising=False)
    monkeypatch.delenv("SEED_DEFAULT_FOLDERS", raising=False)
    monkeypatch.delenv("SQLMODEL_CREATE_ALL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, False),
        ("", False),
        ("0", False),
        ("off", False),
        ("no", False),
        ("1", True),
        ("true", True),
        ("yes", True),
        ("On", True),
        (" 1 ", True),
    ],
)
def test_is_seed_default_folders_enabled(value, expected, monkeypatch):
    from bookmark_manager.config import is_seed_default_folders_enabled

    if value is not None:
        monkeypatch.setenv("SEED_DEFAULT_FOLDERS", value)
    assert is_seed_default_folders_enabled() is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "memory"),
        ("", "memory"),
        ("memory", "memory"),
        ("database", "database"),
        (" DATABASE ", "database"),
    ],
)
def test_get_storage_backend(value, expected, monkeypatch):
    from bookmark_manager.config import get_storage_backend

    if value is not None:
        monkeypatch.setenv("STORAGE_BACKEND", value)
    assert get_storage_backend() == expected


def test_unknown_storage_backend_is_rejected(monkeypatch):
    from bookmark_manager.config import get_storage_backend

    monkeypatch.setenv("STORAGE_BACKEND", "redis")
    with pytest.raises(ValueError):
        get_storage_backend()


def test_database_url_default(monkeypatch):
    from bookmark_manager.config import DEFAULT_DATABASE_URL, get_database_url

    assert get_database_url() == DEFAULT_DATABASE_URL
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    assert get_database_url() == "sqlite://"


def test_build_storage_follows_backend_flag(monkeypatch):
    from bookmark_manager.storage import DatabaseStorage, MemoryStorage, build_storage

    assert isinstance(build_storage(), MemoryStorage)

    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    assert isinstance(build_storage("database"), DatabaseStorage)


def test_build_storage_seeds_when_enabled(monkeypatch):
    from bookmark_manager.storage import build_storage

    monkeypatch.setenv("SEED_DEFAULT_FOLDERS", "1")
    storage = build_storage()

    assert [f.name for f in storage.list_folders()] == ["Development", "Learning", "Work"]


def test_status_reports_storage_backend(monkeypatch):
    from fastapi.testclient import TestClient

    from bookmark_manager import __version__
    from bookmark_manager.main import create_app

    client = TestClient(create_app())
    payload = client.get("/status").json()

    assert payload == {"status": "ok", "version": __version__, "storage": "memory"}
