"""Failure taxonomy raised by the storage layer.

These carry no HTTP semantics; :mod:`bookmark_manager.errors` maps them to
responses. A missing entity is not an error: storage methods return ``None``
(or ``False`` for deletes) in that case.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class StorageError(Exception):
    """Base class for storage layer failures."""


class ValidationError(StorageError):
    """Input rejected by the storage layer.

    ``errors`` follows the shape FastAPI uses for request validation errors
    (``loc``/``msg``/``type``) so both kinds render the same way.
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ReferentialIntegrityError(ValidationError):
    """A bookmark referenced a folder that does not exist."""

    def __init__(self, folder_id: int) -> None:
        super().__init__(
            f"Folder {folder_id} does not exist",
            errors=[
                {
                    "loc": ["body", "folderId"],
                    "msg": f"Folder {folder_id} does not exist",
                    "type": "referential_integrity",
                    "input": folder_id,
                }
            ],
        )
        self.folder_id = folder_id


class StorageUnavailable(StorageError):
    """The backing store could not be reached."""


__all__ = [
    "StorageError",
    "ValidationError",
    "ReferentialIntegrityError",
    "StorageUnavailable",
]
