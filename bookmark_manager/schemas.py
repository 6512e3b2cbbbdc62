from typing import Any, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError as PydanticValidationError,
    constr,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from . import __version__

MAX_ID = 2**63 - 1

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def _validate_http_url(value: Any) -> str:
    """Accept an absolute http(s) URL and return it stripped but otherwise as sent."""
    if not isinstance(value, str):
        raise PydanticCustomError("url_type", "url must be a string")
    text = value.strip()
    try:
        _HTTP_URL.validate_python(text)
    except PydanticValidationError as exc:
        raise PydanticCustomError("url_invalid", "url must be a well-formed absolute http(s) URL") from exc
    return text


class ApiModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case in Python.

    Requests may use either spelling (``folderId`` or ``folder_id``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatusResponse(BaseModel):
    status: str = "ok"
    version: str = __version__
    storage: Optional[str] = None


class UserCreate(ApiModel):
    username: constr(strip_whitespace=True, min_length=1)
    password: str = Field(..., min_length=1)


class User(ApiModel):
    id: int
    username: str
    password: str


class FolderCreate(ApiModel):
    name: constr(strip_whitespace=True, min_length=1)


class FolderUpdate(ApiModel):
    name: constr(strip_whitespace=True, min_length=1)


class Folder(ApiModel):
    id: int
    name: str
    bookmark_count: int = 0


class BookmarkCreate(ApiModel):
    title: constr(strip_whitespace=True, min_length=1)
    url: str
    folder_id: Optional[int] = Field(None, ge=1, le=MAX_ID)
    favicon: Optional[str] = None

    @field_validator("url", mode="before")
    @classmethod
    def _validate_url(cls, value: Any) -> str:
        return _validate_http_url(value)


class BookmarkUpdate(ApiModel):
    """Merge-patch payload: only fields present in the body are applied."""

    title: Optional[constr(strip_whitespace=True, min_length=1)] = None
    url: Optional[str] = None
    folder_id: Optional[int] = Field(None, ge=1, le=MAX_ID)
    favicon: Optional[str] = None

    @field_validator("url", mode="before")
    @classmethod
    def _validate_url(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return _validate_http_url(value)

    @model_validator(mode="after")
    def _reject_null_required_fields(self) -> "BookmarkUpdate":
        for name in ("title", "url"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise PydanticCustomError(
                    "field_not_nullable",
                    "{field} may not be null",
                    {"field": name},
                )
        return self


class Bookmark(ApiModel):
    id: int
    title: str
    url: str
    folder_id: Optional[int] = None
    favicon: Optional[str] = None


class BookmarkWithFolder(Bookmark):
    folder_name: Optional[str] = None
