import logging
from typing import List, Optional
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..schemas import Bookmark, BookmarkCreate, BookmarkUpdate, BookmarkWithFolder
from ..dependencies import get_storage
from ..storage import Storage
from .params import parse_filter_id, parse_id


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


def default_favicon_url(url: str) -> Optional[str]:
    """Return ``{scheme}://{host}/favicon.ico`` for ``url``, or ``None``."""
    try:
        parsed = urlparse(url)
        port = parsed.port
    except ValueError:
        return None
    host = parsed.hostname
    if not parsed.scheme or not host:
        return None
    if ":" in host:
        host = f"[{host}]"
    if port is not None:
        host = f"{host}:{port}"
    return f"{parsed.scheme.lower()}://{host}/favicon.ico"


@router.get("", response_model=List[BookmarkWithFolder])
@router.get("/", response_model=List[BookmarkWithFolder], include_in_schema=False)
def list_bookmarks(
    storage: Storage = Depends(get_storage),
    search: Optional[str] = None,
    folder_id: Optional[str] = Query(None, alias="folderId"),
):
    # search wins over folderId; empty values mean "no filter"
    if search:
        return storage.search_bookmarks(search)
    if folder_id:
        return storage.list_bookmarks_by_folder(parse_filter_id(folder_id, "folder"))
    return storage.list_bookmarks()


@router.get("/{bookmark_id}", response_model=BookmarkWithFolder)
def get_bookmark(bookmark_id: str, storage: Storage = Depends(get_storage)):
    bookmark = storage.get_bookmark(parse_id(bookmark_id, "bookmark"))
    if bookmark is None:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return bookmark


@router.post("", response_model=Bookmark, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=Bookmark, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_bookmark(payload: BookmarkCreate, storage: Storage = Depends(get_storage)):
    if not payload.favicon:
        payload = payload.model_copy(update={"favicon": default_favicon_url(payload.url)})
    return storage.create_bookmark(payload)


@router.put("/{bookmark_id}", response_model=Bookmark)
def update_bookmark(bookmark_id: str, payload: BookmarkUpdate, storage: Storage = Depends(get_storage)):
    bookmark = storage.update_bookmark(parse_id(bookmark_id, "bookmark"), payload)
    if bookmark is None:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return bookmark


@router.delete("/{bookmark_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bookmark(bookmark_id: str, storage: Storage = Depends(get_storage)):
    parsed_id = parse_id(bookmark_id, "bookmark")
    if not storage.delete_bookmark(parsed_id):
        raise HTTPException(status_code=404, detail="Bookmark not found")
    logger.info("Bookmark deleted via API bookmark_id=%s", parsed_id)
    return None
