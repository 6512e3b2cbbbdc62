import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ..schemas import Folder, FolderCreate, FolderUpdate
from ..dependencies import get_storage
from ..storage import Storage
from .params import parse_id


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/folders", tags=["folders"])


@router.get("", response_model=List[Folder])
@router.get("/", response_model=List[Folder], include_in_schema=False)
def list_folders(storage: Storage = Depends(get_storage)):
    return storage.list_folders()


@router.get("/{folder_id}", response_model=Folder)
def get_folder(folder_id: str, storage: Storage = Depends(get_storage)):
    folder = storage.get_folder(parse_id(folder_id, "folder"))
    if folder is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return folder


@router.post("", response_model=Folder, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=Folder, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_folder(payload: FolderCreate, storage: Storage = Depends(get_storage)):
    return storage.create_folder(payload.name)


@router.put("/{folder_id}", response_model=Folder)
def update_folder(folder_id: str, payload: FolderUpdate, storage: Storage = Depends(get_storage)):
    folder = storage.update_folder(parse_id(folder_id, "folder"), payload.name)
    if folder is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return folder


@router.delete("/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_folder(folder_id: str, storage: Storage = Depends(get_storage)):
    parsed_id = parse_id(folder_id, "folder")
    if not storage.delete_folder(parsed_id):
        raise HTTPException(status_code=404, detail="Folder not found")
    logger.info("Folder deleted via API folder_id=%s", parsed_id)
    return None
