from fastapi import APIRouter, Depends

from ..schemas import StatusResponse
from ..dependencies import get_storage
from ..storage import Storage


router = APIRouter(tags=["status"])


@router.get("/status", response_model=StatusResponse)
def get_status(storage: Storage = Depends(get_storage)):
    return StatusResponse(storage=storage.name)
