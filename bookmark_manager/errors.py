"""Problem-document rendering for every failure the API can return.

Bodies follow RFC 7807 loosely (``type``/``title``/``status``) and add
``code``, ``message`` and ``trace_id``; validation failures also carry an
``errors`` list of ``{loc, msg, type}`` entries.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import StorageError, StorageUnavailable, ValidationError


logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


def _problem(
    *,
    code: str,
    message: str,
    status: int,
    errors: Optional[List[Dict[str, Any]]] = None,
) -> JSONResponse:
    trace_id = str(uuid.uuid4())
    body: Dict[str, Any] = {
        "type": f"about:blank#{code}",
        "title": message,
        "status": status,
        "code": code,
        "message": message,
        "trace_id": trace_id,
    }
    if errors is not None:
        body["errors"] = jsonable_encoder(errors)
    return JSONResponse(
        body,
        status_code=status,
        headers={"X-Trace-Id": trace_id},
        media_type=PROBLEM_MEDIA_TYPE,
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
        return _problem(code="http_error", message=str(exc.detail), status=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
        return _problem(
            code="validation_error",
            message="Request validation failed",
            status=400,
            errors=list(exc.errors()),
        )

    @app.exception_handler(StorageError)
    async def storage_exc_handler(request: Request, exc: StorageError):  # type: ignore[override]
        if isinstance(exc, ValidationError):
            return _problem(code="validation_error", message=exc.message, status=400, errors=exc.errors)
        if isinstance(exc, StorageUnavailable):
            logger.error("Storage unavailable method=%s path=%s", request.method, request.url.path)
            return _problem(code="storage_unavailable", message="Storage is temporarily unavailable", status=500)
        logger.exception("Storage failure: %s", exc)
        return _problem(code="storage_error", message="Storage operation failed", status=500)

    @app.exception_handler(Exception)
    async def unhandled_exc_handler(request: Request, exc: Exception):  # type: ignore[override]
        logger.exception("Unhandled error: %s", exc)
        return _problem(code="internal_error", message="An unexpected error occurred", status=500)
