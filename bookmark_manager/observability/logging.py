import logging
import os
import uuid
from contextvars import ContextVar
from typing import Optional

from pythonjsonlogger import jsonlogger


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s"

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        # startup logs run before any request binds an id
        record.request_id = request_id_ctx.get() or ""
        return True


def setup_logging() -> None:
    """Send every record through one JSON handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())
    root.handlers = [handler]


def bind_request_id(req_id: Optional[str] = None) -> str:
    rid = req_id or uuid.uuid4().hex
    request_id_ctx.set(rid)
    return rid
