import logging
import os
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .errors import register_error_handlers
from .observability.logging import setup_logging, bind_request_id
from .observability.metrics import metrics_endpoint, request_metrics_middleware
from .observability.sentry import init_sentry
from .routers import bookmarks, folders, status
from .storage import Storage, build_storage


logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def _csv_env(name: str, default: str = "*") -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


def create_app(storage: Optional[Storage] = None) -> FastAPI:
    tags_metadata = [
        {"name": "status", "description": "Service health"},
        {"name": "folders", "description": "Folder CRUD with live bookmark counts"},
        {"name": "bookmarks", "description": "Bookmark CRUD, folder listing and search"},
    ]
    app = FastAPI(title="Bookmark Manager API", version=__version__, openapi_tags=tags_metadata)

    setup_logging()
    register_error_handlers(app)
    init_sentry(app)

    app.state.storage = storage if storage is not None else build_storage()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_csv_env("CORS_ALLOW_ORIGINS"),
        allow_credentials=os.getenv("CORS_ALLOW_CREDENTIALS", "1").strip().lower() in ("1", "true"),
        allow_methods=_csv_env("CORS_ALLOW_METHODS"),
        allow_headers=_csv_env("CORS_ALLOW_HEADERS"),
    )
    # Metrics middleware
    app.middleware("http")(request_metrics_middleware)

    @app.middleware("http")
    async def add_request_id(request, call_next):
        rid = bind_request_id(request.headers.get("X-Request-Id"))
        response = await call_next(request)
        response.headers["X-Request-Id"] = rid
        return response

    # Routers: documented under /api, also reachable without the prefix
    app.include_router(status.router)
    app.include_router(folders.router, prefix=API_PREFIX)
    app.include_router(bookmarks.router, prefix=API_PREFIX)
    app.include_router(folders.router, include_in_schema=False)
    app.include_router(bookmarks.router, include_in_schema=False)
    # Prometheus metrics
    app.add_api_route("/metrics", metrics_endpoint, include_in_schema=False)

    logger.info("Application created storage=%s", app.state.storage.name)
    return app


def run() -> None:
    import uvicorn

    uvicorn.run(
        "bookmark_manager.main:create_app",
        factory=True,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    run()
