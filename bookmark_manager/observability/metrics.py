import time
from typing import Callable

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.requests import Request
from starlette.responses import Response


REQUEST_COUNTER = Counter(
    "api_requests_total",
    "HTTP requests total",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "api_request_duration_seconds",
    "HTTP request latency",
    ["method"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5),
)


def normalize_path(path: str) -> str:
    """Collapse numeric path segments to ``:id`` (``/api/bookmarks/7``)."""
    return "/".join(":id" if part.isdigit() else part for part in path.split("/"))


async def metrics_endpoint(_: Request) -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


async def request_metrics_middleware(request: Request, call_next: Callable):
    start = time.perf_counter()
    response = await call_next(request)
    REQUEST_LATENCY.labels(request.method).observe(time.perf_counter() - start)
    REQUEST_COUNTER.labels(request.method, normalize_path(request.url.path), str(response.status_code)).inc()
    return response
