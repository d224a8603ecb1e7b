import logging
import time
from typing import Awaitable, Callable, TypeVar

from prometheus_client import Counter, Histogram

from .errors import AdapterError

logger = logging.getLogger(__name__)

R = TypeVar("R")

UPSTREAM_REQUESTS = Counter(
    "upstream_requests_total",
    "Total upstream API calls",
    ["adapter", "outcome"],
)
UPSTREAM_LATENCY = Histogram(
    "upstream_request_latency_seconds",
    "Upstream API call latency",
    ["adapter"],
)


async def timed(name: str, fn: Callable[[], Awaitable[R]]) -> R:
    """Run ``fn`` and record how long it took under ``name``.

    Any exception is logged with its cause and replaced by a generic
    ``AdapterError`` that only names the adapter.
    """

    start = time.monotonic()
    try:
        res = await fn()
    except Exception as exc:
        duration = time.monotonic() - start
        UPSTREAM_REQUESTS.labels(adapter=name, outcome="error").inc()
        UPSTREAM_LATENCY.labels(adapter=name).observe(duration)
        logger.debug(
            "%s",
            {"name": name, "ms": round(duration * 1000), "ok": False},
        )
        logger.debug("%s cause: %r", name, exc)
        raise AdapterError(name) from exc

    duration = time.monotonic() - start
    status = getattr(res, "status_code", None)
    ok = status is None or status < 400
    UPSTREAM_REQUESTS.labels(adapter=name, outcome="ok" if ok else "http_error").inc()
    UPSTREAM_LATENCY.labels(adapter=name).observe(duration)
    logger.debug(
        "%s",
        {"name": name, "ms": round(duration * 1000), "status": status, "ok": ok},
    )
    return res
