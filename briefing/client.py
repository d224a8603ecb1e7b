from typing import Any, Mapping, Optional, Protocol

import httpx

from .config import TIMEOUT_SECONDS


class Response(Protocol):
    status_code: int

    def json(self) -> Any: ...


class HttpGetter(Protocol):
    """What the adapters need from an HTTP client."""

    async def get(self, url: str, *, params: Optional[Mapping[str, Any]] = None) -> Response: ...


def create_client(
    base_url: str,
    headers: Optional[Mapping[str, str]] = None,
    api_key: Optional[str] = None,
    timeout: float = TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build an async client bound to ``base_url``.

    httpx never raises on HTTP status unless asked to, so callers judge
    failures by ``status_code``. ``api_key`` is sent as a bearer token.
    """

    default_headers = {"Accept": "application/json, text/plain, */*"}
    if headers:
        default_headers.update(headers)
    if api_key:
        default_headers["Authorization"] = f"Bearer {api_key}"

    return httpx.AsyncClient(
        base_url=base_url,
        headers=default_headers,
        timeout=timeout,
        transport=transport,
    )
