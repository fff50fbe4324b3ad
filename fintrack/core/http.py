"""HTTP wrapper used by every resource client.

Keeps the session cookies in one ``httpx.AsyncClient``, sets the JSON content
type, attaches the CSRF header to protected mutations and turns a 401 into
``UnauthorizedError``.
"""

import time
from typing import Any

import httpx
import structlog

from fintrack.config import settings
from fintrack.core.exceptions import UnauthorizedError

logger = structlog.get_logger()

API_PREFIX = "/api/"
AUTH_PREFIX = "/api/auth/"
MUTATION_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
CSRF_HEADER = "X-CSRF-Token"


def is_mutation(method: str) -> bool:
    return method.upper() in MUTATION_METHODS


def is_csrf_protected(path: str) -> bool:
    """Resource endpoints need the token; auth endpoints never get it."""
    return path.startswith(API_PREFIX) and not path.startswith(AUTH_PREFIX)


def build_headers(
    method: str,
    path: str,
    headers: dict[str, str] | None = None,
    csrf_token: str | None = None,
) -> dict[str, str]:
    result = dict(headers or {})
    if not any(key.lower() == "content-type" for key in result):
        result["Content-Type"] = "application/json"
    if csrf_token and is_mutation(method) and is_csrf_protected(path):
        result[CSRF_HEADER] = csrf_token
    return result


class ApiClient:
    """Thin async wrapper around the shared HTTP session."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        if client is not None and base_url is None:
            base_url = str(client.base_url)
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.http_timeout,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        csrf_token: str | None = None,
        raise_on_unauthorized: bool = True,
    ) -> httpx.Response:
        """Send one request.

        A 401 raises ``UnauthorizedError``; the auth endpoints opt out so they
        can read the rejection reason from the body.
        """
        method = method.upper()
        start_time = time.perf_counter()

        response = await self._client.request(
            method,
            path,
            params=params,
            json=json,
            headers=build_headers(method, path, headers, csrf_token),
        )

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "api_request",
            method=method,
            path=path,
            status=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        if response.status_code == 401 and raise_on_unauthorized:
            logger.warning("api_unauthorized", method=method, path=path)
            raise UnauthorizedError()
        return response

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
