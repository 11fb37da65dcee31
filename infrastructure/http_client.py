"""Shared async HTTP client with configurable timeout."""

from typing import Any, Mapping, Optional

import httpx


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient with a configurable timeout.

    One instance per external service keeps timeouts independently configurable.
    ``transport`` is passed through to httpx; tests use httpx.MockTransport.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def post_form(self, url: str, data: Mapping[str, str]) -> httpx.Response:
        """POST ``data`` form-encoded and return the response with its body unread.

        The caller owns the response and must ``await response.aclose()``.
        """
        request = self._client.build_request("POST", url, data=dict(data))
        return await self._client.send(request, stream=True)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
