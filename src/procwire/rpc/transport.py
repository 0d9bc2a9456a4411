"""Default transport: HTTP via httpx.AsyncClient."""
from __future__ import annotations

from typing import Any

import httpx

from procwire.rpc.protocol import TransportRequest, TransportResponse


class HttpxTransport:
    """
    HTTP transport out of the box.
    Pass client= to share a connection pool (or an httpx.ASGITransport in tests);
    without one, a client is opened per request.
    A passed-in client stays owned by the caller: aclose() leaves it open
    unless close_client=True hands it over.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        *,
        close_client: bool = False,
    ) -> None:
        self._client = client
        self._timeout = timeout
        self._close_client = close_client

    async def send(self, request: TransportRequest) -> TransportResponse:
        if self._client is not None:
            return await self._send(self._client, request)
        async with httpx.AsyncClient(**self._client_kwargs()) as client:
            return await self._send(client, request)

    async def _send(self, client: httpx.AsyncClient, request: TransportRequest) -> TransportResponse:
        kwargs: dict[str, Any] = {"headers": request.headers, "content": request.body}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        r = await client.request(request.method, request.url, **kwargs)
        return TransportResponse(status_code=r.status_code, body=r.content)

    def _client_kwargs(self) -> dict[str, Any]:
        return {"timeout": self._timeout} if self._timeout is not None else {}

    async def aclose(self) -> None:
        if self._client is not None and self._close_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
