from __future__ import annotations

import asyncio
import json
from typing import Any, Callable

import pytest

from procwire.rpc.protocol import TransportRequest, TransportResponse

ENDPOINT = "http://localhost:8081/_rpc"


def envelope(status_code: int = 200, **body: Any) -> TransportResponse:
    return TransportResponse(status_code=status_code, body=json.dumps(body).encode())


class FakeTransport:
    """Records requests; answers via handler(request) -> TransportResponse (sync or async)."""

    def __init__(self, handler: Callable[[TransportRequest], Any] | TransportResponse) -> None:
        self._handler = handler
        self.requests: list[TransportRequest] = []

    async def send(self, request: TransportRequest) -> TransportResponse:
        self.requests.append(request)
        if isinstance(self._handler, TransportResponse):
            return self._handler
        result = self._handler(request)
        if asyncio.iscoroutine(result):
            result = await result
        return result

    @property
    def last(self) -> TransportRequest:
        return self.requests[-1]


def sent_payload(request: TransportRequest) -> Any:
    assert request.body is not None
    return json.loads(request.body)


@pytest.fixture
def ok_transport() -> FakeTransport:
    return FakeTransport(envelope(ok=True, data="pong"))
