"""Transport protocol: send one request, get one response. Default is HTTP via httpx; swap for tests."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class TransportRequest:
    """What the client asks the transport to send. body is None when there is no payload."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass
class TransportResponse:
    """Status and raw body; the client decodes the envelope."""

    status_code: int
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return json.loads(self.body)


@runtime_checkable
class Transport(Protocol):
    """
    Transport capability. Raise on network failure; never raise on HTTP status,
    return the response and let the client classify it.
    """

    async def send(self, request: TransportRequest) -> TransportResponse:
        ...
