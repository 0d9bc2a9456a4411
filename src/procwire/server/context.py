"""Per-call context handed to middleware and to handlers that ask for it."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from starlette.requests import Request

from procwire.schema.model import ProcedureType


@dataclass
class ProcedureContext:
    """
    request is the incoming Starlette request (None when handle() is called directly).
    state lives for one call: middleware stores values there (the signed-in user, a
    db session) and the handler reads them.
    """

    type: ProcedureType
    name: str
    request: Request | None = None
    state: dict[str, Any] = field(default_factory=dict)

    @property
    def headers(self) -> Mapping[str, str]:
        return self.request.headers if self.request is not None else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self.state.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.state[key] = value
