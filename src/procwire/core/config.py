"""Client config: passed to ProcedureClient.from_config or loaded from env."""
from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Any

from procwire.core.endpoint import build_endpoint
from procwire.errors import ConfigurationError


class CallMode(str, enum.Enum):
    """How failures surface: THROW raises, RESULT returns application failures as values."""

    THROW = "throw"
    RESULT = "result"

    @classmethod
    def parse(cls, value: str | CallMode) -> CallMode:
        try:
            return cls(value.lower() if isinstance(value, str) else value)
        except ValueError:
            raise ConfigurationError(
                f"mode must be one of {', '.join(m.value for m in cls)}, got {value!r}"
            ) from None


class Config:
    """Env helpers. Same convention as the rest of the config: PREFIX_NAME -> name."""

    @classmethod
    def load_from_env(cls, prefix: str = "PROCWIRE_", **defaults: Any) -> dict[str, Any]:
        """Load from os.environ with prefix and defaults. Returns dict for ClientConfig(**...)."""
        result = dict(defaults)
        for key, value in os.environ.items():
            if key.startswith(prefix):
                name = key[len(prefix):].lower()
                result[name] = value
        return result


@dataclass(frozen=True)
class ClientConfig:
    """
    Either a full endpoint, or host (+ port, path) to build one.
    mode (None: the client class default) and timeout are passed through to the
    client and its default transport.
    """

    endpoint: str | None = None
    host: str | None = None
    port: int | None = None
    path: str | None = None
    mode: CallMode | None = None
    timeout: float | None = None

    def resolve_endpoint(self) -> str:
        if self.endpoint and self.endpoint.strip():
            return self.endpoint.strip()
        if self.host:
            return build_endpoint(self.host, self.port, self.path)
        raise ConfigurationError("endpoint is required (set endpoint, or host with optional port/path)")

    @classmethod
    def from_env(cls, prefix: str = "PROCWIRE_") -> ClientConfig:
        """
        PROCWIRE_ENDPOINT, or PROCWIRE_HOST / PROCWIRE_PORT / PROCWIRE_PATH;
        PROCWIRE_MODE (throw|result), PROCWIRE_TIMEOUT (seconds).
        """
        raw = Config.load_from_env(prefix)
        return cls(
            endpoint=raw.get("endpoint") or None,
            host=raw.get("host") or None,
            port=_parse_number(raw, "port", int, prefix),
            path=raw.get("path") or None,
            mode=CallMode.parse(raw["mode"]) if raw.get("mode") else None,
            timeout=_parse_number(raw, "timeout", float, prefix),
        )


def _parse_number(raw: dict[str, Any], name: str, kind: type, prefix: str) -> Any:
    value = raw.get(name)
    if value in (None, ""):
        return None
    try:
        return kind(value)
    except ValueError:
        raise ConfigurationError(f"{prefix}{name.upper()} must be a number, got {value!r}") from None
