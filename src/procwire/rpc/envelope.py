"""
Wire protocol, both directions.
Request: POST <endpoint>?__proc=<q|m>__<name>, body {"d": payload} or nothing.
Response: {"ok": bool, "data"?: any, "error"?: any}.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import urlencode

from procwire.errors import ProcwireError
from procwire.schema.model import ABSENT, ProcedureType

PROC_PARAM = "__proc"
PROC_SEPARATOR = "__"
PAYLOAD_KEY = "d"
CONTENT_TYPE = "application/json"


class EnvelopeError(ProcwireError, ValueError):
    """Body or __proc parameter does not follow the wire protocol."""


@dataclass(frozen=True)
class Envelope:
    ok: bool
    data: Any = None
    error: Any = None


def request_url(endpoint: str, type: ProcedureType, name: str) -> str:
    """Name is percent-encoded, so "a&b" or "c++" reach the server unchanged."""
    joiner = "&" if "?" in endpoint else "?"
    query = urlencode({PROC_PARAM: f"{ProcedureType(type).marker}{PROC_SEPARATOR}{name}"})
    return f"{endpoint}{joiner}{query}"


def request_headers(extra: Mapping[str, str] | None = None) -> dict[str, str]:
    """Content-Type: application/json plus extra headers; extra wins, case-insensitively."""
    headers = {"Content-Type": CONTENT_TYPE}
    for key, value in (extra or {}).items():
        for existing in [k for k in headers if k.lower() == key.lower()]:
            del headers[existing]
        headers[key] = value
    return headers


def encode_payload(payload: Any) -> bytes | None:
    if payload is ABSENT:
        return None
    return json.dumps({PAYLOAD_KEY: payload}).encode()


def decode_payload(body: bytes | None) -> Any:
    """Server side: body -> payload, ABSENT when the body is empty."""
    if not body or not body.strip():
        return ABSENT
    try:
        data = json.loads(body)
    except ValueError as e:
        raise EnvelopeError(f"request body is not valid JSON: {e}") from e
    if not isinstance(data, dict) or PAYLOAD_KEY not in data:
        raise EnvelopeError(f'request body must be an object with a "{PAYLOAD_KEY}" field')
    return data[PAYLOAD_KEY]


def decode_envelope(body: bytes) -> Envelope:
    try:
        data = json.loads(body)
    except ValueError as e:
        raise EnvelopeError(f"response body is not valid JSON: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("ok"), bool):
        raise EnvelopeError('response body must be an object with a boolean "ok" field')
    if data["ok"]:
        return Envelope(ok=True, data=data.get("data"))
    return Envelope(ok=False, error=data.get("error"))


def parse_proc_param(value: str | None) -> tuple[ProcedureType, str]:
    """"q__getUser" -> (QUERY, "getUser"). Names may themselves contain "__"."""
    if not value or not value.strip():
        raise EnvelopeError("no procedure name provided")
    marker, sep, name = value.partition(PROC_SEPARATOR)
    if not sep or not name:
        raise EnvelopeError(
            f"invalid {PROC_PARAM} parameter {value!r}, expected (q|m){PROC_SEPARATOR}<name> e.g. q{PROC_SEPARATOR}getUser"
        )
    try:
        return ProcedureType.from_marker(marker), name
    except ValueError as e:
        raise EnvelopeError(str(e)) from e


def success(data: Any = None) -> dict[str, Any]:
    return {"ok": True, "data": data}


def failure(error: Any) -> dict[str, Any]:
    return {"ok": False, "error": error}
