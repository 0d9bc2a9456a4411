"""
ProcedureClient: runs one procedure call per invocation against the wire protocol.
dispatch() always returns a tagged result; call() unwraps it in throw mode.
"""
from __future__ import annotations

import logging
from typing import Any, ClassVar, Mapping

from procwire.core.config import CallMode, ClientConfig
from procwire.core.endpoint import build_endpoint
from procwire.errors import (
    ConfigurationError,
    UnknownError,
    application_error,
    classify_exception,
    http_status_error,
)
from procwire.rpc.envelope import (
    EnvelopeError,
    decode_envelope,
    encode_payload,
    request_headers,
    request_url,
)
from procwire.rpc.protocol import Transport, TransportRequest
from procwire.rpc.result import Failure, ProcedureResult, Success
from procwire.rpc.transport import HttpxTransport
from procwire.schema.model import ABSENT, ProcedureType

logger = logging.getLogger(__name__)


class ProcedureClient:
    """
    Facade: query(name, payload) / mutate(name, payload) -> result.
    Holds only the endpoint and transport; calls share no other state, so any
    number may run concurrently.
    mode=THROW: every failure raises ProcedureCallError.
    mode=RESULT: application failures (ok:false) come back as ProcedureResult;
    transport and HTTP failures still raise.
    """

    call_mode: ClassVar[CallMode] = CallMode.THROW

    def __init__(
        self,
        endpoint: str | None,
        *,
        transport: Transport | None = None,
        mode: CallMode | str | None = None,
    ) -> None:
        if not isinstance(endpoint, str) or not endpoint.strip():
            raise ConfigurationError("endpoint is required to create a procedure client")
        self._endpoint = endpoint.strip()
        self._transport: Transport = transport if transport is not None else HttpxTransport()
        self._mode = CallMode.parse(mode) if mode is not None else self.call_mode

    @classmethod
    def new(
        cls,
        host: str,
        port: int | None = None,
        path: str | None = None,
        **kwargs: Any,
    ) -> ProcedureClient:
        """Build the endpoint from parts: new("http://localhost", 8081, "_rpc")."""
        return cls(build_endpoint(host, port, path), **kwargs)

    @classmethod
    def from_config(cls, config: ClientConfig, transport: Transport | None = None) -> ProcedureClient:
        if transport is None:
            transport = HttpxTransport(timeout=config.timeout)
        return cls(config.resolve_endpoint(), transport=transport, mode=config.mode)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def mode(self) -> CallMode:
        return self._mode

    async def dispatch(
        self,
        type: ProcedureType | str,
        name: str,
        payload: Any = ABSENT,
        headers: Mapping[str, str] | None = None,
    ) -> ProcedureResult[Any]:
        """
        One call, result-mode semantics. Raises TransportError / UnknownError /
        HttpStatusError; returns Failure for ok:false and Success otherwise.
        """
        proc_type = ProcedureType(type)
        request = TransportRequest(
            method="POST",
            url=request_url(self._endpoint, proc_type, name),
            headers=request_headers(headers),
            body=encode_payload(payload),
        )
        logger.debug("Calling %s %r at %s", proc_type.value, name, request.url)

        try:
            response = await self._transport.send(request)
        except Exception as e:
            error = classify_exception(e, name)
            logger.warning("Procedure %r failed in transport: %s", name, error.message)
            if error is e:
                raise
            raise error from e

        if not response.ok:
            error = http_status_error(response, name)
            logger.warning("Procedure %r failed with status %d", name, response.status_code)
            raise error

        try:
            envelope = decode_envelope(response.body)
        except EnvelopeError as e:
            raise UnknownError(
                f"Failed to call procedure {name}: {e}", name, details=e.args[0], cause=e
            ) from e

        if not envelope.ok:
            logger.debug("Procedure %r returned an error: %r", name, envelope.error)
            return Failure(envelope.error, application_error(envelope.error, name))
        return Success(envelope.data)

    async def call(
        self,
        type: ProcedureType | str,
        name: str,
        payload: Any = ABSENT,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Low-level call; prefer query()/mutate() or generated bindings."""
        result = await self.dispatch(type, name, payload, headers)
        if self._mode is CallMode.RESULT:
            return result
        return result.unwrap()

    async def query(self, name: str, payload: Any = ABSENT, headers: Mapping[str, str] | None = None) -> Any:
        return await self.call(ProcedureType.QUERY, name, payload, headers)

    async def mutate(self, name: str, payload: Any = ABSENT, headers: Mapping[str, str] | None = None) -> Any:
        return await self.call(ProcedureType.MUTATION, name, payload, headers)

    async def aclose(self) -> None:
        close = getattr(self._transport, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> ProcedureClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(endpoint={self._endpoint!r}, mode={self._mode.value!r})"
