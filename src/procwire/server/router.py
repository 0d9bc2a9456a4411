"""
ProcedureRouter: the server side of the wire protocol, on Starlette.
Register queries and mutations, mount router.endpoint (or router.as_app()),
and export router.schema() for the bindings generator.
"""
from __future__ import annotations

import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from procwire.errors import SchemaError
from procwire.rpc.envelope import PROC_PARAM, EnvelopeError, decode_payload, failure, parse_proc_param, success
from procwire.schema.model import ABSENT, ProcedureDescriptor, ProcedureType, Schema
from procwire.server.context import ProcedureContext

logger = logging.getLogger(__name__)

_INFER: Any = object()

# (ctx) -> None, sync or async; raise ProcedureFailure to reject the call
Middleware = Callable[[ProcedureContext], Any]


class ProcedureFailure(Exception):
    """
    Raise from a handler or middleware for an expected failure (e.g. "unauthorized").
    error goes into the envelope verbatim; status_code 200 keeps it an
    application error on the client side.
    """

    def __init__(self, error: Any, status_code: int = 200) -> None:
        self.error = error
        self.status_code = status_code
        super().__init__(error if isinstance(error, str) else repr(error))


def _type_name(annotation: Any) -> str:
    if annotation is inspect.Parameter.empty:
        return "Any"
    if isinstance(annotation, str):
        return annotation
    if annotation is None or annotation is type(None):
        return "None"
    if isinstance(annotation, type) and not typing.get_args(annotation):
        return annotation.__name__
    return repr(annotation).replace("typing.", "")


def _is_context(param: inspect.Parameter) -> bool:
    annotation = param.annotation
    if annotation is ProcedureContext:
        return True
    if isinstance(annotation, str) and annotation.rsplit(".", 1)[-1] == "ProcedureContext":
        return True
    return param.name == "ctx"


async def _maybe_await(value: Any) -> Any:
    if hasattr(value, "__await__"):
        return await value
    return value


@dataclass(frozen=True)
class _Registration:
    descriptor: ProcedureDescriptor
    handler: Callable[..., Any]
    # "payload" / "context", in the handler's parameter order
    arguments: tuple[str, ...]
    middleware: tuple[Middleware, ...] = ()
    exclude: frozenset[str] = frozenset()


class ProcedureRouter:
    """
    One object = all procedures of a service.
    .query(name, fn) .mutation(name, fn), or the register_* decorators.
    A handler takes at most one payload argument, plus optionally the call's
    ProcedureContext (a parameter annotated ProcedureContext, or named ctx).
    Middleware runs before the handler: global ones (add_middleware) first,
    minus those the procedure excludes by name, then the procedure's own.
    """

    def __init__(self, debug: bool = False) -> None:
        self.debug = debug
        self._procedures: dict[tuple[ProcedureType, str], _Registration] = {}
        self._middleware: dict[str, Middleware] = {}

    def add_middleware(self, middleware: Middleware, *, name: str | None = None) -> ProcedureRouter:
        """Global middleware, run for every procedure that does not exclude its name."""
        name = name or getattr(middleware, "__name__", repr(middleware))
        if name in self._middleware:
            raise SchemaError(f"duplicate middleware {name!r}")
        self._middleware[name] = middleware
        return self

    def add(
        self,
        type: ProcedureType | str,
        name: str,
        handler: Callable[..., Any],
        *,
        payload: str | None = _INFER,
        result: str = _INFER,
        middleware: Sequence[Middleware] = (),
        exclude: Iterable[str] = (),
    ) -> ProcedureRouter:
        """Register a handler. payload/result default to the handler's annotations."""
        proc_type = ProcedureType(type)
        if (proc_type, name) in self._procedures:
            raise SchemaError(f"duplicate {proc_type.value} {name!r}")
        sig = inspect.signature(handler)
        arguments = tuple("context" if _is_context(p) else "payload" for p in sig.parameters.values())
        if arguments.count("payload") > 1 or arguments.count("context") > 1:
            raise SchemaError(f"{name!r}: handler takes at most one payload argument and one context")
        if payload is _INFER:
            payload_params = [p for p in sig.parameters.values() if not _is_context(p)]
            payload = _type_name(payload_params[0].annotation) if payload_params else None
        if result is _INFER:
            result = _type_name(sig.return_annotation)
        descriptor = ProcedureDescriptor(proc_type, name, payload, result)
        self._procedures[(proc_type, name)] = _Registration(
            descriptor, handler, arguments, tuple(middleware), frozenset(exclude)
        )
        return self

    def query(self, name: str, handler: Callable[..., Any], **kwargs: Any) -> ProcedureRouter:
        return self.add(ProcedureType.QUERY, name, handler, **kwargs)

    def mutation(self, name: str, handler: Callable[..., Any], **kwargs: Any) -> ProcedureRouter:
        return self.add(ProcedureType.MUTATION, name, handler, **kwargs)

    def register_query(self, name: str, **kwargs: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
            self.query(name, fn, **kwargs)
            return fn
        return decorator

    def register_mutation(self, name: str, **kwargs: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
            self.mutation(name, fn, **kwargs)
            return fn
        return decorator

    def schema(self) -> Schema:
        schema = Schema()
        for registration in self._procedures.values():
            schema.add(registration.descriptor)
        return schema

    def _middleware_for(self, registration: _Registration) -> list[Middleware]:
        chain = [fn for name, fn in self._middleware.items() if name not in registration.exclude]
        return chain + list(registration.middleware)

    async def handle(
        self, proc: str | None, body: bytes, request: Request | None = None
    ) -> tuple[int, dict[str, Any]]:
        """(__proc value, raw body, request) -> (status code, envelope)."""
        try:
            proc_type, name = parse_proc_param(proc)
        except EnvelopeError as e:
            return 400, failure(str(e))

        registration = self._procedures.get((proc_type, name))
        if registration is None:
            return 404, failure(f"{proc_type.value} {name!r} not found")

        ctx = ProcedureContext(proc_type, name, request)
        try:
            for middleware in self._middleware_for(registration):
                await _maybe_await(middleware(ctx))

            payload: Any = ABSENT
            if registration.descriptor.expects_payload:
                try:
                    payload = decode_payload(body)
                except EnvelopeError as e:
                    logger.info("Rejected body for %s %r: %s", proc_type.value, name, e)
                    return 400, failure(str(e))

            args = [
                ctx if kind == "context" else (None if payload is ABSENT else payload)
                for kind in registration.arguments
            ]
            result = await _maybe_await(registration.handler(*args))
        except ProcedureFailure as e:
            return e.status_code, failure(e.error)
        except Exception:
            logger.exception("Procedure %s %r raised", proc_type.value, name)
            return 500, failure("internal error")
        return 200, success(result)

    async def endpoint(self, request: Request) -> Response:
        """Starlette endpoint: mount on a POST route."""
        proc = request.query_params.get(PROC_PARAM)
        status, envelope = await self.handle(proc, await request.body(), request)
        try:
            return JSONResponse(envelope, status_code=status)
        except (TypeError, ValueError):
            logger.exception("Procedure %r returned a result that is not JSON-encodable", proc)
            return JSONResponse(failure("internal error"), status_code=500)

    def as_app(self, path: str = "/_rpc") -> Starlette:
        """Standalone ASGI app with the router on POST <path>."""
        path = "/" + path.strip("/")
        return Starlette(debug=self.debug, routes=[Route(path, self.endpoint, methods=["POST"])])
