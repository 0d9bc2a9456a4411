"""
procwire: typed remote procedure calls over HTTP+JSON.
Queries and mutations are called through ProcedureClient or bindings generated from a Schema.
"""
from procwire.errors import (
    ApplicationError,
    ConfigurationError,
    HttpStatusError,
    ProcedureCallError,
    ProcwireError,
    SchemaError,
    TransportError,
    UnknownError,
)
from procwire.schema import ABSENT, ProcedureDescriptor, ProcedureType, Schema
from procwire.core import CallMode, ClientConfig, build_endpoint
from procwire.rpc import HttpxTransport, ProcedureClient, ProcedureResult, Transport
from procwire.bindings import bind_schema, render_bindings

__all__ = [
    "ABSENT",
    "ApplicationError",
    "CallMode",
    "ClientConfig",
    "ConfigurationError",
    "HttpStatusError",
    "HttpxTransport",
    "ProcedureCallError",
    "ProcedureClient",
    "ProcedureDescriptor",
    "ProcedureResult",
    "ProcedureType",
    "ProcwireError",
    "Schema",
    "SchemaError",
    "Transport",
    "TransportError",
    "UnknownError",
    "bind_schema",
    "build_endpoint",
    "render_bindings",
]
