from procwire.core.config import CallMode
from procwire.rpc.client import ProcedureClient
from procwire.rpc.envelope import Envelope, EnvelopeError
from procwire.rpc.protocol import Transport, TransportRequest, TransportResponse
from procwire.rpc.result import Failure, ProcedureResult, Success
from procwire.rpc.transport import HttpxTransport

__all__ = [
    "CallMode",
    "Envelope",
    "EnvelopeError",
    "Failure",
    "HttpxTransport",
    "ProcedureClient",
    "ProcedureResult",
    "Success",
    "Transport",
    "TransportRequest",
    "TransportResponse",
]
