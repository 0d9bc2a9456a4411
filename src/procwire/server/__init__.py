from procwire.server.context import ProcedureContext
from procwire.server.router import Middleware, ProcedureFailure, ProcedureRouter

__all__ = [
    "Middleware",
    "ProcedureContext",
    "ProcedureFailure",
    "ProcedureRouter",
]
