"""
Error model: one call error shape for every failed procedure call.
Transport, HTTP and application failures are classified here.
"""
from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from procwire.rpc.protocol import TransportResponse


class ProcwireError(Exception):
    """Base for everything raised by procwire."""


class ConfigurationError(ProcwireError, ValueError):
    """Client or server misconfigured (missing endpoint, bad scheme, bad port). Fatal."""


class SchemaError(ProcwireError, ValueError):
    """Schema is malformed or two procedures clash."""


class ProcedureCallError(ProcwireError):
    """
    A procedure call failed. Same shape whatever the origin:
    message, procedure_name, details (anything the server sent) and cause.
    Built once per failed call; attributes are read-only afterwards.
    """

    kind = "call"

    def __init__(
        self,
        message: str,
        procedure_name: str,
        *,
        details: Any = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "procedure_name", procedure_name)
        object.__setattr__(self, "details", details)
        object.__setattr__(self, "cause", cause)
        if cause is not None:
            self.__cause__ = cause
        object.__setattr__(self, "_frozen", True)

    def __setattr__(self, name: str, value: Any) -> None:
        # traceback bookkeeping must stay writable for raise/except to work
        if getattr(self, "_frozen", False) and not name.startswith("__"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(procedure_name={self.procedure_name!r}, message={self.message!r})"


class TransportError(ProcedureCallError):
    """The transport itself failed (DNS failure, refused connection or timeout). Original error in .cause."""

    kind = "transport"


class HttpStatusError(ProcedureCallError):
    """Transport succeeded but the server answered with a non-2xx status."""

    kind = "http"

    def __init__(
        self,
        message: str,
        procedure_name: str,
        *,
        status_code: int,
        details: Any = None,
        cause: BaseException | None = None,
    ) -> None:
        object.__setattr__(self, "status_code", status_code)
        super().__init__(message, procedure_name, details=details, cause=cause)


class ApplicationError(ProcedureCallError):
    """The envelope reported ok:false. details is the envelope's error field verbatim."""

    kind = "application"


class UnknownError(ProcedureCallError):
    """Fallback: an error without a message, or a response that is not an envelope."""

    kind = "unknown"


GENERIC_APPLICATION_MESSAGE = (
    "A procedure call error occurred, see the `details` attribute for more information"
)


def application_error(details: Any, procedure_name: str) -> ApplicationError:
    message = details if isinstance(details, str) and details else GENERIC_APPLICATION_MESSAGE
    return ApplicationError(message, procedure_name, details=details)


def _response_details(body: bytes) -> Any:
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return body.decode("utf-8", errors="replace")


def http_status_error(response: TransportResponse, procedure_name: str) -> HttpStatusError:
    """Error for a non-2xx response; message names the procedure and the status."""
    return HttpStatusError(
        f"Failed to call procedure {procedure_name} with status code {response.status_code}",
        procedure_name,
        status_code=response.status_code,
        details=_response_details(response.body),
    )


def classify_exception(exc: BaseException, procedure_name: str) -> ProcedureCallError:
    """
    Normalize whatever the transport raised into a ProcedureCallError.
    Already-classified errors pass through; errors with a message become
    TransportError, errors without one become UnknownError.
    """
    if isinstance(exc, ProcedureCallError):
        return exc
    reason = str(exc).strip()
    if reason:
        return TransportError(
            f"Failed to call procedure {procedure_name}: {reason}",
            procedure_name,
            details=reason,
            cause=exc,
        )
    return UnknownError(
        f"Failed to call procedure {procedure_name}: unknown error ({type(exc).__name__})",
        procedure_name,
        cause=exc,
    )
