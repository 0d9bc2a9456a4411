"""Tagged call result: what result mode returns, and what throw mode unwraps."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from procwire.errors import ProcedureCallError

R = TypeVar("R")


@dataclass(frozen=True)
class ProcedureResult(Generic[R]):
    """
    {ok: True, data} or {ok: False, error}. error is the envelope's error verbatim;
    exception is the ApplicationError built for it (None on success).
    """

    ok: bool
    data: R | None = None
    error: Any = None
    exception: ProcedureCallError | None = field(default=None, compare=False, repr=False)

    def unwrap(self) -> R:
        """Return data, or raise the failure's error."""
        if self.ok:
            return self.data  # type: ignore[return-value]
        if self.exception is not None:
            raise self.exception
        raise ValueError(f"unwrap() on a failed result without an exception: {self.error!r}")

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        return {"ok": False, "error": self.error}

    def __bool__(self) -> bool:
        return self.ok


def Success(data: R) -> ProcedureResult[R]:
    return ProcedureResult(ok=True, data=data)


def Failure(error: Any, exception: ProcedureCallError | None = None) -> ProcedureResult[Any]:
    return ProcedureResult(ok=False, error=error, exception=exception)
