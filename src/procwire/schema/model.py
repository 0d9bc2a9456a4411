"""
Schema model: which procedures exist, split into queries and mutations.
Each entry records the payload type (or absent) and the result type.
"""
from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

from procwire.errors import SchemaError
from procwire.schema.naming import normalize_procedure_name


class _Absent:
    """Marker for "no payload". None is a real payload (JSON null); this is not."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT: Any = _Absent()


class ProcedureType(str, enum.Enum):
    QUERY = "query"
    MUTATION = "mutation"

    @property
    def marker(self) -> str:
        """Wire marker used in ?__proc=<marker>__<name>."""
        return "q" if self is ProcedureType.QUERY else "m"

    @property
    def partition(self) -> str:
        return "queries" if self is ProcedureType.QUERY else "mutations"

    @classmethod
    def from_marker(cls, marker: str) -> ProcedureType:
        for member in cls:
            if member.marker == marker:
                return member
        raise ValueError(f"unknown procedure type marker {marker!r}")


@dataclass(frozen=True)
class ProcedureDescriptor:
    """
    One procedure: type + name identify it.
    payload_type is a Python type expression ("str", "list[int]") or None when
    the procedure takes no payload.
    """

    type: ProcedureType
    name: str
    payload_type: str | None = None
    result_type: str = "Any"

    @property
    def expects_payload(self) -> bool:
        return self.payload_type is not None

    @property
    def attribute_name(self) -> str:
        return normalize_procedure_name(self.name)

    def to_dict(self) -> dict[str, Any]:
        return {"payload": self.payload_type, "result": self.result_type}


_PARTITIONS = {t.partition: t for t in ProcedureType}


class Schema:
    """
    Registry of procedure descriptors grouped by type.
    Build with .query() / .mutation() or Schema.from_dict(); feed to bindings.
    """

    def __init__(self) -> None:
        self._partitions: dict[ProcedureType, dict[str, ProcedureDescriptor]] = {
            ProcedureType.QUERY: {},
            ProcedureType.MUTATION: {},
        }

    def add(self, descriptor: ProcedureDescriptor) -> Schema:
        """Add a descriptor. Names are unique within their partition."""
        if not descriptor.name:
            raise SchemaError("procedure name must not be empty")
        partition = self._partitions[descriptor.type]
        if descriptor.name in partition:
            raise SchemaError(f"duplicate {descriptor.type.value} {descriptor.name!r}")
        partition[descriptor.name] = descriptor
        return self

    def query(self, name: str, payload: str | None = None, result: str = "Any") -> Schema:
        return self.add(ProcedureDescriptor(ProcedureType.QUERY, name, payload, result))

    def mutation(self, name: str, payload: str | None = None, result: str = "Any") -> Schema:
        return self.add(ProcedureDescriptor(ProcedureType.MUTATION, name, payload, result))

    def get(self, type: ProcedureType, name: str) -> ProcedureDescriptor | None:
        return self._partitions[ProcedureType(type)].get(name)

    @property
    def queries(self) -> dict[str, ProcedureDescriptor]:
        return dict(self._partitions[ProcedureType.QUERY])

    @property
    def mutations(self) -> dict[str, ProcedureDescriptor]:
        return dict(self._partitions[ProcedureType.MUTATION])

    def procedures(self) -> Iterator[ProcedureDescriptor]:
        for partition in self._partitions.values():
            yield from partition.values()

    def __len__(self) -> int:
        return sum(len(p) for p in self._partitions.values())

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        type_, name = key
        return self.get(type_, name) is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            t.partition: {name: d.to_dict() for name, d in self._partitions[t].items()}
            for t in ProcedureType
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Schema:
        """
        Load {"queries": {name: {"payload": "T" | null, "result": "R"}}, "mutations": {...}}.
        Missing partitions are empty; anything else malformed raises SchemaError.
        """
        if not isinstance(data, dict):
            raise SchemaError("schema must be a JSON object")
        unknown = set(data) - set(_PARTITIONS)
        if unknown:
            raise SchemaError(f"unknown schema keys: {', '.join(sorted(unknown))}")
        schema = cls()
        for partition_name, type_ in _PARTITIONS.items():
            entries = data.get(partition_name)
            if entries is None:
                continue
            if not isinstance(entries, dict):
                raise SchemaError(f"{partition_name!r} must map procedure names to entries")
            for name, entry in entries.items():
                if not isinstance(entry, dict):
                    raise SchemaError(f"{partition_name}.{name}: entry must be an object")
                payload = entry.get("payload")
                result = entry.get("result", "Any")
                if payload is not None and not isinstance(payload, str):
                    raise SchemaError(f"{partition_name}.{name}: payload must be a type string or null")
                if not isinstance(result, str) or not result:
                    raise SchemaError(f"{partition_name}.{name}: result must be a type string")
                schema.add(ProcedureDescriptor(type_, name, payload, result))
        return schema

    @classmethod
    def load(cls, path: str | Path) -> Schema:
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except ValueError as e:
            raise SchemaError(f"{path}: invalid JSON ({e})") from e
        return cls.from_dict(data)

    def dump(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8")
