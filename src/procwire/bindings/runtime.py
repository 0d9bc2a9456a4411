"""
Binding surface: one accessor per procedure, grouped as queries / mutations.
Accessors fix type and name and forward to ProcedureClient.call unchanged.
Generated modules subclass these; bind_schema() builds the same thing at runtime.
"""
from __future__ import annotations

from typing import Any, Callable, ClassVar, Mapping

from procwire.core.config import CallMode
from procwire.errors import ConfigurationError, SchemaError
from procwire.rpc.client import ProcedureClient
from procwire.rpc.protocol import Transport
from procwire.schema.model import ABSENT, ProcedureDescriptor, ProcedureType, Schema


class BindingNamespace:
    """Accessors for one partition. Holds the client; nothing else."""

    def __init__(self, client: ProcedureClient) -> None:
        self._client = client

    def __repr__(self) -> str:
        return f"<{type(self).__name__} of {self._client!r}>"


class SchemaClient(ProcedureClient):
    """
    Base for generated clients: the mode is fixed by the generator, because
    the accessors' return annotations depend on it.
    """

    call_mode: ClassVar[CallMode] = CallMode.THROW
    queries_class: ClassVar[type[BindingNamespace]] = BindingNamespace
    mutations_class: ClassVar[type[BindingNamespace]] = BindingNamespace

    def __init__(
        self,
        endpoint: str | None,
        *,
        transport: Transport | None = None,
        mode: CallMode | str | None = None,
    ) -> None:
        if mode is not None and CallMode.parse(mode) is not self.call_mode:
            raise ConfigurationError(
                f"{type(self).__name__} was generated for {self.call_mode.value!r} mode, got {mode!r}"
            )
        super().__init__(endpoint, transport=transport, mode=self.call_mode)
        self.queries = self.queries_class(self)
        self.mutations = self.mutations_class(self)


class BoundClient:
    """Result of bind_schema: .queries / .mutations namespaces over .client."""

    def __init__(self, client: ProcedureClient, queries: BindingNamespace, mutations: BindingNamespace) -> None:
        self.client = client
        self.queries = queries
        self.mutations = mutations


def _make_accessor(descriptor: ProcedureDescriptor) -> Callable[..., Any]:
    type_, name = descriptor.type, descriptor.name

    if descriptor.expects_payload:
        async def accessor(self: BindingNamespace, payload: Any, *, headers: Mapping[str, str] | None = None) -> Any:
            return await self._client.call(type_, name, payload, headers)
    else:
        async def accessor(self: BindingNamespace, *, headers: Mapping[str, str] | None = None) -> Any:
            return await self._client.call(type_, name, ABSENT, headers)

    accessor.__name__ = descriptor.attribute_name
    accessor.__doc__ = f'{type_.value.capitalize()} "{name}" -> {descriptor.result_type}'
    return accessor


def namespace_attributes(descriptors: list[ProcedureDescriptor]) -> dict[str, ProcedureDescriptor]:
    """attribute name -> descriptor; two names mapping to one attribute is a SchemaError."""
    out: dict[str, ProcedureDescriptor] = {}
    for d in descriptors:
        attr = d.attribute_name
        if attr in out:
            raise SchemaError(
                f"{d.type.partition}: {out[attr].name!r} and {d.name!r} both map to attribute {attr!r}"
            )
        out[attr] = d
    return out


def bind_schema(client: ProcedureClient, schema: Schema) -> BoundClient:
    """Runtime bindings: same surface as generated code, without a generation step."""
    namespaces: dict[ProcedureType, BindingNamespace] = {}
    for type_ in ProcedureType:
        partition = schema.queries if type_ is ProcedureType.QUERY else schema.mutations
        attrs = {
            attr: _make_accessor(d)
            for attr, d in namespace_attributes(list(partition.values())).items()
        }
        cls = type(f"Bound{type_.partition.capitalize()}", (BindingNamespace,), attrs)
        namespaces[type_] = cls(client)
    return BoundClient(client, namespaces[ProcedureType.QUERY], namespaces[ProcedureType.MUTATION])
