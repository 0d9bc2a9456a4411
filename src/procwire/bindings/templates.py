"""Source templates for generated bindings."""

MODULE_PY = '''"""
Procedure bindings generated by procwire. Do not edit by hand:
regenerate with `procwire generate <schema.json>`.
"""
from __future__ import annotations

from typing import Any, Mapping

from procwire.bindings import BindingNamespace, SchemaClient
from procwire.rpc import CallMode, ProcedureResult
from procwire.schema import ProcedureType
{imports}

class Queries(BindingNamespace):
    """Query procedures."""
{queries}

class Mutations(BindingNamespace):
    """Mutation procedures."""
{mutations}

class {class_name}(SchemaClient):
    """Typed client: {class_name}(endpoint).queries.<name>(...) / .mutations.<name>(...)."""

    call_mode = CallMode.{mode}
    queries_class = Queries
    mutations_class = Mutations

    queries: Queries
    mutations: Mutations
'''

METHOD_WITH_PAYLOAD = '''
    async def {attr}(self, payload: {payload_type}, *, headers: Mapping[str, str] | None = None) -> {return_type}:
        """Procedure {name_literal}."""
        return await self._client.call(ProcedureType.{type_member}, {name_literal}, payload, headers)
'''

METHOD_WITHOUT_PAYLOAD = '''
    async def {attr}(self, *, headers: Mapping[str, str] | None = None) -> {return_type}:
        """Procedure {name_literal}."""
        return await self._client.call(ProcedureType.{type_member}, {name_literal}, headers=headers)
'''

EMPTY_NAMESPACE = '''
    pass
'''
