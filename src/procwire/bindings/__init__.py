"""Typed binding surface: runtime (bind_schema) and generated (render_bindings) accessors."""
from procwire.bindings.runtime import BindingNamespace, BoundClient, SchemaClient, bind_schema
from procwire.bindings.generator import render_bindings, write_bindings

__all__ = [
    "BindingNamespace",
    "BoundClient",
    "SchemaClient",
    "bind_schema",
    "render_bindings",
    "write_bindings",
]
