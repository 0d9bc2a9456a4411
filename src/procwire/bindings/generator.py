"""
Schema -> Python source for a typed client.
The generated module only fixes type/name per accessor and forwards to the
client; dispatch, encoding and error handling stay in procwire.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from procwire.bindings import templates as T
from procwire.bindings.runtime import namespace_attributes
from procwire.core.config import CallMode
from procwire.errors import SchemaError
from procwire.schema.model import ProcedureDescriptor, Schema

logger = logging.getLogger(__name__)


def _render_method(attr: str, descriptor: ProcedureDescriptor, mode: CallMode) -> str:
    result_type = descriptor.result_type
    return_type = f"ProcedureResult[{result_type}]" if mode is CallMode.RESULT else result_type
    fmt = {
        "attr": attr,
        # JSON string literals are valid Python string literals
        "name_literal": json.dumps(descriptor.name),
        "type_member": descriptor.type.name,
        "return_type": return_type,
        "payload_type": descriptor.payload_type,
    }
    template = T.METHOD_WITH_PAYLOAD if descriptor.expects_payload else T.METHOD_WITHOUT_PAYLOAD
    return template.format(**fmt)


def _render_namespace(descriptors: Iterable[ProcedureDescriptor], mode: CallMode) -> str:
    attrs = namespace_attributes(list(descriptors))
    if not attrs:
        return T.EMPTY_NAMESPACE
    return "".join(_render_method(attr, d, mode) for attr, d in attrs.items())


def render_bindings(
    schema: Schema,
    *,
    mode: CallMode | str = CallMode.THROW,
    class_name: str = "Client",
    imports: Iterable[str] = (),
) -> str:
    """Render the bindings module. imports: extra import lines for types named in the schema."""
    if not class_name.isidentifier():
        raise SchemaError(f"class name {class_name!r} is not a valid identifier")
    call_mode = CallMode.parse(mode)
    import_lines = "".join(f"{line.strip()}\n" for line in imports if line.strip())
    return T.MODULE_PY.format(
        imports=import_lines,
        queries=_render_namespace(schema.queries.values(), call_mode),
        mutations=_render_namespace(schema.mutations.values(), call_mode),
        class_name=class_name,
        mode=call_mode.name,
    )


def write_bindings(schema: Schema, path: str | Path, **kwargs: object) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_bindings(schema, **kwargs), encoding="utf-8")  # type: ignore[arg-type]
    logger.info("Wrote bindings for %d procedures to %s", len(schema), target)
    return target
