from __future__ import annotations

import asyncio
import inspect
import types

import pytest

from conftest import ENDPOINT, FakeTransport, envelope, sent_payload
from procwire import (
    ApplicationError,
    CallMode,
    ConfigurationError,
    ProcedureClient,
    ProcedureResult,
    Schema,
    SchemaError,
    bind_schema,
    render_bindings,
)
from procwire.bindings import write_bindings


def todo_schema() -> Schema:
    return (
        Schema()
        .query("ping", "str", "str")
        .query("todos.list", None, "list[str]")
        .mutation("create-todo", "dict[str, Any]", "str")
        .mutation("sign-in", None, "str")
    )


def load_generated(source: str) -> types.ModuleType:
    module = types.ModuleType("generated_bindings")
    exec(compile(source, "generated_bindings.py", "exec"), module.__dict__)
    return module


# runtime bindings


def test_bound_accessors_fix_type_and_name(ok_transport: FakeTransport):
    bound = bind_schema(ProcedureClient(ENDPOINT, transport=ok_transport), todo_schema())

    assert asyncio.run(bound.queries.ping("hello")) == "pong"
    assert ok_transport.last.url == f"{ENDPOINT}?__proc=q__ping"
    assert sent_payload(ok_transport.last) == {"d": "hello"}

    asyncio.run(bound.mutations.create_todo({"title": "Buy milk"}, headers={"X-User": "1"}))
    assert ok_transport.last.url == f"{ENDPOINT}?__proc=m__create-todo"
    assert ok_transport.last.headers["X-User"] == "1"


def test_bound_accessor_without_payload_sends_no_body(ok_transport: FakeTransport):
    bound = bind_schema(ProcedureClient(ENDPOINT, transport=ok_transport), todo_schema())

    asyncio.run(bound.queries.todos_list())

    assert ok_transport.last.body is None
    assert list(inspect.signature(bound.queries.todos_list).parameters) == ["headers"]
    with pytest.raises(TypeError):
        asyncio.run(bound.queries.todos_list("unexpected"))


def test_bound_accessor_returns_client_mode_result():
    transport = FakeTransport(envelope(ok=False, error="unauthorized"))
    bound = bind_schema(ProcedureClient(ENDPOINT, transport=transport, mode="result"), todo_schema())

    result = asyncio.run(bound.mutations.sign_in())

    assert isinstance(result, ProcedureResult)
    assert result.to_dict() == {"ok": False, "error": "unauthorized"}


def test_bind_schema_rejects_attribute_clash():
    schema = Schema().query("todos.list").query("todos-list")

    with pytest.raises(SchemaError):
        bind_schema(ProcedureClient(ENDPOINT), schema)


def test_same_name_in_both_partitions_is_fine(ok_transport: FakeTransport):
    schema = Schema().query("todo", "int").mutation("todo", "int")
    bound = bind_schema(ProcedureClient(ENDPOINT, transport=ok_transport), schema)

    asyncio.run(bound.queries.todo(1))
    asyncio.run(bound.mutations.todo(2))

    assert [r.url.split("__proc=")[1] for r in ok_transport.requests] == ["q__todo", "m__todo"]


# generated bindings


def test_generated_client_throw_mode(ok_transport: FakeTransport):
    module = load_generated(render_bindings(todo_schema()))
    client = module.Client(ENDPOINT, transport=ok_transport)

    assert isinstance(client, ProcedureClient)
    assert client.mode is CallMode.THROW
    assert asyncio.run(client.queries.ping("hello")) == "pong"
    assert sent_payload(ok_transport.last) == {"d": "hello"}

    asyncio.run(client.queries.todos_list())
    assert ok_transport.last.body is None
    assert ok_transport.last.url.endswith("?__proc=q__todos.list")


def test_generated_client_raises_application_error():
    transport = FakeTransport(envelope(ok=False, error="unauthorized"))
    client = load_generated(render_bindings(todo_schema())).Client(ENDPOINT, transport=transport)

    with pytest.raises(ApplicationError) as excinfo:
        asyncio.run(client.mutations.sign_in())

    assert excinfo.value.details == "unauthorized"
    assert excinfo.value.procedure_name == "sign-in"


def test_generated_client_result_mode():
    transport = FakeTransport(envelope(ok=False, error={"reason": "unauthorized"}))
    source = render_bindings(todo_schema(), mode="result", class_name="TodoClient")
    client = load_generated(source).TodoClient(ENDPOINT, transport=transport)

    result = asyncio.run(client.mutations.sign_in())

    assert result.to_dict() == {"ok": False, "error": {"reason": "unauthorized"}}
    assert "-> ProcedureResult[str]:" in source


def test_generated_signatures_follow_schema():
    source = render_bindings(todo_schema())

    assert "async def ping(self, payload: str, *, headers: Mapping[str, str] | None = None) -> str:" in source
    assert "async def todos_list(self, *, headers: Mapping[str, str] | None = None) -> list[str]:" in source
    assert "async def create_todo(self, payload: dict[str, Any]," in source
    assert "call_mode = CallMode.THROW" in source


def test_generated_client_rejects_other_mode():
    module = load_generated(render_bindings(todo_schema()))

    with pytest.raises(ConfigurationError):
        module.Client(ENDPOINT, mode="result")


def test_generated_client_with_empty_partitions(ok_transport: FakeTransport):
    module = load_generated(render_bindings(Schema().query("ping")))
    client = module.Client(ENDPOINT, transport=ok_transport)

    assert asyncio.run(client.queries.ping()) == "pong"
    assert not [name for name in vars(module.Mutations) if not name.startswith("_")]


def test_generated_names_are_escaped():
    schema = Schema().query('odd"name', "str")
    module = load_generated(render_bindings(schema))
    transport = FakeTransport(envelope(ok=True, data=1))

    asyncio.run(module.Client(ENDPOINT, transport=transport).queries.odd_name("x"))

    assert transport.last.url.endswith("?__proc=q__odd%22name")


def test_extra_imports_are_rendered():
    source = render_bindings(todo_schema(), imports=["from decimal import Decimal", "  "])

    assert "\nfrom decimal import Decimal\n" in source


def test_render_rejects_bad_class_name():
    with pytest.raises(SchemaError):
        render_bindings(todo_schema(), class_name="not a name")


def test_write_bindings(tmp_path):
    target = write_bindings(todo_schema(), tmp_path / "client" / "bindings.py")

    assert target.read_text(encoding="utf-8") == render_bindings(todo_schema())
