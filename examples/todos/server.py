"""
Todo service: procedures registered on a ProcedureRouter, served by Starlette.
Run: uvicorn server:app --port 8081
Export schema: python server.py  (writes schema.json next to this file)
"""
from __future__ import annotations

import secrets
from pathlib import Path

from procwire.server import ProcedureContext, ProcedureFailure, ProcedureRouter

from models import Credentials, NewTodo, Todo, User

# Demo only: in-memory state, one hard-coded account.
USERS = {"alice": ("secret", User(id=1, username="alice"))}
TOKENS: dict[str, User] = {}
TODOS: dict[int, list[Todo]] = {}

NO_AUTH = ["authenticate"]

router = ProcedureRouter()


def authenticate(ctx: ProcedureContext) -> None:
    scheme, _, token = ctx.headers.get("authorization", "").partition(" ")
    user = TOKENS.get(token) if scheme.lower() == "bearer" else None
    if user is None:
        raise ProcedureFailure("not signed in")
    ctx.set("user", user)


router.add_middleware(authenticate)


@router.register_query("ping", exclude=NO_AUTH)
def ping(payload: str) -> str:
    return "pong"


@router.register_query("whoami")
def whoami(ctx: ProcedureContext) -> User:
    return ctx.get("user")


@router.register_query("list-todos")
def list_todos(ctx: ProcedureContext) -> list[Todo]:
    return TODOS.get(ctx.get("user")["id"], [])


@router.register_mutation("sign-in", exclude=NO_AUTH)
async def sign_in(payload: Credentials) -> str:
    password, user = USERS.get(payload["username"], (None, None))
    if user is None or password != payload["password"]:
        raise ProcedureFailure("unauthorized")
    token = secrets.token_urlsafe(16)
    TOKENS[token] = user
    return token


@router.register_mutation("create-todo")
async def create_todo(payload: NewTodo, ctx: ProcedureContext) -> Todo:
    todos = TODOS.setdefault(ctx.get("user")["id"], [])
    todo = Todo(id=len(todos) + 1, title=payload["title"], completed=False)
    todos.append(todo)
    return todo


app = router.as_app("/_rpc")


if __name__ == "__main__":
    router.schema().dump(Path(__file__).with_name("schema.json"))
