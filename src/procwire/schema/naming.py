"""Procedure name -> Python identifier (for generated and runtime bindings)."""
from __future__ import annotations

import keyword
import re

_SEPARATORS = re.compile(r"[^0-9a-zA-Z]+")
_HUMPS = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _words(name: str) -> list[str]:
    words: list[str] = []
    for chunk in _SEPARATORS.split(name.strip()):
        if chunk:
            words.extend(w for w in _HUMPS.split(chunk) if w)
    return words


def normalize_procedure_name(name: str) -> str:
    """
    snake_case identifier for a procedure name: "todos.list" -> "todos_list",
    "create-todo" -> "create_todo", "getUser" -> "get_user".
    Result is always a valid, non-keyword identifier.
    """
    words = _words(name)
    if not words:
        raise ValueError(f"procedure name {name!r} has no usable characters")
    ident = "_".join(w.lower() for w in words)
    if ident[0].isdigit():
        ident = f"_{ident}"
    if keyword.iskeyword(ident):
        ident = f"{ident}_"
    return ident


def camel_case_name(name: str) -> str:
    """camelCase form: "foo.bar-baz" -> "fooBarBaz"."""
    words = _words(name)
    if not words:
        raise ValueError(f"procedure name {name!r} has no usable characters")
    first, rest = words[0], words[1:]
    return first[:1].lower() + first[1:] + "".join(w[:1].upper() + w[1:] for w in rest)
