"""Payload and result shapes shared by server and client (plain JSON objects)."""
from typing import TypedDict


class Credentials(TypedDict):
    username: str
    password: str


class User(TypedDict):
    id: int
    username: str


class NewTodo(TypedDict):
    title: str


class Todo(TypedDict):
    id: int
    title: str
    completed: bool
