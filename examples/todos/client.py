"""
Client side. Bindings come from schema.json at runtime here; for static types
generate them instead:

    procwire generate schema.json -o bindings.py --import "from models import Credentials, NewTodo, Todo, User"
"""
import asyncio
from pathlib import Path

from procwire import ApplicationError, ClientConfig, ProcedureClient, Schema, bind_schema

SCHEMA = Schema.load(Path(__file__).with_name("schema.json"))


async def main() -> None:
    config = ClientConfig.from_env()
    if config.endpoint is None and config.host is None:
        config = ClientConfig(host="http://localhost", port=8081, path="_rpc")

    async with ProcedureClient.from_config(config) as client:
        api = bind_schema(client, SCHEMA)

        print("ping ->", await api.queries.ping("hello"))

        try:
            await api.mutations.sign_in({"username": "alice", "password": "wrong"})
        except ApplicationError as e:
            print(f"{e.procedure_name} failed: {e.details}")

        token = await api.mutations.sign_in({"username": "alice", "password": "secret"})
        auth = {"Authorization": f"Bearer {token}"}
        user = await api.queries.whoami(headers=auth)
        print("signed in as", user["username"])

        await api.mutations.create_todo({"title": "Buy milk"}, headers=auth)
        print("todos ->", await api.queries.list_todos(headers=auth))


if __name__ == "__main__":
    asyncio.run(main())
