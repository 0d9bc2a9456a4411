"""
CLI: generate typed bindings from a schema, or make a one-off procedure call.
"""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer

from procwire.bindings.generator import render_bindings
from procwire.core.config import CallMode
from procwire.errors import ProcedureCallError, ProcwireError
from procwire.rpc.client import ProcedureClient
from procwire.schema.model import ABSENT, ProcedureType, Schema

app = typer.Typer(help="procwire CLI: generate bindings and call procedures.")


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(1)


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and failures to stderr"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def generate(
    schema_path: Path = typer.Argument(..., help="Schema JSON file ({queries: {...}, mutations: {...}})"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output .py file (default: stdout)"),
    mode: CallMode = typer.Option(CallMode.THROW, "--mode", "-m", help="throw: raise on errors; result: return results"),
    class_name: str = typer.Option("Client", "--class-name", help="Name of the generated client class"),
    imports: list[str] = typer.Option([], "--import", help="Extra import line for types used in the schema"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing output file"),
) -> None:
    """Render typed bindings for every procedure in the schema."""
    try:
        schema = Schema.load(schema_path)
        source = render_bindings(schema, mode=mode, class_name=class_name, imports=imports)
    except (OSError, ProcwireError) as e:
        _fail(f"Cannot generate bindings: {e}")

    if out is None:
        typer.echo(source, nl=False)
        return
    if out.exists() and not force:
        _fail(f"{out} already exists, use --force to overwrite")
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(source, encoding="utf-8")
    typer.echo(f"Generated {len(schema)} procedures: {out}")


def _parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values:
        key, sep, val = value.partition(":")
        if not sep or not key.strip():
            _fail(f"Header must look like Name:value, got {value!r}")
        headers[key.strip()] = val.strip()
    return headers


@app.command()
def call(
    type: ProcedureType = typer.Argument(..., help="query or mutation"),
    name: str = typer.Argument(..., help="Procedure name"),
    payload: Optional[str] = typer.Argument(None, help="Payload as JSON (omit for no payload)"),
    endpoint: str = typer.Option(..., "--endpoint", "-e", envvar="PROCWIRE_ENDPOINT", help="Procedure endpoint URL"),
    header: list[str] = typer.Option([], "--header", "-H", help="Extra header, Name:value (repeatable)"),
) -> None:
    """Call one procedure and print its result as JSON."""
    value: Any = ABSENT
    if payload is not None:
        try:
            value = json.loads(payload)
        except ValueError as e:
            _fail(f"Payload is not valid JSON: {e}")
    headers = _parse_headers(header)

    async def run() -> Any:
        async with ProcedureClient(endpoint) as client:
            return await client.call(type, name, value, headers)

    try:
        result = asyncio.run(run())
    except ProcedureCallError as e:
        detail = "" if e.details is None or e.details == e.message else f" (details: {json.dumps(e.details)})"
        _fail(f"{type.value} {name!r} failed: {e.message}{detail}")
    except ProcwireError as e:
        _fail(str(e))
    typer.echo(json.dumps(result, indent=2))


def main() -> None:
    """Entry point for the procwire console command."""
    app()


if __name__ == "__main__":
    main()
