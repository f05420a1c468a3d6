"""
infixcalc command line.

Commands:
    eval        Evaluate an expression locally or against a remote service
    functions   List available functions
    operators   List available operators
    variables   List built-in constants and configured variables
    serve       Run the HTTP service

Exit codes: 1 for an expression error, 2 for bad usage or config,
3 when a remote service cannot be reached or fails.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from infixcalc._version import get_version
from infixcalc.config import Settings, load_settings
from infixcalc.core.catalog import default_registry
from infixcalc.core.compiler import compile_expression
from infixcalc.core.errors import ConfigError, RegistryError
from infixcalc.core.ir import CompiledProgram
from infixcalc.service import EvaluateResponse, ParserService, VariableInfo

app = typer.Typer(
    help="Compile and evaluate infix arithmetic expressions",
    no_args_is_help=True,
)

console = Console()
logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"infixcalc {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to infixcalc.toml"),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (default from config: INFO)"),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Compile and evaluate infix arithmetic expressions."""
    try:
        settings = load_settings(config)
    except ConfigError as e:
        console.print(f"[red]Config error:[/red] {escape(str(e))}")
        raise typer.Exit(code=2) from e

    level = (log_level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.obj = settings


def _parse_variables(values: list[str]) -> dict[str, float]:
    variables: dict[str, float] = {}
    for raw in values:
        name, sep, number = raw.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected NAME=VALUE, got {raw!r}", param_hint="--var")
        try:
            variables[name.strip()] = float(number)
        except ValueError as e:
            raise typer.BadParameter(f"Not a number: {number!r}", param_hint="--var") from e
    return variables


def _show_program(expression: str, settings: Settings, variables: dict[str, float]) -> None:
    try:
        registry = default_registry().with_variables({**settings.variables, **variables})
    except RegistryError:
        # reported by the evaluation that follows
        return
    compiled = compile_expression(expression, registry, max_depth=settings.engine.max_depth)
    if isinstance(compiled, CompiledProgram):
        console.print(f"[dim]postfix:[/dim] {escape(compiled.to_postfix())}")


@app.command("eval")
def eval_command(
    ctx: typer.Context,
    expression: Annotated[str, typer.Argument(help="Expression, e.g. '2 * sin(PI / 4)'")],
    var: Annotated[
        list[str] | None,
        typer.Option("--var", "-v", help="Variable as NAME=VALUE (repeatable)"),
    ] = None,
    remote: Annotated[
        str | None,
        typer.Option("--remote", "-r", help="Evaluate on a running service at this URL"),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Print the raw response")] = False,
    show_program: Annotated[
        bool, typer.Option("--show-program", help="Also print the compiled postfix form")
    ] = False,
) -> None:
    """Evaluate an expression and print the result."""
    settings: Settings = ctx.obj or Settings()
    variables = _parse_variables(var or [])

    response: EvaluateResponse
    if remote:
        import httpx

        from infixcalc.client import ParserClient

        try:
            with ParserClient(remote) as client:
                response = client.evaluate_expression(expression, variables)
        except httpx.HTTPError as e:
            console.print(f"[red]Remote error:[/red] {escape(str(e))}")
            raise typer.Exit(code=3) from e
    else:
        if show_program:
            _show_program(expression, settings, variables)
        try:
            response = ParserService(settings).evaluate_expression(
                expression,
                [VariableInfo(name=name, value=value) for name, value in variables.items()],
            )
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="EXPRESSION") from e

    if json_output:
        typer.echo(response.model_dump_json())
    elif response.ok:
        console.print(str(response.result))
    else:
        console.print(f"[red]Error:[/red] {escape(response.error.describe())}")

    if not response.ok:
        raise typer.Exit(code=1)


@app.command("functions")
def functions_command(ctx: typer.Context) -> None:
    """List available functions."""
    table = Table(title="Functions")
    table.add_column("Name", style="cyan")
    table.add_column("Usage")
    table.add_column("Args", justify="right")
    for info in ParserService(ctx.obj).available_functions():
        table.add_row(info.name, info.usage, str(info.arity))
    console.print(table)


@app.command("operators")
def operators_command(ctx: typer.Context) -> None:
    """List available operators."""
    table = Table(title="Operators")
    table.add_column("Symbol", style="cyan")
    table.add_column("Usage")
    table.add_column("Precedence")
    for info in ParserService(ctx.obj).available_operators():
        table.add_row(escape(info.symbol), info.usage, info.precedence)
    console.print(table)


@app.command("variables")
def variables_command(ctx: typer.Context) -> None:
    """List built-in constants and configured variables."""
    table = Table(title="Variables")
    table.add_column("Name", style="cyan")
    table.add_column("Value", justify="right")
    for info in ParserService(ctx.obj).available_variables():
        table.add_row(info.name, repr(info.value))
    console.print(table)


@app.command("serve")
def serve_command(
    ctx: typer.Context,
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port")] = None,
) -> None:
    """Run the HTTP service."""
    import uvicorn

    from infixcalc.api import create_app

    settings: Settings = ctx.obj or Settings()
    bind_host = host or settings.server.host
    bind_port = port if port is not None else settings.server.port

    logger.info(f"Starting infixcalc on {bind_host}:{bind_port}")
    uvicorn.run(
        create_app(settings),
        host=bind_host,
        port=bind_port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    app()
