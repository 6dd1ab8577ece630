"""Command-line interface for checking values against policy documents."""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .dsl import FACTORIES
from .errors import PolicyError
from .policy import load_policy, load_values

app = typer.Typer(
    name="paramkit",
    help="Check parameter values against declarative constraint policies.",
    no_args_is_help=True,
)

console = Console()


class ExitCode:
    """Standardized exit codes for CLI commands.

        0 = Success
        1 = Values violate the policy
        2 = Policy or values file unreadable or malformed
    """

    SUCCESS = 0
    VALIDATION_ERROR = 1
    INPUT_ERROR = 2


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging for CLI runs."""
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )
    logging.getLogger("paramkit").setLevel(level)


def _version_callback(value: bool) -> None:
    if value:
        print(f"paramkit {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
):
    """paramkit: composable parameter validation and transformation."""


@app.command("check")
def check_command(
    policy_file: Annotated[Path, typer.Argument(help="Policy YAML file")],
    values_file: Annotated[Path, typer.Argument(help="Values YAML or JSON file")],
    json_output: Annotated[
        bool, typer.Option("--json", help="Output machine-readable JSON")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log evaluation progress")
    ] = False,
    debug: Annotated[
        bool, typer.Option("--debug", help="Log every rejected value")
    ] = False,
):
    """Check a values file against a policy."""
    setup_logging(verbose=verbose, debug=debug)

    try:
        policy = load_policy(policy_file)
        values = load_values(values_file)
    except PolicyError as e:
        if json_output:
            print(json.dumps({"valid": False, "error": str(e)}))
        else:
            console.print(f"[red]✗[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(ExitCode.INPUT_ERROR)

    report = policy.evaluate(values)

    if json_output:
        payload = {"valid": report.valid, **report.model_dump(mode="json")}
        print(json.dumps(payload, indent=2, default=str))
    elif report.valid:
        console.print(
            f"[green]✓[/green] {len(policy.parameters)} parameter(s) valid",
            highlight=False,
        )
    else:
        table = Table(title="Policy violations")
        table.add_column("Parameter", style="cyan")
        table.add_column("Kind")
        table.add_column("Message")
        for issue in report.issues:
            table.add_row(escape(issue.parameter), issue.kind, escape(issue.message))
        console.print(table)
        console.print(f"[red]✗[/red] {len(report.issues)} issue(s)", highlight=False)

    if not report.valid:
        raise typer.Exit(ExitCode.VALIDATION_ERROR)


@app.command("factories")
def factories_command():
    """List the available constraint and transformation factories."""
    table = Table(title="Factories")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for name, factory in FACTORIES.items():
        doc = (factory.__doc__ or "").strip().splitlines()
        table.add_row(name, doc[0] if doc else "")
    console.print(table)


def main() -> None:
    app()
