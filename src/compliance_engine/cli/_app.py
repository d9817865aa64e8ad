"""Typer application for the compliance engine and its global options."""

from pathlib import Path
from typing import Optional

import typer

from compliance_engine import __version__

app = typer.Typer(
    name="compliance-engine",
    help="Score contract clauses against policies, aggregate risk and decide deals.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"compliance-engine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every rule evaluation"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Warnings and errors only"),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON on stdout"),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        exists=True,
        dir_okay=False,
        help="Read CONFIDENCE_THRESHOLD / COMPLIANCE_* thresholds from this file",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show the engine version and exit",
    ),
):
    """Deterministic compliance scoring and deal decisions for contract versions."""
    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet are mutually exclusive")

    ctx.obj = {
        "verbose": verbose,
        "quiet": quiet,
        "json": json_output,
        "env_file": env_file,
    }
