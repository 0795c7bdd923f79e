"""CLI for the ``bank_statements`` package.

Typer-based console interface around :func:`bank_statements.api.convert_statement`.
Environment variables are loaded from a local ``.env`` using ``python-dotenv``
before any command runs (existing variables win):

- ``BANK_STATEMENTS_LOG_LEVEL``: default log level
- ``BANK_STATEMENTS_CSV_SEPARATOR``: default output delimiter
- ``BANK_STATEMENTS_REFERENCE_DATE``: ISO date fixing the ledger accounting year
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from .ingest.utils import StatementKind
from .logging_setup import configure_logging
from .writers import DEFAULT_SEPARATOR

SEPARATOR_ENV = "BANK_STATEMENTS_CSV_SEPARATOR"
REFERENCE_DATE_ENV = "BANK_STATEMENTS_REFERENCE_DATE"

app = typer.Typer(
    name="bank-statements",
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Convert camt.053 XML statements and plain-text ledger dumps into "
        "semicolon-separated records."
    ),
)
console = Console()
err_console = Console(stderr=True)


@app.command("convert")
def convert_cmd(
    inputs: Annotated[
        list[Path],
        typer.Argument(help="Statement files (.xml for camt.053, anything else is ledger text)."),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            dir_okay=False,
            help="Output file (single input only). Defaults to <stem>_xml.csv / <stem>_txt.csv.",
        ),
    ] = None,
    kind: Annotated[
        StatementKind | None,
        typer.Option(help="Force the input kind instead of detecting it from the extension."),
    ] = None,
    separator: Annotated[
        str,
        typer.Option(envvar=SEPARATOR_ENV, help="Output column separator."),
    ] = DEFAULT_SEPARATOR,
    reference_date: Annotated[
        datetime | None,
        typer.Option(
            formats=["%Y-%m-%d"],
            envvar=REFERENCE_DATE_ENV,
            help="Date used to derive the ledger accounting year (defaults to today).",
        ),
    ] = None,
) -> None:
    """Convert one or more statement files."""

    # Deferred import keeps ``--help`` independent of the XML stack.
    from .api import convert_statement, default_output_path

    if output is not None and len(inputs) > 1:
        raise typer.BadParameter(
            "--output can only be used with a single input", param_hint="--output"
        )

    failures = 0
    for path in inputs:
        try:
            count = convert_statement(
                path,
                output,
                kind=kind,
                separator=separator,
                reference_date=reference_date.date() if reference_date is not None else None,
            )
        except FileNotFoundError:
            err_console.print(f"[red]Error:[/red] File not found: {escape(str(path))}")
            failures += 1
            continue
        except PermissionError:
            err_console.print(f"[red]Error:[/red] Permission denied: {escape(str(path))}")
            failures += 1
            continue
        except ValueError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(path))}: {escape(str(e))}")
            failures += 1
            continue

        target = output or default_output_path(path, kind=kind)
        console.print(
            f"[green]{count}[/green] records: {escape(str(path))} -> {escape(str(target))}"
        )

    if failures:
        raise typer.Exit(1)


@app.callback()
def _root(
    log_level: Annotated[
        str | None,
        typer.Option(help="Log level (DEBUG, INFO, ...). Falls back to BANK_STATEMENTS_LOG_LEVEL."),
    ] = None,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level") from e


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m bank_statements.cli`
    app()
