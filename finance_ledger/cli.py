"""
Command-line interface for the Finance Ledger

    finance-ledger summary [FILE] [-v] [--format legacy] [--max-wrong-lines N]
    finance-ledger version

Rejected lines go to stderr as ``<line>: <message>``; the summary goes
to stdout. Business logic lives in ``finance_ledger.orchestrator``.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from finance_ledger import __version__
from finance_ledger.audit import AuditLogger, configure_logging
from finance_ledger.config import get_settings
from finance_ledger.errors import StorageError, TooManyInvalidLinesError
from finance_ledger.models.record import LedgerSummary, RecordFormat, ValidationError
from finance_ledger.orchestrator import summarize_data_file
from finance_ledger.storage import resolve_data_file
from finance_ledger.validation import RecordValidator


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Your private financial manager: validate a ledger file and print its balance.",
)


def format_summary(summary: LedgerSummary) -> str:
    """Render the three-line statistics block."""
    return (
        "Finance statistics:\n"
        f"Profit:  {summary.profit:8.2f}\n"
        f"Costs:   {summary.cost:8.2f}\n"
        f"Balance: {summary.balance:8.2f}"
    )


def _log_level_for(verbose: int) -> str:
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return get_settings().app.log_level


def _report_rejected(error: ValidationError) -> None:
    typer.echo(RecordValidator.describe(error), err=True)


@app.command("summary")
def summary_cmd(
    data_file: Annotated[
        Optional[Path],
        typer.Argument(help="Ledger file to read. Defaults to ~/finance.db."),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Enable verbose mode (repeat for more)."),
    ] = 0,
    record_format: Annotated[
        Optional[RecordFormat],
        typer.Option("--format", help="Line format version of the data file."),
    ] = None,
    max_wrong_lines: Annotated[
        Optional[int],
        typer.Option(min=1, help="Abort after this many rejected lines."),
    ] = None,
) -> None:
    """Validate every record and print profit, costs and balance."""

    app_settings = get_settings().app
    configure_logging(_log_level_for(verbose), json_output=app_settings.log_json)

    if verbose >= 1:
        typer.echo(f"-> NOTE: Set verbose level to {verbose}")

    resolved, fell_back = resolve_data_file(data_file, app_settings)
    if fell_back:
        typer.echo(f"File {data_file} isn't a regular file!", err=True)
        typer.echo("Using default data file...", err=True)
    if verbose >= 1:
        if data_file is None or fell_back:
            typer.echo(f"-> Your data directory is '{app_settings.data_dir}'")
        typer.echo(f"-> Open data file ({resolved})")
        typer.echo("-> Reading data...")

    def trace_line(line_number: int, line: str) -> None:
        typer.echo(f"---> {line_number}: '{line}'")

    try:
        summary = summarize_data_file(
            data_file,
            record_format=record_format,
            max_wrong_lines=max_wrong_lines,
            audit_logger=AuditLogger(),
            on_rejected=_report_rejected,
            on_line=trace_line if verbose >= 3 else None,
        )
    except TooManyInvalidLinesError:
        typer.echo("Too many wrong lines in database. Exit.", err=True)
        raise typer.Exit(1)
    except StorageError as e:
        typer.echo(f"Failed to open file: {e}", err=True)
        raise typer.Exit(1)

    if verbose >= 1:
        message = f"-> Reads {summary.lines_read} strings"
        if summary.lines_read > summary.records:
            message += f" and {summary.records} records"
        typer.echo(f"{message} from data file")

    typer.echo(format_summary(summary))


@app.command("version")
def version_cmd() -> None:
    """Print version and exit."""
    typer.echo(f"finance-ledger: version {__version__}")


if __name__ == "__main__":  # pragma: no cover
    app()
