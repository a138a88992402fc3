"""
Platform Integrity CLI

Record a firmware baseline, then check later boots against it.

Exit codes:
    0  integrity verified
    1  integrity mismatch
    2  nothing measured, no baseline, or unreadable snapshot text
"""
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from platform_integrity import __version__
from platform_integrity.config import get_settings
from platform_integrity.integrity import (
    EmptyResultError,
    IntegritySnapshot,
    IntegrityVerifier,
    MalformedInputError,
    VerificationResult,
)
from platform_integrity.measurement import default_producers
from platform_integrity.storage import BaselineStore

console = Console()

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2


def setup_logging(log_level: str = "INFO") -> None:
    """Send package log records to stderr through rich."""
    logger = logging.getLogger("platform_integrity")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(
        RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    )
    logger.setLevel(log_level.upper())


def build_verifier(baseline: str | None) -> IntegrityVerifier:
    settings = get_settings()
    path = Path(baseline) if baseline else settings.baseline_file
    return IntegrityVerifier(BaselineStore(path), default_producers(settings))


def load_snapshot(path: str) -> IntegritySnapshot:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return IntegritySnapshot.from_string(f.read())


def print_result(result: VerificationResult) -> int:
    """Show a verification result and return the exit code for it."""
    discrepancies = result.details.get("discrepancies", [])
    if discrepancies:
        table = Table(title="Discrepancies")
        table.add_column("Identifier", style="cyan")
        table.add_column("Change", style="magenta")
        table.add_column("Previous")
        table.add_column("Current")
        for d in discrepancies:
            table.add_row(d["id"], d["kind"], d["old"] or "MISSING", d["new"] or "MISSING")
        console.print(table)

    if result.is_valid:
        console.print(f"[green]✓ {result.message}[/green]")
        return EXIT_OK
    console.print(f"[red]✗ {result.message}[/red]")
    return EXIT_MISMATCH if discrepancies else EXIT_ERROR


@click.group()
@click.version_option(version=__version__)
def main():
    """
    Platform Integrity - detect firmware tampering between boots.

    Checksums UEFI Secure Boot variables, boot entries and ACPI tables.
    """
    setup_logging(get_settings().log_level)


@main.command()
@click.option('--output', '-o', type=click.Path(), help='Write snapshot text to this file')
def measure(output):
    """Measure the current firmware state"""
    verifier = build_verifier(None)
    try:
        snapshot = verifier.measure()
    except EmptyResultError as e:
        console.print(f"[red]✗ Error: {escape(str(e))}[/red]")
        sys.exit(EXIT_ERROR)

    text = snapshot.to_string()
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]✓ Saved {len(snapshot)} entries to {output}[/green]")
    else:
        click.echo(text)


@main.command()
@click.option('--baseline', '-b', type=click.Path(), help='Baseline file (default from settings)')
def baseline(baseline):
    """Record the current state as the trusted baseline"""
    verifier = build_verifier(baseline)
    try:
        snapshot = verifier.record_baseline()
    except EmptyResultError as e:
        console.print(f"[red]✗ Error: {escape(str(e))}[/red]")
        sys.exit(EXIT_ERROR)

    console.print(f"[green]✓ Recorded {len(snapshot)} entries to {verifier.store.path}[/green]")


@main.command()
@click.option('--baseline', '-b', type=click.Path(), help='Baseline file (default from settings)')
def verify(baseline):
    """Check the current state against the baseline"""
    verifier = build_verifier(baseline)
    try:
        result = verifier.verify()
    except (EmptyResultError, MalformedInputError) as e:
        console.print(f"[red]✗ Error: {escape(str(e))}[/red]")
        sys.exit(EXIT_ERROR)

    sys.exit(print_result(result))


@main.command()
@click.argument('current', type=click.Path(exists=True))
@click.argument('reference', type=click.Path(exists=True))
def compare(current, reference):
    """Compare two saved snapshot files"""
    try:
        snapshot = load_snapshot(current)
        other = load_snapshot(reference)
    except MalformedInputError as e:
        console.print(f"[red]✗ Malformed snapshot at line {e.line_number}: {escape(e.line)}[/red]")
        sys.exit(EXIT_ERROR)

    sys.exit(print_result(build_verifier(None).compare(snapshot, other)))


@main.command()
def serve():
    """Run the HTTP API"""
    from platform_integrity.main import main as run_server

    run_server()


if __name__ == '__main__':
    main()
