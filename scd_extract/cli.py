"""
CLI entry point for scd-extract.
"""

import logging
from functools import wraps
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from scd_extract.assembler import extract_device, list_devices
from scd_extract.config import load_config
from scd_extract.exceptions import FileNotFoundError as ScdFileNotFoundError
from scd_extract.exceptions import ScdExtractError, format_error_for_cli
from scd_extract.formatter import CanonicalFormatter
from scd_extract.parser import parse_document
from scd_extract.util.files import ensure_dir, read_bytes, write_text

app = typer.Typer(
    name="scd-extract",
    help="Extract a single IED from an SCL document as a standalone CID file",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

# Configuration constants
MAX_INPUT_FILE_SIZE = 200 * 1024 * 1024  # 200MB


def handle_errors(func):
    """Decorator to handle exceptions in CLI commands with nice formatting."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ScdExtractError, OSError, ValueError) as e:
            console.print(format_error_for_cli(e))
            raise typer.Exit(1)

    return wrapper


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Extract a single IED from an SCL document as a standalone CID file."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _read_input(file: Path) -> bytes:
    if not file.exists():
        raise ScdFileNotFoundError(str(file))
    if not file.is_file():
        raise ScdFileNotFoundError(f"{file} is not a file")

    file_size = file.stat().st_size
    if file_size > MAX_INPUT_FILE_SIZE:
        raise ValueError(
            f"File too large: {file_size:,} bytes. "
            f"Maximum allowed: {MAX_INPUT_FILE_SIZE:,} bytes (200 MB)"
        )
    logger.debug(f"Reading {file} ({file_size:,} bytes)")
    return read_bytes(file)


@app.command()
@handle_errors
def devices(
    file: Path = typer.Argument(..., help="SCD file to inspect"),
):
    """List the IEDs in a document, grouped by manufacturer."""
    document = parse_document(_read_input(file))
    rows = list_devices(document)

    if not rows:
        console.print("[yellow]No IED elements found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Manufacturer", style="dim")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Description")

    previous = None
    for row in rows:
        manufacturer = row.manufacturer if row.manufacturer != previous else ""
        previous = row.manufacturer
        table.add_row(manufacturer, row.name, row.type or "", row.description or "")

    console.print(table)


@app.command()
@handle_errors
def extract(
    file: Path = typer.Argument(..., help="SCD file to extract from"),
    device: str = typer.Argument(..., help="Name of the IED to extract"),
    out: Path = typer.Option(Path("."), "--out", "-o", help="Output directory"),
    config: Path | None = typer.Option(None, "--config", help="Path to scd-extract.yaml"),
    stdout: bool = typer.Option(False, "--stdout", help="Print the result instead of saving"),
):
    """Write <DEVICE>.cid containing the IED and everything it depends on."""
    settings = load_config(config)
    result = extract_device(_read_input(file), device, settings)

    for warning in result.warnings:
        err_console.print(f"[yellow]⚠ {warning}[/yellow]")

    if stdout:
        typer.echo(result.text, nl=False)
        return

    target = ensure_dir(out) / result.filename
    write_text(target, result.text)

    console.print(f"[green]✓ Extracted {device} to {target}[/green]")
    console.print(
        f"[dim]  {len(result.closure.members)} type definitions, "
        f"{len(result.warnings)} warning(s)[/dim]"
    )


@app.command(name="format")
@handle_errors
def format_cmd(
    file: Path = typer.Argument(..., help="SCL file to re-format"),
    out: Path | None = typer.Option(None, "--out", "-o", help="Output file (default: stdout)"),
    config: Path | None = typer.Option(None, "--config", help="Path to scd-extract.yaml"),
):
    """Re-format any SCL document into canonical indented text."""
    settings = load_config(config)
    formatter = CanonicalFormatter(
        indent=settings.indent,
        declaration=settings.declaration,
        verbatim_containers=settings.verbatim_containers,
    )
    text = formatter.format(parse_document(_read_input(file)))

    if out is None:
        typer.echo(text, nl=False)
        return

    write_text(out, text)
    console.print(f"[green]✓ Formatted document written to {out}[/green]")


if __name__ == "__main__":
    app()
