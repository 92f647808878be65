"""
splitscan CLI - scan columnar files split by split

Usage:
    splitscan scan <file>... [options]   # Print the rows of a scan
    splitscan schema <file> [options]    # Print a file's physical schema
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler

from splitscan import __version__
from splitscan.cli.formatters import get_formatter
from splitscan.core.config import (
    ClusterContext,
    ScanConfig,
    load_config_file,
    parse_field,
    resolve_location,
)
from splitscan.core.errors import NotFoundError, ScanError
from splitscan.operators.limit import Limit
from splitscan.operators.scan import Scan
from splitscan.scan.coordinator import ScanCoordinator
from splitscan.scan.schema import retrieve_schema

FORMAT_CHOICE = click.Choice(["table", "json", "csv"], case_sensitive=False)


@contextmanager
def _logging_to_stderr(verbose: int) -> Iterator[None]:
    """Send library logs to stderr through Rich for the duration of a command"""
    if not verbose:
        yield
        return

    logger = logging.getLogger("splitscan")
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    previous_level = logger.level
    logger.setLevel(logging.DEBUG if verbose > 1 else logging.INFO)
    logger.addHandler(handler)
    try:
        yield
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)


def _fail(error: Exception) -> None:
    if isinstance(error, NotFoundError):
        click.echo(f"Error: File not found - {error}", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _emit(output_text: str, output: Optional[str], fmt: str) -> None:
    if output:
        with open(output, "w") as f:
            f.write(output_text)
        click.echo(f"Results written to {output} ({fmt} format)", err=True)
    else:
        click.echo(output_text)


@click.group()
@click.version_option(version=__version__, prog_name="splitscan")
def cli():
    """
    splitscan - Scan columnar files split by split

    Reads Parquet files lazily, one split at a time.
    """


@cli.command()
@click.argument("files", nargs=-1, type=str)
@click.option(
    "--field",
    "-F",
    "fields",
    multiple=True,
    help="Declared field as name[:type[:output_name]] (repeatable, default: all columns)",
)
@click.option(
    "--split-size",
    type=click.IntRange(min=1),
    default=None,
    help="Target split size in bytes (default: 134217728)",
)
@click.option(
    "--ignore-empty-folder",
    is_flag=True,
    default=None,
    help="Yield no rows instead of failing when the input folder is empty",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file with 'scan' and 'cluster' sections",
)
@click.option(
    "--format",
    "-f",
    type=FORMAT_CHOICE,
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--limit",
    "-l",
    type=int,
    default=None,
    help="Stop after this many rows",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Write output to file instead of stdout",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output",
)
@click.option(
    "--stats",
    is_flag=True,
    help="Print split and row counts to stderr",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Log to stderr (-v info, -vv debug)",
)
def scan(
    files: Tuple[str, ...],
    fields: Tuple[str, ...],
    split_size: Optional[int],
    ignore_empty_folder: Optional[bool],
    config_file: Optional[str],
    format: str,
    limit: Optional[int],
    output: Optional[str],
    no_color: bool,
    stats: bool,
    verbose: int,
):
    """
    Scan one or more Parquet files and print their rows

    The first file is the representative file whose schema is used for
    the whole set. A directory stands for the .parquet files inside it.

    Examples:

        \b
        # All columns of one file
        $ splitscan scan data.parquet

        \b
        # Declared projection, renaming a column
        $ splitscan scan part-0.parquet part-1.parquet -F id:int -F name:string:customer

        \b
        # Smaller splits, JSON output, first 10 rows
        $ splitscan scan data.parquet --split-size 1048576 -f json -l 10

        \b
        # Settings from a config file
        $ splitscan scan --config scan.yaml
    """
    fmt = format
    del format
    try:
        with _logging_to_stderr(verbose):
            _run_scan(
                files, fields, split_size, ignore_empty_folder, config_file,
                fmt, limit, output, no_color, stats,
            )
    except (ScanError, OSError, ValueError) as e:
        _fail(e)


def _run_scan(
    files, fields, split_size, ignore_empty_folder, config_file,
    fmt, limit, output, no_color, stats,
) -> None:
    """Build the scan from config file and flags, run it and print the rows"""
    start_time = time.time()

    settings = load_config_file(config_file) if config_file else {}
    config = ScanConfig.from_dict(settings.get("scan") or {})
    context = ClusterContext.from_dict(settings.get("cluster"))

    if files:
        config.files = list(files)
    if fields:
        config.fields = [parse_field(f) for f in fields]
    if split_size is not None:
        config.split_size_bytes = split_size
    if ignore_empty_folder is not None:
        config.ignore_empty_folder = ignore_empty_folder
    config.files = [resolve_location(f) for f in config.files]

    coordinator = ScanCoordinator(config, context=context)
    source = Scan(coordinator)
    rows_op = Limit(source, limit) if limit is not None else source
    results = list(rows_op)

    columns = None
    if coordinator.effective_schema is not None:
        columns = [f.column_name for f in coordinator.effective_schema]

    formatter = get_formatter(fmt)
    output_text = formatter.format(
        results,
        columns=columns,
        no_color=no_color or (not sys.stdout.isatty()),
        show_footer=not output,
    )
    _emit(output_text, output, fmt)

    if stats:
        statistics = coordinator.get_statistics()
        elapsed = time.time() - start_time
        click.echo(
            f"Scanned {statistics['rows_emitted']} rows from "
            f"{statistics['splits_read']}/{statistics['splits_planned']} splits "
            f"in {elapsed:.3f}s",
            err=True,
        )


@cli.command()
@click.argument("file", type=str)
@click.option(
    "--format",
    "-f",
    type=FORMAT_CHOICE,
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output",
)
def schema(file: str, format: str, no_color: bool):
    """
    Print the physical schema of a Parquet file

    Examples:

        \b
        $ splitscan schema data.parquet
        $ splitscan schema s3://bucket/events/ -f json
    """
    fmt = format
    del format

    try:
        fields = retrieve_schema(resolve_location(file))
    except ScanError as e:
        _fail(e)
        return

    results = [f.to_dict() for f in fields]

    formatter = get_formatter(fmt)
    click.echo(
        formatter.format(
            results,
            columns=["name", "type", "precision", "scale"],
            no_color=no_color or (not sys.stdout.isatty()),
            show_footer=False,
        )
    )


if __name__ == "__main__":
    cli()
