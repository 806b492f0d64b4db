"""rpcdiff CLI - Command-line interface.

Usage:
    rpcdiff diff --old <path|url> --new <path|url> [--compare-meta]
"""

import asyncio
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from rpcdiff.errors import RpcDiffError
from rpcdiff.types import Criticality, Diff, DiffOptions

console = Console()
app = typer.Typer(
    name="rpcdiff",
    help="Compare two OpenRPC schemas and classify changes as breaking or not",
    no_args_is_help=True,
)

CRITICALITY_COLORS = {
    Criticality.BREAKING: "red",
    Criticality.DANGEROUS: "yellow",
    Criticality.NON_BREAKING: "green",
}


def setup_logging(verbose: bool = False) -> None:
    """Set up logging with rich handler."""
    level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
    )

    logging.getLogger("rpcdiff").setLevel(level)

    # Quiet down httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@app.command()
def diff(
    old: str = typer.Option(
        ...,
        "--old",
        "-o",
        help="Path or URL of the old schema",
    ),
    new: str = typer.Option(
        ...,
        "--new",
        "-n",
        help="Path or URL of the new schema",
    ),
    compare_meta: bool = typer.Option(
        False,
        "--compare-meta",
        help="Also compare schema meta info (info, servers)",
        envvar="RPCDIFF_COMPARE_META",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output results as JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Compare two OpenRPC schemas.

    Exits with 0 whenever both schemas load, whatever the criticality.
    """
    from rpcdiff.modules.pipeline import diff_sources

    setup_logging(verbose=verbose)

    try:
        result = asyncio.run(
            diff_sources(
                old_source=old,
                new_source=new,
                options=DiffOptions(compare_meta=compare_meta),
            )
        )
    except RpcDiffError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if output_json:
        _output_json(result)
    else:
        _output_rich(result)


def _output_json(result: Diff) -> None:
    """Output diff as JSON."""
    print(result.model_dump_json(indent=2))


def _output_rich(result: Diff) -> None:
    """Output diff with rich formatting."""
    from rpcdiff.modules.report import describe_change, group_by_criticality

    if not result.changes:
        console.print(Panel(
            "[green]✓ There is no difference between schemas[/green]",
            title="Result",
            border_style="green",
        ))
        return

    color = CRITICALITY_COLORS[result.criticality]
    console.print(Panel(
        f"[{color}]New schema has {result.criticality.label} change(s)[/{color}]",
        title="Result",
        border_style=color,
    ))

    for level, changes in group_by_criticality(result).items():
        level_color = CRITICALITY_COLORS[level]
        table = Table(
            title=f"[{level_color}]{level.label.capitalize()} changes ({len(changes)})[/{level_color}]",
            show_lines=False,
        )
        table.add_column("Object")
        table.add_column("Change", overflow="fold")

        for change in changes:
            table.add_row(change.object.value, describe_change(change))

        console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from rpcdiff import __version__
    console.print(f"rpcdiff version {__version__}")


if __name__ == "__main__":
    app()
