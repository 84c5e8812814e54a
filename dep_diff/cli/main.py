"""Main CLI interface for DepDiff."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..core.diff import ResolutionDiff, diff_resolutions
from ..core.exceptions import DepDiffError
from ..core.resolvers import ResolverRegistry, create_default_registry
from ..output.formatters import FORMATTERS, get_formatter
from ..utils.logging import get_logger, setup_logging

app = typer.Typer(
    name="depdiff",
    help="Compare two lockfiles and report added, removed, upgraded and downgraded packages",
    add_completion=False
)

# Reports go to stdout; status and errors go to stderr
console = Console()
err_console = Console(stderr=True)
logger = get_logger("CLI")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"depdiff {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit"
    )
) -> None:
    """DepDiff: semantic diff of dependency lockfiles."""


async def run_diff(
    source: Path,
    target: Path,
    resolver_name: Optional[str] = None,
    registry: Optional[ResolverRegistry] = None
) -> ResolutionDiff:
    """Resolve both lockfiles and diff them.

    Args:
        source: Older lockfile
        target: Newer lockfile
        resolver_name: Resolver to use for both files instead of matching
            on file names
        registry: Resolver registry (the built-in resolvers if None)

    Returns:
        Changes from source to target
    """
    registry = registry or create_default_registry()
    pair = registry.lookup_resolvers(source, target, resolver_name)
    logger.debug(f"Using {pair.source.name} resolver")

    source_resolution, target_resolution = await asyncio.gather(
        pair.source.resolve(source),
        pair.target.resolve(target),
    )
    return diff_resolutions(source_resolution, target_resolution)


@app.command()
def diff(
    source: Path = typer.Argument(
        ...,
        help="Lockfile of the older snapshot"
    ),
    target: Path = typer.Argument(
        ...,
        help="Lockfile of the newer snapshot"
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text, markdown, html or json"
    ),
    resolver: Optional[str] = typer.Option(
        None,
        "--resolver",
        "-r",
        help="Resolver to use for both files: npm, pnpm, yarn, composer, ruby or python"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the report to a file instead of stdout"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write log records to this file"
    )
) -> None:
    """Compare two lockfiles of the same ecosystem."""
    setup_logging(log_file=log_file, verbose=verbose)

    try:
        formatter = get_formatter(output_format)
        result = asyncio.run(run_diff(source, target, resolver))
        report = formatter.format(result)

        if output:
            output.write_text(report + "\n", encoding="utf-8")
            err_console.print(f"Report written to {escape(str(output))}")
        else:
            typer.echo(report)

    except (DepDiffError, OSError, ValueError) as e:
        logger.error(f"Diff failed: {e}")
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def info() -> None:
    """Show supported lockfile formats and output formats."""
    console.print(Panel.fit(
        "[bold blue]DepDiff[/bold blue]\n"
        "Semantic diff of dependency lockfiles",
        title="Information"
    ))

    registry = create_default_registry()
    table = Table(title="Supported Resolvers")
    table.add_column("Resolver", style="cyan", no_wrap=True)
    table.add_column("Lockfiles", style="green")

    for name in registry.get_supported_resolvers():
        resolver = registry.get_resolver(name)
        table.add_row(name, ", ".join(resolver.lockfile_names))

    console.print(table)
    console.print(f"[bold]Output Formats:[/bold] {', '.join(FORMATTERS)}")


def main() -> None:
    """Main entry point for DepDiff CLI."""
    app()


if __name__ == "__main__":
    main()
