"""Command line interface for unflatten.

Recovers the directory tree of a flattened listing and writes it to disk.
"""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.tree import Tree

from unflatten import __version__
from unflatten.config import Settings, get_settings
from unflatten.core.errors import UnflattenError
from unflatten.core.models import ResolutionReport
from unflatten.tracing.path_resolver import PathResolver
from unflatten.tracing.registry import FileRegistry
from unflatten.utils.materializer import build_tree, write_all_files
from unflatten.utils.rewriter import add_base_path_to_imports
from unflatten.utils.source_provider import fetch_listing, load_directory


console = Console()
err_console = Console(stderr=True)


def setup_logging(level: str):
    """Route library logging through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def load_sources(source: str, settings: Settings) -> dict[str, str]:
    """Read sources from a local directory or fetch them by address."""
    if Path(source).is_dir():
        return load_directory(source)
    return fetch_listing(source, settings.source_url, timeout=settings.http_timeout)


def prepare_target_dir(target_dir: Path):
    """Create the target directory, refusing an existing non-directory."""
    if target_dir.exists() and not target_dir.is_dir():
        raise click.UsageError(f"target '{target_dir}' is not a directory")
    target_dir.mkdir(parents=True, exist_ok=True)


def render_tree(registry: FileRegistry, label: str) -> Tree:
    """Build a rich Tree of the recovered layout."""
    root = Tree(f"[bold blue]{label}[/bold blue]")

    def add_nodes(branch: Tree, node: dict):
        dirs = sorted(k for k, v in node.items() if v is not None)
        files = sorted(k for k, v in node.items() if v is None)
        for name in dirs:
            add_nodes(branch.add(f"[bold]{name}/[/bold]"), node[name])
        for name in files:
            branch.add(name)

    add_nodes(root, build_tree(registry))
    return root


def display_report(registry: FileRegistry, report: ResolutionReport):
    lines = [
        f"[bold]Files:[/bold] {len(registry)}",
        f"[bold]Sweeps:[/bold] {report.sweep_count}",
    ]
    if report.seeded:
        lines.append(f"[bold]Cycles broken at:[/bold] {', '.join(report.seeded)}")
    if report.estimated:
        deep = {name: depth for name, depth in report.estimated.items() if depth}
        if deep:
            lines.append(
                "[bold]Estimated depth:[/bold] "
                + ", ".join(f"{name} ({depth})" for name, depth in deep.items())
            )
    console.print(Panel("\n".join(lines), title="[bold green]Resolved[/bold green]", border_style="green"))


def run(source: str, target_dir: Path, base_path: str | None, dry_run: bool, as_json: bool, settings: Settings):
    """Resolve a listing and write, print or dump it."""
    sources = load_sources(source, settings)

    registry = FileRegistry.from_sources(sources)
    report = PathResolver(registry, placeholder=settings.placeholder).resolve()

    if base_path:
        add_base_path_to_imports(registry, base_path)

    if as_json:
        click.echo(json.dumps(registry.to_dict(), indent=2))
        return

    display_report(registry, report)

    if dry_run:
        console.print(render_tree(registry, str(target_dir)))
        return

    prepare_target_dir(target_dir)
    written = write_all_files(registry, target_dir)
    console.print(f"[green]Wrote {written} file(s) to {target_dir}[/green]")


@click.command()
@click.option("--serve", is_flag=True, help="Start the web API server")
@click.option("--port", default=8080, help="Port for API server")
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option(
    "--target-dir", "-d",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    help="Directory where the files are saved",
)
@click.option("--base-path", help="Prefix for non-relative import literals")
@click.option("--dry-run", is_flag=True, help="Show the recovered tree without writing")
@click.option("--json", "as_json", is_flag=True, help="Print every file with its imports and recovered path as JSON")
@click.option("--verbose", is_flag=True, help="Log every sweep and placement")
@click.argument("source", required=False)
def cli(serve, port, version, target_dir, base_path, dry_run, as_json, verbose, source):
    """unflatten - recover the directory tree of a flattened listing.

    SOURCE is a directory of flattened files or a listing address.

    Examples:

        unflatten ./flat                 # Local directory

        unflatten 0x1234... -d ./out     # Fetch and write to ./out

        unflatten ./flat --dry-run       # Show the tree only

        unflatten --serve                # Start web API server
    """
    if version:
        console.print(f"unflatten {__version__}")
        return

    try:
        settings = get_settings()
    except ValueError as e:
        err_console.print(f"[red]Configuration Error:[/red] {e}")
        sys.exit(1)

    setup_logging("DEBUG" if verbose else settings.log_level)

    if serve:
        import uvicorn
        console.print(f"[green]Starting unflatten API on http://127.0.0.1:{port}[/green]")
        console.print(f"[dim]API docs at http://127.0.0.1:{port}/docs[/dim]")
        uvicorn.run("unflatten.server:app", host="127.0.0.1", port=port)
        return

    if not source:
        raise click.UsageError("SOURCE is required")

    try:
        run(
            source,
            target_dir or Path(settings.output_dir),
            base_path,
            dry_run,
            as_json,
            settings,
        )
    except (UnflattenError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
