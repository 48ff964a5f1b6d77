import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from route_params.cli.check import OutputFormat, build_options, configure_logging, render_reports
from route_params.config import LintOptions
from route_params.core.lint import lint_paths
from route_params.core.ports.watcher import ChangeHandler, FileWatcherPort
from route_params.core.routes import get_file_info
from route_params.watcher.watchfiles_adapter import WatchfilesWatcher

console = Console()


def make_change_handler(options: LintOptions, fix: bool = False) -> ChangeHandler:
    async def _on_change(paths: set[Path]) -> None:
        routed = sorted(p for p in paths if get_file_info(p).is_routable)
        if not routed:
            return
        reports = await asyncio.to_thread(lint_paths, routed, options, fix)
        render_reports(reports, OutputFormat.table)

    return _on_change


def watch(
    directory: Annotated[Path, typer.Argument(help="Directory to watch.")] = Path("."),
    fix: Annotated[bool, typer.Option("--fix", help="Apply fixes to changed files.")] = False,
    search_params: Annotated[
        bool | None, typer.Option("--search-params/--no-search-params", help="Check the searchParams type.")
    ] = None,
    async_request_api: Annotated[
        str | None, typer.Option(help="Expect Promise-wrapped params: auto, true or false.")
    ] = None,
    project_root: Annotated[Path | None, typer.Option(help="Directory holding package.json.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Re-check route files whenever they change."""
    configure_logging(verbose)
    if not directory.is_dir():
        console.print(f"[red]Directory not found: {escape(str(directory))}[/red]")
        raise typer.Exit(code=2)
    options = build_options(search_params, async_request_api, project_root)
    watcher: FileWatcherPort = WatchfilesWatcher(directory, make_change_handler(options, fix))

    async def _run() -> None:
        await watcher.start()
        try:
            while True:
                await asyncio.sleep(3600)
        finally:
            await watcher.stop()

    console.print(f"[green]Watching[/green] {escape(str(directory))} (Ctrl+C to stop)")
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("[yellow]Stopped[/yellow]")
