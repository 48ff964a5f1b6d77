import json
import logging
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from route_params.config import LintOptions, get_options
from route_params.core.lint import diagnostic_to_dict, fix_source, lint_paths, lint_source
from route_params.models import FileReport

console = Console()


class OutputFormat(str, Enum):
    table = "table"
    json = "json"


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_options(
    search_params: bool | None, async_request_api: str | None, project_root: Path | None
) -> LintOptions:
    try:
        return get_options(search_params, project_root, async_request_api)
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=2) from None


def render_reports(reports: Sequence[FileReport], output_format: OutputFormat) -> int:
    """Print the reports and return the number of findings."""
    findings = sum(len(r.diagnostics) for r in reports)
    if output_format == OutputFormat.json:
        payload = [{"path": r.path, "diagnostics": [diagnostic_to_dict(d) for d in r.diagnostics]} for r in reports]
        typer.echo(json.dumps(payload, indent=2))
        return findings

    table = Table(show_lines=False)
    for header in ("file", "line:col", "kind", "message"):
        table.add_column(header)
    for report in reports:
        for diagnostic in report.diagnostics:
            start = diagnostic.location.start_point
            table.add_row(
                escape(report.path),
                f"{start.row + 1}:{start.column + 1}",
                str(diagnostic.kind),
                escape(diagnostic.message),
            )
    if findings:
        console.print(table)
    fixed = sum(r.fixes_applied for r in reports)
    if fixed:
        console.print(f"[green]Applied[/green] {fixed} fixes")
    console.print(f"({findings} problems in {len(reports)} files)")
    return findings


def check(
    paths: Annotated[list[Path] | None, typer.Argument(help="Files or directories to check.")] = None,
    code: Annotated[str | None, typer.Option(help="Source code string to check instead of files.")] = None,
    path: Annotated[
        str | None, typer.Option(help="Virtual path of --code, e.g. app/blog/[slug]/page.tsx.")
    ] = None,
    fix: Annotated[bool, typer.Option("--fix", help="Apply fixes in place (or print the fixed --code).")] = False,
    search_params: Annotated[
        bool | None, typer.Option("--search-params/--no-search-params", help="Check the searchParams type.")
    ] = None,
    async_request_api: Annotated[
        str | None, typer.Option(help="Expect Promise-wrapped params: auto, true or false.")
    ] = None,
    project_root: Annotated[Path | None, typer.Option(help="Directory holding package.json.")] = None,
    output_format: Annotated[OutputFormat, typer.Option("--format", help="Output format.")] = OutputFormat.table,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Check route parameter types of file-routed modules."""
    configure_logging(verbose)
    options = build_options(search_params, async_request_api, project_root)

    try:
        if code is not None:
            if path is None:
                console.print("[red]--path is required together with --code.[/red]")
                raise typer.Exit(code=2)
            if fix:
                fixed, _, _ = fix_source(code, path, options)
                typer.echo(fixed, nl=False)
                return
            reports = [FileReport(path=path, diagnostics=lint_source(code, path, options))]
        else:
            if not paths:
                console.print("[red]Provide at least one path or --code.[/red]")
                raise typer.Exit(code=2)
            reports = lint_paths(paths, options, fix=fix)
    except (ValueError, FileNotFoundError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=2) from None

    if render_reports(reports, output_format):
        raise typer.Exit(code=1)
