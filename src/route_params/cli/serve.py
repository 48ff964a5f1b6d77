from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from route_params.cli.check import build_options

serve_app = typer.Typer(help="Start servers.")


@serve_app.command("mcp")
def mcp(
    transport: str = "stdio",
    search_params: Annotated[
        bool | None, typer.Option("--search-params/--no-search-params", help="Check the searchParams type.")
    ] = None,
    async_request_api: Annotated[
        str | None, typer.Option(help="Expect Promise-wrapped params: auto, true or false.")
    ] = None,
    project_root: Annotated[Path | None, typer.Option(help="Directory holding package.json.")] = None,
) -> None:
    """Start the MCP server."""
    from route_params.mcp.server import create_mcp_server

    server = create_mcp_server(build_options(search_params, async_request_api, project_root))
    # stdout carries the protocol on stdio
    Console(stderr=True).print(f"[green]Starting MCP server (transport: {transport})[/green]")
    server.run(transport=transport)  # type: ignore[arg-type]
