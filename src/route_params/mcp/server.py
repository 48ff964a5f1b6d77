"""FastMCP server exposing the route parameter checks."""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP

from route_params.config import LintOptions, get_options
from route_params.core.lint import diagnostic_to_dict, fix_source, lint_file, lint_source


def create_mcp_server(options: LintOptions | None = None) -> FastMCP:
    """Create a FastMCP server; ``options`` default to the environment."""

    resolved = options or get_options()
    mcp = FastMCP(
        "route-params",
        instructions="Check that file-routed Next.js modules declare params types matching their route path.",
    )

    @mcp.tool()
    def check_file(path: str) -> list[dict[str, Any]]:
        """Check a file on disk; the route is read from its path."""
        report = lint_file(path, resolved)
        return [diagnostic_to_dict(d) for d in report.diagnostics]

    @mcp.tool()
    def check_code(code: str, path: str) -> list[dict[str, Any]]:
        """Check a snippet as if it lived at ``path`` (e.g. app/blog/[slug]/page.tsx)."""
        return [diagnostic_to_dict(d) for d in lint_source(code, path, resolved)]

    @mcp.tool()
    def fix_code(code: str, path: str) -> str:
        """Return the snippet with every available fix applied."""
        fixed, _, _ = fix_source(code, path, resolved)
        return fixed

    return mcp
