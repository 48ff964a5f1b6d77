"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from tree_sitter import Language, Parser, Query
from tree_sitter_language_pack import get_language, get_parser

from route_params.config import LintOptions
from route_params.core.lint import fix_source, lint_source
from route_params.models import Diagnostic

_REPO_ROOT = Path(__file__).parent.parent

LintFn = Callable[..., list[Diagnostic]]
FixFn = Callable[..., str]


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Linting helpers
# ---------------------------------------------------------------------------


def _options(tmp_path: Path, wrap_in_promise: bool | None, search_params: bool) -> LintOptions:
    # tmp_path holds no package.json, so an unset flag stays undecided
    return LintOptions(search_params=search_params, wrap_in_promise=wrap_in_promise, project_root=tmp_path)


@pytest.fixture
def lint_code(tmp_path: Path) -> LintFn:
    """Lint a snippet as if it lived at a virtual path; Promise-wrapped params by default."""

    def _lint(code: str, path: str, wrap_in_promise: bool | None = True, search_params: bool = True) -> list[Diagnostic]:
        return lint_source(code, path, _options(tmp_path, wrap_in_promise, search_params))

    return _lint


@pytest.fixture
def fix_code(tmp_path: Path) -> FixFn:
    """Return a snippet with every fix applied."""

    def _fix(code: str, path: str, wrap_in_promise: bool | None = True, search_params: bool = True) -> str:
        fixed, _, _ = fix_source(code, path, _options(tmp_path, wrap_in_promise, search_params))
        return fixed

    return _fix


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def queries_dir() -> Path:
    """Return the path to the queries directory."""
    return _REPO_ROOT / "src" / "route_params" / "queries"


@pytest.fixture
def typescript_parser() -> Parser:
    """Return a tree-sitter parser for TypeScript."""
    return get_parser("typescript")


@pytest.fixture
def tsx_parser() -> Parser:
    """Return a tree-sitter parser for TSX."""
    return get_parser("tsx")


@pytest.fixture
def tsx_language() -> Language:
    """Return the tree-sitter TSX language."""
    return get_language("tsx")


@pytest.fixture
def tsx_sites_query(queries_dir: Path, tsx_language: Any) -> Query:
    """Load the declaration-site query for TSX."""
    query_text = (queries_dir / "typescript_sites.scm").read_text()
    return Query(tsx_language, query_text)
