import logging
import os
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import Any

from route_params.config import LintOptions
from route_params.core.ast import discover_sites
from route_params.core.languages import detect_language_from_path, is_supported_file
from route_params.core.routes import FileInfo, get_file_info
from route_params.core.validation.props import validate_props
from route_params.core.validation.static_params import validate_static_params
from route_params.models import Diagnostic, FileReport, FileRole, ValidationContext

logger = logging.getLogger(__name__)

MAX_FIX_PASSES = 10

_SKIPPED_DIRECTORIES = frozenset({"node_modules"})


def diagnostic_to_dict(diagnostic: Diagnostic) -> dict[str, Any]:
    location = diagnostic.location
    return {
        "kind": str(diagnostic.kind),
        "message": diagnostic.message,
        "line": location.start_point.row + 1,
        "column": location.start_point.column + 1,
        "start_byte": location.start_byte,
        "end_byte": location.end_byte,
        "data": dict(diagnostic.data),
        "fix": diagnostic.fix.replacement_text if diagnostic.fix is not None else None,
    }


def build_context(
    info: FileInfo, role: FileRole, options: LintOptions, wrap_in_promise: bool | None
) -> ValidationContext:
    return ValidationContext(
        route_params=info.params,
        allowed_top_level_props=info.allowed_props,
        search_params_strict=options.search_params,
        wrap_in_promise=wrap_in_promise,
        file_role=role,
    )


def lint_source(source: str, path: str | Path, options: LintOptions | None = None) -> list[Diagnostic]:
    """Lint ``source`` as if it lived at ``path``; non-routed paths yield nothing."""
    options = options or LintOptions()
    info = get_file_info(path)
    role = info.role
    if role is None or not info.in_routing_root:
        logger.debug("Skipping %s: not a routed file", info.path)
        return []
    language = detect_language_from_path(Path(path))
    context = build_context(info, role, options, options.resolve_wrap_in_promise())

    sites = discover_sites(source.encode("utf-8"), language, context.file_role)
    diagnostics: list[Diagnostic] = []
    for site in sites.props:
        logger.debug("Validating props of %s in %s", site.handler, info.path)
        diagnostics.extend(validate_props(site.props, context, sites.aliases))
    if sites.static_params is not None:
        diagnostics.extend(validate_static_params(sites.static_params, context, sites.aliases))
    return sorted(diagnostics, key=lambda d: (d.location.start_byte, d.location.end_byte))


def apply_fixes(source: str, diagnostics: Sequence[Diagnostic]) -> tuple[str, int]:
    """Apply the fixes of ``diagnostics`` in one pass.

    Fixes are applied in source order; a fix overlapping an already applied
    one is skipped and left for a later pass.
    """
    fixes = sorted(
        (d.fix for d in diagnostics if d.fix is not None),
        key=lambda f: (f.range.start_byte, f.range.end_byte),
    )
    data = source.encode("utf-8")
    parts: list[bytes] = []
    cursor = 0
    applied = 0
    for fix in fixes:
        if fix.range.start_byte < cursor:
            continue
        parts.append(data[cursor : fix.range.start_byte])
        parts.append(fix.replacement_text.encode("utf-8"))
        cursor = fix.range.end_byte
        applied += 1
    parts.append(data[cursor:])
    return b"".join(parts).decode("utf-8"), applied


def fix_source(source: str, path: str | Path, options: LintOptions | None = None) -> tuple[str, list[Diagnostic], int]:
    """Fix ``source`` until it is stable; returns the text, the remaining diagnostics and the fix count."""
    total = 0
    diagnostics = lint_source(source, path, options)
    for _ in range(MAX_FIX_PASSES):
        source, applied = apply_fixes(source, diagnostics)
        if applied == 0:
            break
        total += applied
        diagnostics = lint_source(source, path, options)
    return source, diagnostics, total


def lint_file(path: str | Path, options: LintOptions | None = None, fix: bool = False) -> FileReport:
    file_path = Path(path)
    try:
        source = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None

    if not fix:
        return FileReport(path=str(file_path), diagnostics=lint_source(source, file_path, options))

    fixed, diagnostics, applied = fix_source(source, file_path, options)
    if applied:
        file_path.write_text(fixed, encoding="utf-8")
        logger.info("Applied %d fixes to %s", applied, file_path)
    return FileReport(path=str(file_path), diagnostics=diagnostics, fixes_applied=applied)


def iter_route_files(paths: Iterable[str | Path]) -> Iterator[Path]:
    """Expand ``paths`` into TypeScript files, skipping dependencies and hidden folders."""
    for raw in paths:
        path = Path(raw)
        if path.is_file():
            yield path
            continue
        if not path.is_dir():
            raise FileNotFoundError(f"Path not found: {raw}")
        for dirpath, dirnames, filenames in os.walk(path):
            dirnames[:] = sorted(d for d in dirnames if d not in _SKIPPED_DIRECTORIES and not d.startswith("."))
            for filename in sorted(filenames):
                candidate = Path(dirpath) / filename
                if is_supported_file(candidate):
                    yield candidate


def lint_paths(paths: Iterable[str | Path], options: LintOptions | None = None, fix: bool = False) -> list[FileReport]:
    options = options or LintOptions()
    wrap = options.resolve_wrap_in_promise()
    if wrap is not None:
        options = options.model_copy(update={"wrap_in_promise": wrap})

    reports = []
    for file_path in iter_route_files(paths):
        if not get_file_info(file_path).is_routable:
            continue
        reports.append(lint_file(file_path, options, fix=fix))
    logger.info("Checked %d files", len(reports))
    return reports
