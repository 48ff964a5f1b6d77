"""Tests for lint orchestration: fixing, file discovery and reports."""

from pathlib import Path

import pytest

from route_params.config import LintOptions
from route_params.core.lint import (
    apply_fixes,
    diagnostic_to_dict,
    fix_source,
    iter_route_files,
    lint_file,
    lint_paths,
    lint_source,
)
from route_params.messages import DiagnosticKind
from route_params.models import Diagnostic, Fix, Position, SourceRange

WRONG_PAGE = "export default function Page(props: { params: Promise<{ id: number }> }) { return null; }\n"
FIXED_PAGE = "export default function Page(props: { params: Promise<{ id: string }> }) { return null; }\n"


def _range(start: int, end: int) -> SourceRange:
    return SourceRange(
        start_byte=start,
        end_byte=end,
        start_point=Position(row=0, column=start),
        end_point=Position(row=0, column=end),
    )


def _diagnostic(start: int, end: int, text: str) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.WRONG_PARAMETER_TYPE,
        location=_range(start, end),
        fix=Fix(range=_range(start, end), replacement_text=text),
    )


def _write(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestApplyFixes:
    def test_applies_in_source_order(self) -> None:
        fixed, applied = apply_fixes("aaa bbb ccc", [_diagnostic(8, 11, "z"), _diagnostic(0, 3, "x")])
        assert fixed == "x bbb z"
        assert applied == 2

    def test_skips_overlapping_fix(self) -> None:
        fixed, applied = apply_fixes("abcdef", [_diagnostic(0, 4, "X"), _diagnostic(2, 6, "Y")])
        assert fixed == "Xef"
        assert applied == 1

    def test_insertion(self) -> None:
        fixed, applied = apply_fixes("ab", [_diagnostic(1, 1, "-")])
        assert fixed == "a-b"
        assert applied == 1

    def test_diagnostics_without_fix(self) -> None:
        diagnostic = Diagnostic(kind=DiagnosticKind.IS_NO_LITERAL, location=_range(0, 1))
        assert apply_fixes("abc", [diagnostic]) == ("abc", 0)

    def test_offsets_are_bytes(self) -> None:
        source = "// ü\nx"
        offset = len("// ü\n".encode("utf-8"))
        fixed, _ = apply_fixes(source, [_diagnostic(offset, offset + 1, "y")])
        assert fixed == "// ü\ny"


class TestLintSource:
    def test_diagnostics_are_sorted(self) -> None:
        code = (
            "export function generateStaticParams() { return []; }\n"
            "export default function Page(props: { params: Promise<{ id: number }> }) { return null; }\n"
        )
        diagnostics = lint_source(code, "src/app/[id]/page.tsx", LintOptions(wrap_in_promise=True))
        assert [d.kind for d in diagnostics] == [DiagnosticKind.MISSING_RETURN_TYPE, DiagnosticKind.WRONG_PARAMETER_TYPE]
        starts = [d.location.start_byte for d in diagnostics]
        assert starts == sorted(starts)

    def test_unsupported_extension(self) -> None:
        with pytest.raises(ValueError, match="Unsupported file extension"):
            lint_source("export default function Page() {}", "src/app/page.jsx", LintOptions(wrap_in_promise=True))

    def test_version_detected_from_manifest(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text('{"dependencies": {"next": "^13.4.0"}}')
        code = "export default function Page(props: { params: Promise<{ id: string }> }) { return null; }"
        diagnostics = lint_source(code, "src/app/[id]/page.tsx", LintOptions(project_root=tmp_path))
        assert [d.kind for d in diagnostics] == [DiagnosticKind.IS_NO_LITERAL]

    def test_fixes_are_idempotent(self) -> None:
        options = LintOptions(wrap_in_promise=True)
        fixed, remaining, applied = fix_source(WRONG_PAGE, "src/app/[id]/page.tsx", options)
        assert fixed == FIXED_PAGE
        assert remaining == []
        assert applied == 1
        assert fix_source(fixed, "src/app/[id]/page.tsx", options) == (fixed, [], 0)


class TestIterRouteFiles:
    def test_walks_directories(self, tmp_path: Path) -> None:
        _write(tmp_path, "app/[id]/page.tsx", "")
        _write(tmp_path, "app/[id]/route.ts", "")
        _write(tmp_path, "app/types.d.ts", "")
        _write(tmp_path, "app/readme.md", "")
        _write(tmp_path, "node_modules/next/app/page.tsx", "")
        _write(tmp_path, ".next/app/page.tsx", "")
        found = {p.relative_to(tmp_path).as_posix() for p in iter_route_files([tmp_path])}
        assert found == {"app/[id]/page.tsx", "app/[id]/route.ts"}

    def test_explicit_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "page.tsx", "")
        assert list(iter_route_files([path])) == [path]

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            list(iter_route_files([tmp_path / "missing"]))


class TestLintFiles:
    def test_lint_file_report(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "app/[id]/page.tsx", WRONG_PAGE)
        report = lint_file(path, LintOptions(wrap_in_promise=True))
        assert report.path == str(path)
        assert [d.kind for d in report.diagnostics] == [DiagnosticKind.WRONG_PARAMETER_TYPE]
        assert report.fixes_applied == 0
        assert path.read_text() == WRONG_PAGE

    def test_lint_file_fix_writes_back(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "app/[id]/page.tsx", WRONG_PAGE)
        report = lint_file(path, LintOptions(wrap_in_promise=True), fix=True)
        assert report.diagnostics == []
        assert report.fixes_applied == 1
        assert path.read_text() == FIXED_PAGE

    def test_lint_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="File not found"):
            lint_file(tmp_path / "app" / "page.tsx")

    def test_lint_paths_skips_non_routed_files(self, tmp_path: Path) -> None:
        _write(tmp_path, "app/[id]/page.tsx", WRONG_PAGE)
        _write(tmp_path, "app/[id]/helpers.ts", WRONG_PAGE)
        _write(tmp_path, "components/page.tsx", WRONG_PAGE)
        reports = lint_paths([tmp_path], LintOptions(wrap_in_promise=True, project_root=tmp_path))
        assert [Path(r.path).relative_to(tmp_path).as_posix() for r in reports] == ["app/[id]/page.tsx"]

    def test_lint_paths_resolves_version_once(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text('{"dependencies": {"next": "15.1.0"}}')
        _write(tmp_path, "app/[id]/page.tsx", "export default function Page(props: { params: { id: string } }) {}")
        reports = lint_paths([tmp_path / "app"], LintOptions(project_root=tmp_path))
        assert [d.kind for d in reports[0].diagnostics] == [DiagnosticKind.MUST_BE_WRAPPED_IN_PROMISE]


def test_diagnostic_to_dict() -> None:
    diagnostics = lint_source(WRONG_PAGE, "src/app/[id]/page.tsx", LintOptions(wrap_in_promise=True))
    payload = diagnostic_to_dict(diagnostics[0])
    assert payload["kind"] == "WrongParameterType"
    assert payload["message"] == "id must be of type string"
    assert payload["line"] == 1
    assert payload["column"] == WRONG_PAGE.index("id: number") + 1
    assert payload["data"] == {"name": "id", "type": "string"}
    assert payload["fix"] == "string"
