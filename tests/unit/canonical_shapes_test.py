"""Canonical shapes validate clean, and field order never changes the findings."""

from collections import Counter
from itertools import permutations

import pytest

from route_params.core.printer import (
    build_canonical_literal,
    canonical_search_params,
    canonical_static_params_return,
    render,
)
from route_params.core.routes import get_file_info
from route_params.core.shapes import PromiseOf
from route_params.models import RouteParameterSpec

ROUTES = [
    pytest.param("src/app/about/page.tsx", (), id="static"),
    pytest.param("src/app/[id]/page.tsx", (RouteParameterSpec(name="id", is_current_segment=True),), id="single"),
    pytest.param(
        "src/app/docs/[...slug]/page.tsx",
        (RouteParameterSpec(name="slug", catch_all=True, is_current_segment=True),),
        id="catch-all",
    ),
    pytest.param(
        "src/app/movies/[id]/[reviewId]/page.tsx",
        (RouteParameterSpec(name="id"), RouteParameterSpec(name="reviewId", is_current_segment=True)),
        id="nested",
    ),
    pytest.param("src/app/[id]/edit/page.tsx", (RouteParameterSpec(name="id"),), id="static-leaf"),
    pytest.param(
        "src/app/[lang]/shop/[...parts]/page.tsx",
        (RouteParameterSpec(name="lang"), RouteParameterSpec(name="parts", catch_all=True, is_current_segment=True)),
        id="mixed",
    ),
]


def _page(params_type: str, search_params_type: str, return_type: str, is_async: bool) -> str:
    keyword = "async " if is_async else ""
    return (
        f"export default async function Page(props: {{ params: {params_type}; searchParams: {search_params_type} }}) {{\n"
        "  return null;\n"
        "}\n\n"
        f"export {keyword}function generateStaticParams(): {return_type} {{\n"
        "  return [];\n"
        "}\n"
    )


class TestCanonicalInput:
    @pytest.mark.parametrize(("path", "specs"), ROUTES)
    def test_route_specs(self, path: str, specs: tuple[RouteParameterSpec, ...]) -> None:
        assert get_file_info(path).params == specs

    @pytest.mark.parametrize("is_async", [False, True])
    @pytest.mark.parametrize(("path", "specs"), ROUTES)
    def test_promise_params_validate_clean(
        self, lint_code, fix_code, path: str, specs: tuple[RouteParameterSpec, ...], is_async: bool
    ) -> None:
        code = _page(
            render(PromiseOf(inner=build_canonical_literal(specs, "params"))),
            render(PromiseOf(inner=canonical_search_params())),
            render(canonical_static_params_return(specs, is_async)),
            is_async,
        )
        assert lint_code(code, path, wrap_in_promise=True) == []
        assert fix_code(code, path, wrap_in_promise=True) == code

    @pytest.mark.parametrize(("path", "specs"), ROUTES)
    def test_plain_params_validate_clean(self, lint_code, path: str, specs: tuple[RouteParameterSpec, ...]) -> None:
        code = _page(
            render(build_canonical_literal(specs, "params")),
            render(canonical_search_params()),
            render(canonical_static_params_return(specs, False)),
            False,
        )
        assert lint_code(code, path, wrap_in_promise=False) == []
        assert lint_code(code, path, wrap_in_promise=None) == []


def _kinds(diagnostics: list) -> Counter:
    return Counter(str(d.kind) for d in diagnostics)


class TestFieldOrder:
    def test_params_members(self, lint_code) -> None:
        members = ["id: number", "extra: string", "slug: string", "[k: string]: string"]
        path = "src/app/[id]/[...slug]/page.tsx"
        expected = None
        for order in permutations(members):
            code = f"export default function Page(props: {{ params: Promise<{{ {'; '.join(order)} }}> }}) {{}}"
            kinds = _kinds(lint_code(code, path))
            expected = expected or kinds
            assert kinds == expected
        assert expected == Counter(
            {"UnknownParameter": 1, "WrongParameterType": 2, "IsNoLiteral": 1},
        )

    def test_wrong_types_are_independent_of_order(self, lint_code) -> None:
        members = ["id: number", "slug: string", "lang: string"]
        path = "src/app/[lang]/[id]/[...slug]/page.tsx"
        reported = set()
        for order in permutations(members):
            code = f"export default function Page(props: {{ params: Promise<{{ {'; '.join(order)} }}> }}) {{}}"
            reported.add(frozenset((d.data["name"], d.data["type"]) for d in lint_code(code, path)))
        assert reported == {frozenset({("id", "string"), ("slug", "string[]")})}

    def test_static_params_element_members(self, lint_code) -> None:
        members = ["id?: string", "lang: number", "extra: string"]
        path = "src/app/[lang]/[id]/page.tsx"
        expected = None
        for order in permutations(members):
            code = f"export function generateStaticParams(): {{ {'; '.join(order)} }}[] {{ return []; }}"
            kinds = _kinds(lint_code(code, path))
            expected = expected or kinds
            assert kinds == expected
        assert expected == Counter({"UnknownParameter": 1})

    def test_top_level_props(self, lint_code) -> None:
        members = ["params: Promise<{ id: number }>", "searchParams: string", "children: string"]
        path = "src/app/[id]/page.tsx"
        expected = None
        for order in permutations(members):
            code = f"export default function Page(props: {{ {'; '.join(order)} }}) {{}}"
            kinds = _kinds(lint_code(code, path))
            expected = expected or kinds
            assert kinds == expected
        assert expected == Counter({"ForbiddenProperty": 1, "WrongSearchParamsType": 1, "WrongParameterType": 1})
