"""Validation of the return type of ``generateStaticParams``.

The generator enumerates concrete values for the file's own segment, so the
element literal must carry the current segment as a mandatory field while
ancestor segments stay optional. This is the inverse of the ``params`` rule.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from route_params.core.printer import build_canonical_literal, canonical_static_params_return, render
from route_params.core.shapes import (
    AliasTable,
    ArrayOf,
    ObjectLiteral,
    PromiseOf,
    Reference,
    TypeShape,
    literal_view,
    resolve_reference,
)
from route_params.core.validation.params import retype_fix
from route_params.messages import DiagnosticKind
from route_params.models import Diagnostic, Fix, RouteParameterSpec, SourceRange, ValidationContext


@dataclass(frozen=True)
class StaticParamsSignature:
    is_async: bool
    return_type: TypeShape | None
    location: SourceRange
    insertion_point: SourceRange


def validate_static_params(
    signature: StaticParamsSignature, context: ValidationContext, aliases: AliasTable
) -> list[Diagnostic]:
    specs = context.route_params
    return_text = render(canonical_static_params_return(specs, signature.is_async))
    return_type = signature.return_type

    if return_type is None:
        return [
            Diagnostic(
                kind=DiagnosticKind.MISSING_RETURN_TYPE,
                location=signature.location,
                fix=Fix(range=signature.insertion_point, replacement_text=f": {return_text} "),
            )
        ]
    if return_type.span is None:
        return []
    replace_all = Fix(range=return_type.span, replacement_text=return_text)

    array: TypeShape | None
    match signature.is_async, return_type:
        case True, PromiseOf(inner=inner):
            array = inner
        case False, PromiseOf():
            array = None
        case True, _:
            array = None
        case _:
            array = return_type

    if not isinstance(array, ArrayOf):
        return [Diagnostic(kind=DiagnosticKind.WRONG_RETURN_TYPE, location=signature.location, fix=replace_all)]

    element = array.inner
    if element.span is None:
        return []
    literal = literal_view(resolve_reference(element, aliases) if isinstance(element, Reference) else element)
    if literal is None:
        return [Diagnostic(kind=DiagnosticKind.IS_NO_LITERAL, location=element.span, fix=replace_all)]

    element_text = render(build_canonical_literal(specs, "static_params"))
    return check_element_fields(literal, element.span, specs, element_text)


def check_element_fields(
    literal: ObjectLiteral,
    replace_range: SourceRange,
    specs: Sequence[RouteParameterSpec],
    canonical_text: str,
) -> list[Diagnostic]:
    """Check one element literal; stops at the first stage that reports."""
    known = {spec.name: spec for spec in specs}
    rewrite = Fix(range=replace_range, replacement_text=canonical_text)

    unknown = next((f for f in literal.fields if f.name is None or f.name not in known), None)
    if unknown is not None:
        return [
            Diagnostic(
                kind=DiagnosticKind.UNKNOWN_PARAMETER,
                location=replace_range,
                data={"name": unknown.name or ""},
                fix=rewrite,
            )
        ]

    wrong_types: list[Diagnostic] = []
    for field in literal.fields:
        spec = known.get(field.name) if field.name is not None else None
        if spec is None:
            continue
        expected = "string[]" if spec.catch_all else "string"
        if field.classification != expected:
            wrong_types.append(
                Diagnostic(
                    kind=DiagnosticKind.WRONG_PARAMETER_TYPE,
                    location=field.member_range or replace_range,
                    data={"name": spec.name, "type": expected},
                    fix=retype_fix(field, expected),
                )
            )
    if wrong_types:
        return wrong_types

    current = next((spec for spec in specs if spec.is_current_segment), None)
    if current is not None:
        declared = literal.field(current.name)
        if declared is None or declared.optional:
            return [
                Diagnostic(
                    kind=DiagnosticKind.PARAM_NOT_OPTIONAL_ALLOWED,
                    location=replace_range,
                    data={"name": current.name},
                    fix=rewrite,
                )
            ]
    return []
