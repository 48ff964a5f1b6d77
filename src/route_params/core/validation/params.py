import logging
from collections.abc import Sequence

from route_params.core.printer import build_canonical_literal, render
from route_params.core.routes import PARAMS_PROP_NAME
from route_params.core.shapes import (
    AliasTable,
    FieldType,
    ObjectLiteral,
    PromiseOf,
    Reference,
    TypeShape,
    literal_view,
    resolve_reference,
)
from route_params.messages import DiagnosticKind
from route_params.models import (
    Diagnostic,
    Fix,
    RouteParameterSpec,
    SourceRange,
    ValidationContext,
)

logger = logging.getLogger(__name__)


def check_forbidden_properties(props: ObjectLiteral, context: ValidationContext) -> list[Diagnostic]:
    """Report every named top-level prop the file role does not accept."""
    diagnostics: list[Diagnostic] = []
    for field in props.fields:
        if field.name is None or field.name in context.allowed_top_level_props:
            continue
        # printer-built fields carry no ranges
        if field.member_range is None or field.removal_range is None:
            continue
        diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.FORBIDDEN_PROPERTY,
                location=field.member_range,
                data={"key": field.name},
                fix=Fix(range=field.removal_range, replacement_text=""),
            )
        )
    return diagnostics


def validate_params_field(field: FieldType, context: ValidationContext, aliases: AliasTable) -> list[Diagnostic]:
    """Validate the declared type of the ``params`` prop against the route path."""
    shape = field.shape
    if shape is None or shape.span is None:
        return []
    canonical = build_canonical_literal(context.route_params, "params")

    target: TypeShape
    match context.wrap_in_promise, shape:
        case True, PromiseOf(inner=inner):
            target = inner
        case True, _:
            return [
                Diagnostic(
                    kind=DiagnosticKind.MUST_BE_WRAPPED_IN_PROMISE,
                    location=shape.span,
                    data={"name": PARAMS_PROP_NAME},
                    fix=Fix(range=shape.span, replacement_text=render(PromiseOf(inner=canonical))),
                )
            ]
        case None, PromiseOf(inner=inner):
            target = inner
        case _:
            target = shape
    if target.span is None:
        return []

    literal: ObjectLiteral | None
    if isinstance(target, Reference):
        literal = literal_view(resolve_reference(target, aliases))
        if literal is None:
            logger.debug("Skipping params reference %s that does not resolve to a literal", target.name)
            return []
    else:
        literal = literal_view(target)
        if literal is None:
            return [Diagnostic(kind=DiagnosticKind.IS_NO_LITERAL, location=target.span)]

    return check_param_fields(literal, target.span, context.route_params, render(canonical))


def check_param_fields(
    literal: ObjectLiteral,
    replace_range: SourceRange,
    specs: Sequence[RouteParameterSpec],
    canonical_text: str,
) -> list[Diagnostic]:
    """Compare the members of ``literal`` with ``specs``.

    Only the first unknown name is reported; its fix rewrites the whole literal
    at ``replace_range`` and therefore replaces every wrong-type fix.
    """
    diagnostics: list[Diagnostic] = []
    known = {spec.name: spec for spec in specs}

    unknown = next((f for f in literal.fields if f.name is None or f.name not in known), None)
    if unknown is not None:
        diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.UNKNOWN_PARAMETER,
                location=replace_range,
                data={"name": unknown.name or ""},
                fix=Fix(range=replace_range, replacement_text=canonical_text),
            )
        )

    for field in literal.fields:
        spec = known.get(field.name) if field.name is not None else None
        if spec is None or isinstance(field.shape, Reference):
            continue
        expected = "string[]" if spec.catch_all else "string"
        if field.classification == expected:
            continue
        diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.WRONG_PARAMETER_TYPE,
                location=field.member_range or replace_range,
                data={"name": spec.name, "type": expected},
                fix=None if unknown is not None else retype_fix(field, expected),
            )
        )

    if any(f.name is None for f in literal.fields):
        diagnostics.append(Diagnostic(kind=DiagnosticKind.IS_NO_LITERAL, location=literal.span or replace_range))
    return diagnostics


def retype_fix(field: FieldType, expected: str) -> Fix | None:
    if field.source_range is not None:
        return Fix(range=field.source_range, replacement_text=expected)
    if field.member_range is not None:
        return Fix(range=field.member_range.collapse_to_end(), replacement_text=f": {expected}")
    return None
