from route_params.core.printer import canonical_search_params, render
from route_params.core.routes import SEARCH_PARAMS_PROP_NAME
from route_params.core.shapes import (
    AliasTable,
    ArrayOf,
    FieldType,
    IndexSignatureOf,
    ObjectLiteral,
    Primitive,
    PromiseOf,
    RecordOf,
    TypeShape,
    UnionOf,
    resolve_reference,
)
from route_params.messages import DiagnosticKind
from route_params.models import Diagnostic, Fix, SourceRange, ValidationContext

_EXPECTED = "{ [key: string]: string | string[] | undefined }"
_REQUIRED_ALTERNATIVES = frozenset({"string", "string[]", "undefined"})


def validate_search_params(field: FieldType, context: ValidationContext, aliases: AliasTable) -> list[Diagnostic]:
    """Validate the declared type of the ``searchParams`` prop.

    Skipped when strict search-params checking is off or the file role does not
    accept ``searchParams`` at all (that case is a forbidden property).
    """
    if not context.search_params_strict or SEARCH_PARAMS_PROP_NAME not in context.allowed_top_level_props:
        return []
    shape = field.shape
    if shape is None or shape.span is None or field.member_range is None:
        return []
    canonical = canonical_search_params()

    target: TypeShape
    match context.wrap_in_promise, shape:
        case True, PromiseOf(inner=inner):
            target = inner
        case True, _:
            return [_wrong_search_params(field.member_range, shape.span, render(PromiseOf(inner=canonical)), True)]
        case False, PromiseOf():
            return [_wrong_search_params(field.member_range, shape.span, render(canonical), False)]
        case None, PromiseOf(inner=inner):
            target = inner
        case _:
            target = shape
    if target.span is None:
        return []

    if is_canonical_search_params(resolve_reference(target, aliases)):
        return []
    return [
        _wrong_search_params(field.member_range, target.span, render(canonical), isinstance(shape, PromiseOf)),
    ]


def is_canonical_search_params(shape: TypeShape) -> bool:
    match shape:
        case ObjectLiteral(fields=(FieldType(shape=IndexSignatureOf(key=Primitive(kind="string"), value=value)),)):
            return _is_search_params_union(value)
        case RecordOf(key=Primitive(kind="string"), value=value):
            return _is_search_params_union(value)
        case _:
            return False


def _is_search_params_union(shape: TypeShape) -> bool:
    if not isinstance(shape, UnionOf):
        return False
    seen: set[str] = set()
    for member in shape.members:
        match member:
            case Primitive(kind="string"):
                seen.add("string")
            case ArrayOf(inner=Primitive(kind="string")):
                seen.add("string[]")
            case Primitive(keyword="undefined"):
                seen.add("undefined")
            case _:
                return False
    return seen == _REQUIRED_ALTERNATIVES


def _wrong_search_params(location: SourceRange, replace: SourceRange, text: str, wrapped: bool) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.WRONG_SEARCH_PARAMS_TYPE,
        location=location,
        data={"type": f"Promise<{_EXPECTED}>" if wrapped else _EXPECTED},
        fix=Fix(range=replace, replacement_text=text),
    )
