"""Canonical shapes and their TypeScript rendering, used verbatim as fix text."""

from collections.abc import Sequence
from typing import Literal, assert_never

from route_params.core.shapes import (
    NEVER,
    STRING,
    UNDEFINED,
    ArrayOf,
    FieldType,
    IndexSignatureOf,
    ObjectLiteral,
    Opaque,
    Primitive,
    PromiseOf,
    RecordOf,
    Reference,
    TypeShape,
    UnionOf,
)
from route_params.models import RouteParameterSpec

CanonicalRole = Literal["params", "static_params"]

_INDENT = "    "

STRING_ARRAY = ArrayOf(inner=STRING)
SEARCH_PARAMS_VALUE = UnionOf(members=(STRING, STRING_ARRAY, UNDEFINED))


def build_canonical_literal(specs: Sequence[RouteParameterSpec], role: CanonicalRole) -> ObjectLiteral:
    """Build the one literal shape that validates clean for ``specs``.

    With role ``params`` every field is mandatory. With role ``static_params``
    only the current segment is mandatory and every ancestor is optional.
    """
    fields = []
    for spec in specs:
        shape = STRING_ARRAY if spec.catch_all else STRING
        fields.append(
            FieldType(
                name=spec.name,
                classification="string[]" if spec.catch_all else "string",
                optional=role == "static_params" and not spec.is_current_segment,
                source_range=None,
                shape=shape,
            )
        )
    return ObjectLiteral(fields=tuple(fields))


def canonical_search_params() -> ObjectLiteral:
    index = IndexSignatureOf(key=STRING, value=SEARCH_PARAMS_VALUE)
    return ObjectLiteral(
        fields=(FieldType(name=None, classification="other", optional=False, source_range=None, shape=index),)
    )


def canonical_static_params_return(specs: Sequence[RouteParameterSpec], is_async: bool) -> TypeShape:
    returned: TypeShape = ArrayOf(inner=build_canonical_literal(specs, "static_params"))
    return PromiseOf(inner=returned) if is_async else returned


def render(shape: TypeShape) -> str:
    match shape:
        case ObjectLiteral(fields=()):
            return render(RecordOf(key=STRING, value=NEVER))
        case ObjectLiteral(fields=fields):
            lines = [f"{_INDENT}{_render_member(f)};" for f in fields]
            return "{\n" + "\n".join(lines) + "\n}"
        case Reference(name=name):
            return name
        case PromiseOf(inner=inner):
            return f"Promise<{render(inner)}>"
        case ArrayOf(inner=UnionOf() as inner):
            return f"({render(inner)})[]"
        case ArrayOf(inner=inner):
            return f"{render(inner)}[]"
        case UnionOf(members=members):
            return " | ".join(render(m) for m in members)
        case RecordOf(key=key, value=value):
            return f"Record<{render(key)}, {render(value)}>"
        case IndexSignatureOf():
            return render(ObjectLiteral(fields=(FieldType(None, "other", False, None, shape),)))
        case Primitive(keyword=keyword):
            return keyword
        case Opaque():
            raise ValueError("Opaque shapes have no canonical rendering")
        case _:
            assert_never(shape)


def _render_member(field: FieldType) -> str:
    match field.shape:
        case IndexSignatureOf(key=key, value=value, key_name=key_name):
            return f"[{key_name}: {render(key)}]: {render(value)}"
        case None:
            raise ValueError(f"Field {field.name!r} has no shape to render")
        case shape:
            marker = "?" if field.optional else ""
            return f"{field.name}{marker}: {render(shape)}"
