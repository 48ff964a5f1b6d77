"""Structural type shapes extracted from TypeScript type annotations.

A ``TypeShape`` is a closed set of frozen dataclasses. Shapes extracted from
source carry the ``SourceRange`` of the node they came from; shapes built by
``route_params.core.printer`` have no span and are only ever rendered.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, TypeAlias

from tree_sitter import Node

from route_params.models import SourceRange

Classification = Literal["string", "string[]", "other"]
PrimitiveKind = Literal["string", "other"]

_SEPARATORS = frozenset({",", ";"})


@dataclass(frozen=True, slots=True)
class FieldType:
    """One member of an object literal.

    ``name`` is ``None`` for members without a plain identifier key (index
    signatures, method signatures, quoted or computed keys).
    """

    name: str | None
    classification: Classification
    optional: bool
    source_range: SourceRange | None
    shape: "TypeShape | None"
    member_range: SourceRange | None = None
    removal_range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class ObjectLiteral:
    fields: tuple[FieldType, ...]
    span: SourceRange | None = None

    def field(self, name: str) -> FieldType | None:
        return next((f for f in self.fields if f.name == name), None)


@dataclass(frozen=True, slots=True)
class Reference:
    name: str
    span: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class PromiseOf:
    inner: "TypeShape"
    span: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class ArrayOf:
    inner: "TypeShape"
    span: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class UnionOf:
    members: tuple["TypeShape", ...]
    span: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class RecordOf:
    key: "TypeShape"
    value: "TypeShape"
    span: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class IndexSignatureOf:
    key: "TypeShape"
    value: "TypeShape"
    key_name: str = "key"
    span: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class Primitive:
    kind: PrimitiveKind
    keyword: str
    span: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class Opaque:
    span: SourceRange | None = None


TypeShape: TypeAlias = (
    ObjectLiteral | Reference | PromiseOf | ArrayOf | UnionOf | RecordOf | IndexSignatureOf | Primitive | Opaque
)

AliasTable: TypeAlias = Mapping[str, TypeShape]

STRING = Primitive(kind="string", keyword="string")
UNDEFINED = Primitive(kind="other", keyword="undefined")
NEVER = Primitive(kind="other", keyword="never")


# ---------------------------------------------------------------------------
# Classification helpers
# ---------------------------------------------------------------------------


def classify(shape: TypeShape | None) -> Classification:
    match shape:
        case Primitive(kind="string"):
            return "string"
        case ArrayOf(inner=Primitive(kind="string")):
            return "string[]"
        case _:
            return "other"


def literal_view(shape: TypeShape) -> ObjectLiteral | None:
    """Return ``shape`` as an object literal, treating ``Record<string, never>`` as ``{}``."""
    match shape:
        case ObjectLiteral():
            return shape
        case RecordOf(key=Primitive(kind="string"), value=Primitive(keyword="never")):
            return ObjectLiteral(fields=(), span=shape.span)
        case _:
            return None


def resolve_reference(shape: TypeShape, aliases: AliasTable) -> TypeShape:
    """Follow a ``Reference`` exactly one hop through ``aliases``.

    Anything that does not land on an object literal becomes ``Opaque``;
    a reference to another reference is not followed further.
    """
    match shape:
        case Reference(name=name):
            target = aliases.get(name)
            if isinstance(target, ObjectLiteral):
                return target
            return Opaque(span=shape.span)
        case _:
            return shape


# ---------------------------------------------------------------------------
# Extraction from tree-sitter nodes
# ---------------------------------------------------------------------------


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8")


def _named_children(node: Node) -> list[Node]:
    return [child for child in node.named_children if child.type != "comment"]


def _type_arguments(node: Node) -> list[Node]:
    arguments = node.child_by_field_name("type_arguments")
    return _named_children(arguments) if arguments is not None else []


def annotation_type(annotation: Node | None) -> Node | None:
    """Return the type node inside a ``type_annotation`` (``: T``)."""
    if annotation is None or annotation.type != "type_annotation":
        return None
    children = _named_children(annotation)
    return children[0] if children else None


def extract_shape(node: Node, source: bytes) -> TypeShape:
    span = SourceRange.from_node(node)
    match node.type:
        case "type_annotation" | "parenthesized_type":
            children = _named_children(node)
            return extract_shape(children[0], source) if children else Opaque(span=span)
        case "object_type":
            return ObjectLiteral(fields=tuple(_extract_members(node, source)), span=span)
        case "predefined_type":
            keyword = _text(node, source)
            return Primitive(kind="string" if keyword == "string" else "other", keyword=keyword, span=span)
        case "literal_type":
            return Primitive(kind="other", keyword=_text(node, source), span=span)
        case "type_identifier" | "nested_type_identifier":
            name = _text(node, source)
            if name == "undefined":
                return Primitive(kind="other", keyword=name, span=span)
            return Reference(name=name, span=span)
        case "generic_type":
            return _extract_generic(node, source, span)
        case "array_type":
            children = _named_children(node)
            return ArrayOf(inner=extract_shape(children[0], source), span=span) if children else Opaque(span=span)
        case "union_type":
            members: list[TypeShape] = []
            for child in _named_children(node):
                member = extract_shape(child, source)
                if isinstance(member, UnionOf):
                    members.extend(member.members)
                else:
                    members.append(member)
            return UnionOf(members=tuple(members), span=span)
        case _:
            return Opaque(span=span)


def _extract_generic(node: Node, source: bytes, span: SourceRange) -> TypeShape:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return Opaque(span=span)
    name = _text(name_node, source)
    arguments = _type_arguments(node)
    match name, len(arguments):
        case "Promise", 1:
            return PromiseOf(inner=extract_shape(arguments[0], source), span=span)
        case "Array", 1:
            return ArrayOf(inner=extract_shape(arguments[0], source), span=span)
        case "Record", 2:
            key, value = (extract_shape(argument, source) for argument in arguments)
            return RecordOf(key=key, value=value, span=span)
        case _:
            return Reference(name=name, span=span)


def _removal_range(member: Node) -> SourceRange:
    member_range = SourceRange.from_node(member)
    sibling = member.next_sibling
    if sibling is not None and sibling.type in _SEPARATORS:
        return member_range.extend_to(SourceRange.from_node(sibling))
    return member_range


def _extract_members(node: Node, source: bytes) -> list[FieldType]:
    fields: list[FieldType] = []
    for member in _named_children(node):
        member_range = SourceRange.from_node(member)
        removal = _removal_range(member)
        match member.type:
            case "property_signature":
                name_node = member.child_by_field_name("name")
                plain = name_node is not None and name_node.type == "property_identifier"
                name = _text(name_node, source) if plain and name_node is not None else None
                optional = any(child.type == "?" for child in member.children)
                type_node = annotation_type(next((c for c in member.children if c.type == "type_annotation"), None))
                shape = extract_shape(type_node, source) if type_node is not None else None
                fields.append(
                    FieldType(
                        name=name,
                        classification=classify(shape),
                        optional=optional,
                        source_range=SourceRange.from_node(type_node) if type_node is not None else None,
                        shape=shape,
                        member_range=member_range,
                        removal_range=removal,
                    )
                )
            case "index_signature":
                fields.append(
                    FieldType(
                        name=None,
                        classification="other",
                        optional=False,
                        source_range=None,
                        shape=_extract_index_signature(member, source),
                        member_range=member_range,
                        removal_range=removal,
                    )
                )
            case _:
                fields.append(
                    FieldType(
                        name=None,
                        classification="other",
                        optional=False,
                        source_range=None,
                        shape=None,
                        member_range=member_range,
                        removal_range=removal,
                    )
                )
    return fields


def _extract_index_signature(member: Node, source: bytes) -> TypeShape:
    span = SourceRange.from_node(member)
    key_node = member.child_by_field_name("index_type")
    name_node = member.child_by_field_name("name")
    value_node = annotation_type(member.child_by_field_name("type"))
    if key_node is None or value_node is None:
        return Opaque(span=span)
    return IndexSignatureOf(
        key=extract_shape(key_node, source),
        value=extract_shape(value_node, source),
        key_name=_text(name_node, source) if name_node is not None else "key",
        span=span,
    )
