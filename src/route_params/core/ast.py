"""Discovery of the declarations a file-routed module exposes.

A module is parsed once; the top-level type aliases, the handler props types
and the ``generateStaticParams`` signature are collected into a
``ModuleSites`` value that the validators consume.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import cast

from tree_sitter import Node, Query, QueryCursor
from tree_sitter_language_pack import SupportedLanguage, get_language, get_parser

from route_params.core.languages import normalize_language, query_family
from route_params.core.shapes import TypeShape, annotation_type, extract_shape
from route_params.core.validation.static_params import StaticParamsSignature
from route_params.models import FileRole, SourceRange

logger = logging.getLogger(__name__)

GENERATE_STATIC_PARAMS = "generateStaticParams"
METADATA_HANDLERS = ("generateMetadata", "generateMetadataFile")
HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")

_FUNCTION_TYPES = frozenset({"function_declaration", "arrow_function", "function_expression", "function"})
_PARAMETER_TYPES = frozenset({"required_parameter", "optional_parameter"})


@dataclass(frozen=True)
class PropsSite:
    handler: str
    props: TypeShape


@dataclass
class ModuleSites:
    aliases: dict[str, TypeShape] = field(default_factory=dict)
    props: list[PropsSite] = field(default_factory=list)
    static_params: StaticParamsSignature | None = None


@lru_cache(maxsize=None)
def _load_query(language: str, query_type: str) -> Query:
    queries_dir = Path(__file__).parent.parent / "queries"
    query_path = queries_dir / f"{query_family(language)}_{query_type}.scm"
    if not query_path.exists():
        raise FileNotFoundError(f"Query file not found: {query_path}")
    query_text = query_path.read_text(encoding="utf-8")
    return Query(get_language(cast(SupportedLanguage, language)), query_text)


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8")


def parse_source(source_bytes: bytes, language: str) -> Node:
    parser = get_parser(cast(SupportedLanguage, normalize_language(language)))
    return parser.parse(source_bytes).root_node


def discover_sites(source_bytes: bytes, language: str, role: FileRole) -> ModuleSites:
    language = normalize_language(language)
    root = parse_source(source_bytes, language)
    query = _load_query(language, "sites")

    sites = ModuleSites()
    functions: dict[str, Node] = {}
    default_node: Node | None = None

    for _, captures in QueryCursor(query).matches(root):
        if "alias.name" in captures:
            name = _text(captures["alias.name"][0], source_bytes)
            # first declaration wins, like the type checker reports a duplicate
            sites.aliases.setdefault(name, extract_shape(captures["alias.value"][0], source_bytes))
        elif "function.name" in captures:
            node = captures["function.node"][0]
            if node.type in _FUNCTION_TYPES:
                functions.setdefault(_text(captures["function.name"][0], source_bytes), node)
        elif "default.node" in captures:
            default_node = captures["default.node"][0]

    if role == "route":
        for method in HTTP_METHODS:
            _add_props_site(sites, method, functions.get(method), 1, source_bytes)
    else:
        _add_props_site(sites, "default", _resolve_default(default_node, functions, source_bytes), 0, source_bytes)
        for handler in METADATA_HANDLERS:
            _add_props_site(sites, handler, functions.get(handler), 0, source_bytes)

    generator = functions.get(GENERATE_STATIC_PARAMS)
    if generator is not None:
        sites.static_params = static_params_signature(generator, source_bytes)

    logger.debug(
        "Discovered %d aliases, %d props sites, static params: %s",
        len(sites.aliases),
        len(sites.props),
        sites.static_params is not None,
    )
    return sites


def _resolve_default(node: Node | None, functions: dict[str, Node], source: bytes) -> Node | None:
    if node is None:
        return None
    if node.type in _FUNCTION_TYPES:
        return node
    if node.type == "identifier":
        return functions.get(_text(node, source))
    return None


def _add_props_site(sites: ModuleSites, handler: str, function: Node | None, index: int, source: bytes) -> None:
    if function is None:
        return
    type_node = parameter_type(function, index)
    if type_node is None:
        return
    sites.props.append(PropsSite(handler=handler, props=extract_shape(type_node, source)))


def parameter_type(function: Node, index: int) -> Node | None:
    """Return the declared type node of the ``index``-th formal parameter."""
    parameters = function.child_by_field_name("parameters")
    if parameters is None:
        return None
    declared = [child for child in parameters.named_children if child.type in _PARAMETER_TYPES]
    if index >= len(declared):
        return None
    annotation = next((c for c in declared[index].children if c.type == "type_annotation"), None)
    return annotation_type(annotation)


def is_async(function: Node) -> bool:
    return any(child.type == "async" for child in function.children)


def static_params_signature(function: Node, source: bytes) -> StaticParamsSignature:
    annotation = next((c for c in function.children if c.type == "type_annotation"), None)
    type_node = annotation_type(annotation)
    return StaticParamsSignature(
        is_async=is_async(function),
        return_type=extract_shape(type_node, source) if type_node is not None else None,
        location=SourceRange.from_node(function),
        insertion_point=_return_type_insertion_point(function),
    )


def _return_type_insertion_point(function: Node) -> SourceRange:
    if function.type == "arrow_function":
        arrow = next((c for c in function.children if c.type == "=>"), None)
        if arrow is not None:
            return SourceRange.from_node(arrow).collapse_to_start()
    body = function.child_by_field_name("body")
    if body is not None:
        return SourceRange.from_node(body).collapse_to_start()
    return SourceRange.from_node(function).collapse_to_end()
