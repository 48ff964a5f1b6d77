from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from tree_sitter import Node

from route_params.messages import DiagnosticKind, format_message

FileRole = Literal["page", "layout", "route", "default"]


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: int
    column: int


class SourceRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_byte: int
    end_byte: int
    start_point: Position
    end_point: Position

    @classmethod
    def from_node(cls, node: Node) -> "SourceRange":
        return cls(
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            start_point=Position(row=node.start_point[0], column=node.start_point[1]),
            end_point=Position(row=node.end_point[0], column=node.end_point[1]),
        )

    def collapse_to_start(self) -> "SourceRange":
        return SourceRange(
            start_byte=self.start_byte,
            end_byte=self.start_byte,
            start_point=self.start_point,
            end_point=self.start_point,
        )

    def collapse_to_end(self) -> "SourceRange":
        return SourceRange(
            start_byte=self.end_byte,
            end_byte=self.end_byte,
            start_point=self.end_point,
            end_point=self.end_point,
        )

    def extend_to(self, other: "SourceRange") -> "SourceRange":
        return SourceRange(
            start_byte=self.start_byte,
            end_byte=other.end_byte,
            start_point=self.start_point,
            end_point=other.end_point,
        )


class RouteParameterSpec(BaseModel):
    """One dynamic segment of a route path, e.g. ``[id]`` or ``[...slug]``."""

    model_config = ConfigDict(frozen=True)

    name: str
    catch_all: bool = False
    is_current_segment: bool = False


class ValidationContext(BaseModel):
    """Per-file contract every validator reads; built once, never mutated."""

    model_config = ConfigDict(frozen=True)

    route_params: tuple[RouteParameterSpec, ...]
    allowed_top_level_props: frozenset[str]
    search_params_strict: bool = True
    wrap_in_promise: bool | None = None
    file_role: FileRole


class Fix(BaseModel):
    model_config = ConfigDict(frozen=True)

    range: SourceRange
    replacement_text: str


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    location: SourceRange
    data: dict[str, str] = Field(default_factory=dict)
    fix: Fix | None = None

    @property
    def message(self) -> str:
        return format_message(self.kind, self.data)


class FileReport(BaseModel):
    path: str
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    fixes_applied: int = 0
