from collections import defaultdict
from collections.abc import Mapping
from enum import StrEnum


class DiagnosticKind(StrEnum):
    UNKNOWN_PARAMETER = "UnknownParameter"
    WRONG_PARAMETER_TYPE = "WrongParameterType"
    FORBIDDEN_PROPERTY = "ForbiddenProperty"
    WRONG_SEARCH_PARAMS_TYPE = "WrongSearchParamsType"
    MISSING_RETURN_TYPE = "MissingReturnType"
    WRONG_RETURN_TYPE = "WrongReturnType"
    PARAM_NOT_OPTIONAL_ALLOWED = "ParamNotOptionalAllowed"
    MUST_BE_WRAPPED_IN_PROMISE = "MustBeWrappedInPromise"
    IS_NO_LITERAL = "IsNoLiteral"


MESSAGES: dict[DiagnosticKind, str] = {
    DiagnosticKind.UNKNOWN_PARAMETER: "The param {name} does not exist in the corresponding route path of this file",
    DiagnosticKind.WRONG_PARAMETER_TYPE: "{name} must be of type {type}",
    DiagnosticKind.FORBIDDEN_PROPERTY: "The property {key} is forbidden",
    DiagnosticKind.WRONG_SEARCH_PARAMS_TYPE: "searchParams must be of type {type}",
    DiagnosticKind.MISSING_RETURN_TYPE: "The function must specify a return type",
    DiagnosticKind.WRONG_RETURN_TYPE: "The function must specify a correct return type",
    DiagnosticKind.PARAM_NOT_OPTIONAL_ALLOWED: "The param {name} must not be optional",
    DiagnosticKind.MUST_BE_WRAPPED_IN_PROMISE: "{name} must be wrapped in a Promise",
    DiagnosticKind.IS_NO_LITERAL: "Consider using an explicit type annotation",
}


def format_message(kind: DiagnosticKind, data: Mapping[str, str]) -> str:
    """Render the message for ``kind``; missing substitutions render empty."""
    return MESSAGES[kind].format_map(defaultdict(str, data))
