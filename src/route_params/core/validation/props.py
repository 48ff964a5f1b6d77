from route_params.core.routes import PARAMS_PROP_NAME, SEARCH_PARAMS_PROP_NAME
from route_params.core.shapes import AliasTable, Reference, TypeShape, literal_view, resolve_reference
from route_params.core.validation.params import check_forbidden_properties, validate_params_field
from route_params.core.validation.search_params import validate_search_params
from route_params.messages import DiagnosticKind
from route_params.models import Diagnostic, ValidationContext


def validate_props(props: TypeShape, context: ValidationContext, aliases: AliasTable) -> list[Diagnostic]:
    """Validate the props object a routed handler receives.

    ``props`` is the declared type of the handler parameter; it may be an
    inline literal or a reference to a top-level type alias.
    """
    literal = literal_view(resolve_reference(props, aliases))
    if literal is None:
        if not isinstance(props, Reference) or props.span is None:
            return []
        return [Diagnostic(kind=DiagnosticKind.IS_NO_LITERAL, location=props.span)]

    diagnostics = check_forbidden_properties(literal, context)

    search_params = literal.field(SEARCH_PARAMS_PROP_NAME)
    if search_params is not None:
        diagnostics.extend(validate_search_params(search_params, context, aliases))

    params = literal.field(PARAMS_PROP_NAME)
    if params is not None:
        diagnostics.extend(validate_params_field(params, context, aliases))
    return diagnostics
