"""Derive function names and path parameters for grouped endpoints.

Naming follows REST conventions so that call sites read naturally::

    GET    /api/v1/users            -> users
    GET    /api/v1/users/{id}       -> users_by_id
    POST   /api/v1/users            -> create_users
    PUT    /api/v1/users/{id}       -> update_users_by_id
    DELETE /api/v1/users/{id}       -> delete_users_by_id
    GET    /files/{name}.{ext}      -> by_name_by_ext

An explicit ``operationId`` always wins over the derived name and is only
sanitized (``getUserById`` -> ``get_user_by_id``).
"""

import re

from swaggergen.codegen.types import (
    Endpoint,
    NamedGroup,
    NamedOperation,
    ResourceGroup,
)
from swaggergen.codegen.utils import (
    remove_accents,
    sanitize_name_python_keywords,
    sanitize_parameter_name,
    to_snake_case,
)
from swaggergen.exceptions import CodeGenerationError, NameCollisionError

__all__ = [
    'derive_function_name',
    'extract_path_params',
    'name_group',
    'name_groups',
    'name_operation',
    'normalize_route_template',
    'sanitize_function_name',
]

PLACEHOLDER_PATTERN = re.compile(r'\{([^{}]+)\}')
VERSION_PREFIX_PATTERN = re.compile(r'^/*(?:api/)?v\d+(?=/|$)', re.IGNORECASE)

ROOT_NAME = 'root'
FALLBACK_NAME = 'operation'


def extract_path_params(route: str) -> tuple[str, ...]:
    """Return the route's placeholder names as identifiers, left to right.

    A placeholder that appears twice is returned twice.
    """
    return tuple(
        sanitize_parameter_name(name) for name in PLACEHOLDER_PATTERN.findall(route)
    )


def normalize_route_template(route: str) -> str:
    """Rewrite every ``{placeholder}`` in the route to its identifier form."""
    return PLACEHOLDER_PATTERN.sub(
        lambda match: '{' + sanitize_parameter_name(match.group(1)) + '}', route
    )


def _clean(name: str) -> str:
    name = to_snake_case(remove_accents(name))
    name = re.sub(r'[^A-Za-z0-9_]+', '_', name)
    return re.sub(r'_+', '_', name).strip('_').lower()


def sanitize_function_name(name: str) -> str:
    """Convert an arbitrary string into a snake_case function identifier."""
    sanitized = _clean(name)
    if not sanitized:
        return FALLBACK_NAME
    if sanitized[0].isdigit():
        sanitized = '_' + sanitized
    return sanitize_name_python_keywords(sanitized)


def _route_noun(route: str) -> str:
    """Name the resource a route addresses from its last meaningful segment."""
    path = VERSION_PREFIX_PATTERN.sub('', route.split('?', 1)[0])
    segments = [segment for segment in path.split('/') if segment]
    if not segments:
        return ROOT_NAME

    last = segments[-1]
    noun = PLACEHOLDER_PATTERN.sub(lambda match: f'_by_{match.group(1)}_', last)

    if PLACEHOLDER_PATTERN.fullmatch(last):
        literals = [s for s in segments[:-1] if not PLACEHOLDER_PATTERN.search(s)]
        if literals:
            noun = f'{literals[-1]}_{noun}'

    return _clean(noun) or ROOT_NAME


def derive_function_name(endpoint: Endpoint) -> str:
    """Return the function name for an endpoint.

    Uses the sanitized ``operationId`` when the operation declares one,
    otherwise the verb prefix followed by the route noun.
    """
    operation_id = endpoint.operation.operation_id
    if operation_id and operation_id.strip():
        return sanitize_function_name(operation_id)

    prefix = endpoint.method.verb_prefix
    noun = _route_noun(endpoint.route)
    return sanitize_function_name(f'{prefix}_{noun}' if prefix else noun)


def _check_path_params(endpoint: Endpoint) -> None:
    """Fail when two different placeholders share one identifier."""
    seen: dict[str, str] = {}
    for raw in PLACEHOLDER_PATTERN.findall(endpoint.route):
        identifier = sanitize_parameter_name(raw)
        previous = seen.setdefault(identifier, raw)
        if previous != raw:
            raise CodeGenerationError(
                f"Path parameters '{previous}' and '{raw}' of {endpoint.label} "
                f"both map to the identifier '{identifier}'"
            )


def name_operation(endpoint: Endpoint) -> NamedOperation:
    """Name one endpoint.

    Raises:
        CodeGenerationError: If two placeholders of the route map to one identifier.
    """
    _check_path_params(endpoint)
    return NamedOperation(
        function_name=derive_function_name(endpoint),
        path_params=extract_path_params(endpoint.route),
        path_template=normalize_route_template(endpoint.route),
        endpoint=endpoint,
    )


def name_group(group: ResourceGroup) -> NamedGroup:
    """Name every endpoint of a group.

    Raises:
        NameCollisionError: If two endpoints derive the same function name.
    """
    named: dict[str, NamedOperation] = {}

    for endpoint in group.endpoints:
        operation = name_operation(endpoint)
        existing = named.get(operation.function_name)
        if existing is not None:
            raise NameCollisionError(
                group.name,
                operation.function_name,
                existing.endpoint.label,
                endpoint.label,
            )
        named[operation.function_name] = operation

    return NamedGroup(name=group.name, operations=tuple(named.values()))


def name_groups(groups: list[ResourceGroup]) -> list[NamedGroup]:
    return [name_group(group) for group in groups]
