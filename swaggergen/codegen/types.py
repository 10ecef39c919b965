"""Data model flowing between the generation stages.

Every value here is produced once by one stage and only read by later ones,
so all of them are frozen dataclasses.
"""

import dataclasses
import enum

from swaggergen.openapi import OperationSpec

__all__ = [
    'HttpMethod',
    'Endpoint',
    'ResourceGroup',
    'NamedOperation',
    'NamedGroup',
    'GeneratedArtifact',
    'GenerationResult',
    'EmitOptions',
]


class HttpMethod(enum.Enum):
    """The HTTP verbs the generator turns into client functions."""

    GET = 'GET'
    POST = 'POST'
    PUT = 'PUT'
    PATCH = 'PATCH'
    DELETE = 'DELETE'

    @classmethod
    def from_key(cls, key: str) -> 'HttpMethod | None':
        """Return the method for a path item key, or None for non-verb keys."""
        try:
            return cls(key.upper())
        except ValueError:
            return None

    @property
    def carries_body(self) -> bool:
        return _CARRIES_BODY[self]

    @property
    def verb_prefix(self) -> str:
        """Prefix for derived function names; GET keeps the bare noun."""
        return _VERB_PREFIXES[self]


# One entry per member
_CARRIES_BODY = {
    HttpMethod.GET: False,
    HttpMethod.POST: True,
    HttpMethod.PUT: True,
    HttpMethod.PATCH: True,
    HttpMethod.DELETE: False,
}

_VERB_PREFIXES = {
    HttpMethod.GET: '',
    HttpMethod.POST: 'create',
    HttpMethod.PUT: 'update',
    HttpMethod.PATCH: 'update',
    HttpMethod.DELETE: 'delete',
}


@dataclasses.dataclass(frozen=True)
class Endpoint:
    route: str
    method: HttpMethod
    operation: OperationSpec

    @property
    def label(self) -> str:
        return f'{self.method.value} {self.route}'


@dataclasses.dataclass(frozen=True)
class ResourceGroup:
    name: str
    endpoints: tuple[Endpoint, ...] = ()


@dataclasses.dataclass(frozen=True)
class NamedOperation:
    """An endpoint with its function name and path parameters resolved.

    Attributes:
        function_name: Identifier of the generated function, unique in its group.
        path_params: Placeholder identifiers in route order, duplicates kept.
        path_template: The route with every placeholder rewritten to its
            identifier, which is what the generated code substitutes into.
        endpoint: The endpoint this operation was derived from.
    """

    function_name: str
    path_params: tuple[str, ...]
    path_template: str
    endpoint: Endpoint

    @property
    def unique_path_params(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(self.path_params))


@dataclasses.dataclass(frozen=True)
class NamedGroup:
    name: str
    operations: tuple[NamedOperation, ...] = ()

    @property
    def module_file(self) -> str:
        return f'{self.name}.py'


@dataclasses.dataclass(frozen=True)
class GeneratedArtifact:
    relative_path: str
    content: str


@dataclasses.dataclass(frozen=True)
class GenerationResult:
    """Summary returned to the caller after a generation run.

    ``total_endpoints`` counts endpoint assignments after tag fan-out: an
    operation tagged twice is counted twice.
    """

    service_files: tuple[str, ...]
    total_endpoints: int
    output_dir: str
    artifacts: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class EmitOptions:
    """Global options baked into the generated configuration module.

    Attributes:
        base_url: Default base URL of the generated client.
        timeout_ms: Request deadline in milliseconds.
        retries: Connection retry count handed to the HTTP transport.
        enable_logging: Whether the generated runtime logs each request.
        title: API title, used in module and README headings.
        version: API version, used in module and README headings.
    """

    base_url: str
    timeout_ms: int = 30000
    retries: int = 3
    enable_logging: bool = False
    title: str = 'API'
    version: str = '1.0.0'
