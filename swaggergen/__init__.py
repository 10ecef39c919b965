"""swaggergen - Generate Python API client packages from OpenAPI/Swagger documents.

swaggergen reads an OpenAPI 3.x or Swagger 2.0 document, groups its
operations by tag and writes a client package with one module per group.
Every generated function takes the same keyword options (body, params,
query, headers, config) and delegates to a shared httpx-based runtime.

Quick Start:
    >>> from swaggergen import Codegen, GenerationOptions
    >>>
    >>> options = GenerationOptions(
    ...     input="https://api.example.com/openapi.json",
    ...     output="./api_generate"
    ... )
    >>> result = Codegen(options).generate()

CLI Usage:
    $ swaggergen generate --input ./api.yaml --output ./api_generate
    $ swaggergen version
"""

from importlib.metadata import PackageNotFoundError, version

from swaggergen.codegen.codegen import Codegen
from swaggergen.codegen.schema_loader import SchemaLoader
from swaggergen.config import GenerationOptions, get_config
from swaggergen.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    FileSystemError,
    NameCollisionError,
    SpecError,
    SpecFetchError,
    SpecParseError,
    SpecValidationError,
    SwaggerGenError,
)

__all__ = [
    # Main classes
    'Codegen',
    'SchemaLoader',
    # Configuration
    'GenerationOptions',
    'get_config',
    # Exceptions
    'SwaggerGenError',
    'SpecError',
    'SpecFetchError',
    'SpecParseError',
    'SpecValidationError',
    'CodeGenerationError',
    'NameCollisionError',
    'FileSystemError',
    'ConfigurationError',
]

try:
    __version__ = version('swaggergen')
except PackageNotFoundError:
    __version__ = 'unknown'
