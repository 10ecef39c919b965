"""Code generation module for swaggergen.

This module provides the pipeline stages that turn an API document into a
client package.

Main Components:
    - Codegen: The main orchestrator for code generation
    - SchemaLoader: Loads documents from URLs or files
    - extract_endpoints: Flattens the route table into endpoints
    - group_endpoints: Buckets endpoints into resource groups by tag
    - name_groups: Derives function names and path parameters
    - ClientEmitter: Renders the client package artifacts
    - ArtifactWriter: Writes artifacts to the output directory

Example:
    >>> from swaggergen.codegen import Codegen
    >>> from swaggergen.config import GenerationOptions
    >>>
    >>> options = GenerationOptions(input="./openapi.json", output="./api_generate")
    >>> Codegen(options).generate()
"""

from swaggergen.codegen.ast_utils import ImportCollector
from swaggergen.codegen.codegen import Codegen
from swaggergen.codegen.emitter import ClientEmitter
from swaggergen.codegen.endpoints import extract_endpoints
from swaggergen.codegen.file_writer import ArtifactWriter
from swaggergen.codegen.grouping import group_endpoints, normalize_tag
from swaggergen.codegen.naming import (
    derive_function_name,
    extract_path_params,
    name_group,
    name_groups,
)
from swaggergen.codegen.schema_loader import SchemaLoader
from swaggergen.codegen.types import (
    EmitOptions,
    Endpoint,
    GeneratedArtifact,
    GenerationResult,
    HttpMethod,
    NamedGroup,
    NamedOperation,
    ResourceGroup,
)

__all__ = [
    # Main codegen class
    'Codegen',
    # Pipeline stages
    'SchemaLoader',
    'extract_endpoints',
    'group_endpoints',
    'normalize_tag',
    'derive_function_name',
    'extract_path_params',
    'name_group',
    'name_groups',
    # Code emission
    'ClientEmitter',
    'ArtifactWriter',
    'ImportCollector',
    # Data model
    'HttpMethod',
    'Endpoint',
    'ResourceGroup',
    'NamedOperation',
    'NamedGroup',
    'GeneratedArtifact',
    'GenerationResult',
    'EmitOptions',
]
