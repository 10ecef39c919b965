"""Code generation module for swaggergen.

This module provides the main Codegen class that orchestrates the generation
of a client package from an OpenAPI/Swagger document.
"""

import logging
from urllib.parse import urljoin

from upath import UPath

from swaggergen.codegen.emitter import SERVICES_DIR, ClientEmitter
from swaggergen.codegen.endpoints import extract_endpoints
from swaggergen.codegen.file_writer import ArtifactWriter
from swaggergen.codegen.grouping import group_endpoints
from swaggergen.codegen.naming import name_groups
from swaggergen.codegen.schema_loader import SchemaLoader
from swaggergen.codegen.types import (
    EmitOptions,
    GeneratedArtifact,
    GenerationResult,
    NamedGroup,
)
from swaggergen.codegen.utils import is_url
from swaggergen.config import GenerationOptions
from swaggergen.exceptions import ConfigurationError
from swaggergen.openapi import SpecDocument

logger = logging.getLogger(__name__)

__all__ = ['Codegen', 'DEFAULT_BASE_URL']

DEFAULT_BASE_URL = 'http://localhost:3000/api'


class Codegen:
    """Main code generator for creating client packages from API documents.

    This class runs the pipeline stage by stage:
    - Loading and validating the document
    - Extracting one endpoint per route and method
    - Grouping endpoints by tag
    - Naming every operation
    - Emitting and writing the client artifacts

    Attributes:
        options: The GenerationOptions for this run.
        document: The loaded SpecDocument (populated by build()).

    Example:
        >>> from swaggergen.config import GenerationOptions
        >>> from swaggergen.codegen.codegen import Codegen
        >>>
        >>> options = GenerationOptions(input='./openapi.yaml', output='./api_generate')
        >>> result = Codegen(options).generate()
        >>> result.total_endpoints
        12
    """

    def __init__(
        self, options: GenerationOptions, schema_loader: SchemaLoader | None = None
    ):
        """Initialize the code generator.

        Args:
            options: Options specifying the document and output location.
            schema_loader: Optional custom schema loader. If not provided,
                          a default SchemaLoader will be created.
        """
        self.options = options
        self.document: SpecDocument | None = None
        self._schema_loader = schema_loader or SchemaLoader()

    def _resolve_base_url(self) -> str:
        """Resolve the base URL: option, then document server, then the default."""
        if self.options.base_url:
            return self.options.base_url

        server_url = self.document.server_url
        if not server_url:
            logger.info(f'No server URL in the document, using {DEFAULT_BASE_URL}')
            return DEFAULT_BASE_URL

        if is_url(server_url):
            return server_url

        source = self.options.input
        if is_url(source):
            resolved = urljoin(source, server_url)
            logger.info(
                f"Resolved relative server URL '{server_url}' to '{resolved}' "
                f"using source URL '{source}'"
            )
            return resolved

        logger.warning(
            f"Server URL '{server_url}' is relative and the document was loaded "
            f'from a file; pass --base-url to set an absolute one'
        )
        return server_url

    def _emit_options(self) -> EmitOptions:
        return EmitOptions(
            base_url=self._resolve_base_url(),
            timeout_ms=self.options.timeout,
            retries=self.options.retries,
            enable_logging=self.options.enable_logging,
            title=self.document.title,
            version=self.document.version,
        )

    def build(self) -> tuple[list[GeneratedArtifact], list[NamedGroup]]:
        """Run every stage up to emission without touching the output directory.

        Raises:
            ConfigurationError: If no input document is configured.
            SpecError: If the document cannot be loaded or is invalid.
            NameCollisionError: If two operations of a group share a name.
        """
        if not self.options.input:
            raise ConfigurationError('No input document given', field='input')

        source = self.options.input
        self.document = self._schema_loader.load(source)

        endpoints = extract_endpoints(self.document.paths, source)
        logger.info(f'Found {len(endpoints)} operations in {source}')

        groups = name_groups(group_endpoints(endpoints))
        logger.info(f'Grouped operations into {len(groups)} services')

        package = UPath(self.options.output).name or 'api_generate'
        emitter = ClientEmitter(self._emit_options(), package=package)
        return emitter.emit(groups), groups

    def generate(self) -> GenerationResult:
        """Generate the client package and write it to the output directory.

        Returns:
            A summary of the service files and endpoints written.
        """
        artifacts, groups = self.build()

        writer = ArtifactWriter(self.options.output)
        writer.write(artifacts, clean=self.options.clean)

        total = sum(len(group.operations) for group in groups)
        logger.info(
            f'Generated {len(groups)} services with {total} endpoints '
            f'in {self.options.output}'
        )

        return GenerationResult(
            service_files=tuple(f'{SERVICES_DIR}/{group.module_file}' for group in groups),
            total_endpoints=total,
            output_dir=self.options.output,
            artifacts=tuple(artifact.relative_path for artifact in artifacts),
        )
