"""Schema loading utilities for OpenAPI documents.

This module loads a specification document from a URL or a local JSON/YAML
file and validates the structure the rest of the pipeline depends on.
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import ValidationError

from swaggergen.codegen.utils import is_url
from swaggergen.exceptions import SpecFetchError, SpecParseError, SpecValidationError
from swaggergen.openapi import SpecDocument

logger = logging.getLogger(__name__)

__all__ = [
    'SchemaLoader',
    'SUPPORTED_SUFFIXES',
]

YAML_SUFFIXES = ('.yaml', '.yml')
SUPPORTED_SUFFIXES = ('.json', *YAML_SUFFIXES)


class SchemaLoader:
    """Loads OpenAPI schemas from URLs or file paths.

    Remote documents are retrieved with a single GET request; there are no
    retries. Local documents must carry a ``.json``, ``.yaml`` or ``.yml``
    suffix.

    Example:
        >>> loader = SchemaLoader()
        >>> document = loader.load('https://api.example.com/openapi.json')
        >>> # or
        >>> document = loader.load('./openapi.yaml')
    """

    def __init__(self, http_client: httpx.Client | None = None, timeout: float = 30.0):
        """Initialize the schema loader.

        Args:
            http_client: Optional HTTP client to use for URL requests.
                        If not provided, a one-off request is made with httpx.
            timeout: Timeout in seconds for the one-off request.
        """
        self._http_client = http_client
        self._timeout = timeout

    def load(self, source: str) -> SpecDocument:
        """Load and validate a specification document.

        Args:
            source: URL or file path to the document.

        Returns:
            The validated SpecDocument.

        Raises:
            SpecFetchError: If the document cannot be retrieved or read.
            SpecParseError: If the payload is not well-formed JSON/YAML.
            SpecValidationError: If the document has no ``paths`` mapping.
        """
        if is_url(source):
            content = self._load_from_url(source)
        else:
            content = self._load_from_file(source)

        return self.validate(content, source)

    def validate(self, content: Any, source: str) -> SpecDocument:
        """Validate decoded content into a SpecDocument."""
        if not isinstance(content, dict):
            raise SpecParseError(
                source, cause=f'expected a mapping at the top level, got {type(content).__name__}'
            )

        if 'paths' not in content or content['paths'] is None:
            raise SpecValidationError(source, errors=['missing paths property'])

        if not content.get('info'):
            logger.warning(f"Specification '{source}' has no info section")

        try:
            return SpecDocument.model_validate(content)
        except ValidationError as e:
            errors = [
                f'{".".join(str(part) for part in error["loc"])}: {error["msg"]}'
                for error in e.errors()
            ]
            raise SpecValidationError(source, errors=errors) from e

    def _load_from_url(self, url: str) -> Any:
        """Load schema content from a URL."""
        logger.info(f'Fetching specification from {url}')
        try:
            if self._http_client:
                response = self._http_client.get(url)
            else:
                response = httpx.get(url, follow_redirects=True, timeout=self._timeout)
        except httpx.HTTPError as e:
            raise SpecFetchError(url, cause=e) from e

        if not response.is_success:
            raise SpecFetchError(url, status=response.status_code)

        content_type = response.headers.get('content-type', '')
        is_yaml = 'yaml' in content_type or url.split('?', 1)[0].endswith(YAML_SUFFIXES)
        return self._parse(response.text, url, is_yaml)

    def _load_from_file(self, file_path: str) -> Any:
        """Load schema content from a file."""
        path = Path(file_path)

        if path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise SpecParseError(
                file_path,
                cause=f'unsupported file type {path.suffix or "(none)"!r}, '
                f'expected one of {", ".join(SUPPORTED_SUFFIXES)}',
            )

        if not path.is_file():
            raise SpecFetchError(
                file_path, cause=FileNotFoundError(f'File not found: {path}')
            )

        try:
            content = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise SpecFetchError(file_path, cause=e) from e

        return self._parse(content, file_path, path.suffix.lower() in YAML_SUFFIXES)

    @staticmethod
    def _parse(content: str, source: str, is_yaml: bool) -> Any:
        try:
            if is_yaml:
                return yaml.safe_load(content)
            return json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SpecParseError(source, cause=e) from e
