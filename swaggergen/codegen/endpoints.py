"""Flatten the document route table into a list of endpoints."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from swaggergen.codegen.types import Endpoint, HttpMethod
from swaggergen.exceptions import SpecValidationError
from swaggergen.openapi import OperationSpec

logger = logging.getLogger(__name__)

__all__ = ['extract_endpoints']


def extract_endpoints(
    paths: Mapping[str, Mapping[str, Any]], source: str = '<document>'
) -> list[Endpoint]:
    """Produce one Endpoint per recognized ``(route, method)`` pair.

    Routes and their method keys are walked in document order. Keys that are
    not one of the five supported verbs (``parameters``, ``summary``,
    ``head``, vendor extensions...) are skipped.

    Args:
        paths: The document's route table.
        source: Document locator used in error messages.

    Raises:
        SpecValidationError: If a verb entry is not an operation mapping.
    """
    endpoints: list[Endpoint] = []

    for route, path_item in paths.items():
        for key, payload in path_item.items():
            method = HttpMethod.from_key(str(key))
            if method is None:
                logger.debug(f'Skipping non-operation key {key!r} on {route}')
                continue

            if not isinstance(payload, Mapping):
                raise SpecValidationError(
                    source, errors=[f'{key} {route}: operation must be a mapping']
                )

            try:
                operation = OperationSpec.model_validate(payload)
            except ValidationError as e:
                raise SpecValidationError(
                    source, errors=[f'{key} {route}: {error["msg"]}' for error in e.errors()]
                ) from e

            endpoints.append(Endpoint(route=route, method=method, operation=operation))

    return endpoints
