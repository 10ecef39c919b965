"""Assign endpoints to resource groups derived from their tags."""

import re

from swaggergen.codegen.types import Endpoint, ResourceGroup
from swaggergen.codegen.utils import remove_accents, sanitize_name_python_keywords

__all__ = ['DEFAULT_GROUP', 'normalize_tag', 'group_endpoints']

DEFAULT_GROUP = 'default'


def normalize_tag(tag: str) -> str:
    """Normalize a tag into a group identifier.

    - Fold accents and lower-case
    - Collapse every run of non-alphanumeric characters to one underscore
    - Strip leading and trailing underscores
    - Fall back to ``default`` when nothing is left
    - Prefix a leading digit and suffix Python keywords with an underscore

    The result is always a valid Python identifier, and the same tag always
    yields the same identifier.
    """
    name = remove_accents(str(tag)).lower()
    name = re.sub(r'[^a-z0-9]+', '_', name).strip('_')

    if not name:
        return DEFAULT_GROUP
    if name[0].isdigit():
        name = '_' + name
    return sanitize_name_python_keywords(name)


def group_endpoints(endpoints: list[Endpoint]) -> list[ResourceGroup]:
    """Group endpoints by normalized tag.

    Untagged endpoints land in the ``default`` group. An endpoint with
    several tags is added to every one of their groups. Groups are returned
    in first-seen order and keep the endpoints in the order given.
    """
    buckets: dict[str, list[Endpoint]] = {}

    for endpoint in endpoints:
        tags = endpoint.operation.tags or [DEFAULT_GROUP]
        # Two tags may normalize to the same group; add the endpoint once
        for name in dict.fromkeys(normalize_tag(tag) for tag in tags):
            buckets.setdefault(name, []).append(endpoint)

    return [
        ResourceGroup(name=name, endpoints=tuple(members))
        for name, members in buckets.items()
    ]
