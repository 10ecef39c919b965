"""Pydantic models for the subset of an OpenAPI/Swagger document the
generator consumes.

Only the parts that drive client generation are modelled strictly: the
document ``info``, its ``servers`` and the ``paths`` route table. Everything
else is accepted and ignored, so Swagger 2.0 and OpenAPI 3.x documents load
through the same models.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    'Info',
    'OperationSpec',
    'Server',
    'SpecDocument',
]


class Info(BaseModel):
    model_config = ConfigDict(extra='ignore', frozen=True)

    title: str = 'API'
    version: str = '1.0.0'
    description: Optional[str] = None

    @field_validator('title', 'version', mode='before')
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        # YAML happily turns `version: 1.0` into a float
        if isinstance(value, (int, float)):
            return str(value)
        return value


class Server(BaseModel):
    model_config = ConfigDict(extra='ignore', frozen=True)

    url: str
    description: Optional[str] = None


class OperationSpec(BaseModel):
    """One documented operation attached to a ``(route, method)`` pair."""

    model_config = ConfigDict(extra='ignore', frozen=True, populate_by_name=True)

    summary: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    operation_id: Optional[str] = Field(None, alias='operationId')
    deprecated: bool = False

    @field_validator('tags', mode='before')
    @classmethod
    def _tags_as_strings(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(tag) for tag in value]
        return value


class SpecDocument(BaseModel):
    """The parsed specification document.

    ``paths`` maps each route template to its raw path item. Path items keep
    every key the document declares (verbs as well as ``parameters`` or
    ``summary``); picking out the operations is the endpoint extractor's job.
    """

    model_config = ConfigDict(extra='ignore', frozen=True)

    info: Optional[Info] = None
    servers: List[Server] = Field(default_factory=list)
    paths: Dict[str, Dict[str, Any]]

    # Swagger 2.0 server description
    host: Optional[str] = None
    basePath: Optional[str] = None
    schemes: List[str] = Field(default_factory=list)

    @field_validator('paths', mode='before')
    @classmethod
    def _path_items_as_mappings(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                str(route): item if item is not None else {}
                for route, item in value.items()
            }
        return value

    @property
    def title(self) -> str:
        return self.info.title if self.info else 'API'

    @property
    def version(self) -> str:
        return self.info.version if self.info else '1.0.0'

    @property
    def server_url(self) -> Optional[str]:
        """The first declared server URL, if the document declares one."""
        if self.servers:
            return self.servers[0].url
        if self.host:
            scheme = self.schemes[0] if self.schemes else 'https'
            return f'{scheme}://{self.host}{self.basePath or ""}'
        return None
