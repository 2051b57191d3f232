"""Inbound JSON:API documents as pydantic v2 models.

Reference: https://jsonapi.org/format/#crud
"""
from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import bad_request


class ResourceIdentifier(BaseModel):
    """``{"type": ..., "id": ...}``"""

    model_config = ConfigDict(extra="ignore")

    type: str
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


Linkage = Union[list[ResourceIdentifier], ResourceIdentifier, None]


class Relationship(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: Linkage = None


class ResourceObject(BaseModel):
    """The ``data`` member of a create/update request."""

    model_config = ConfigDict(extra="ignore")

    type: str
    id: Optional[str] = None
    attributes: dict[str, Any] = Field(default_factory=dict)
    relationships: dict[str, Relationship] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class ResourceDocument(BaseModel):
    data: ResourceObject


class LinkageDocument(BaseModel):
    data: Linkage


def _parse(model: type[BaseModel], body: bytes):
    if not body or not body.strip():
        raise bad_request("Request body must contain a JSON:API document")
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        if first.get("type") == "json_invalid":
            raise bad_request("Request body is not valid JSON") from None
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise bad_request(f"Invalid document at '{location}': {first.get('msg', 'invalid')}") from None


def parse_resource_document(body: bytes) -> ResourceObject:
    return _parse(ResourceDocument, body).data


def parse_linkage_document(body: bytes) -> list[ResourceIdentifier]:
    """Return the identifiers of a relationship document; ``null`` yields an empty list."""
    document = _parse(LinkageDocument, body)
    return as_identifiers(document.data)


def as_identifiers(data: Linkage) -> list[ResourceIdentifier]:
    if data is None:
        return []
    if isinstance(data, ResourceIdentifier):
        return [data]
    return list(data)
