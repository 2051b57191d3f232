"""Describe how an entity maps onto a JSON:API resource object."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Iterable, Mapping

from .document import ResourceObject, as_identifiers
from .errors import bad_request, conflict
from .request import ResourceData


@dataclass(frozen=True)
class Reference:
    """A to-many relationship ``name`` pointing at resources of ``type``."""

    name: str
    type: str


class ResourceSchema:
    """Maps one entity class to a JSON:API type.

    Subclasses set ``type_name``, ``attributes`` (JSON member name to entity
    attribute name) and ``references``. Referenced entities are read from the
    entity attribute named like the reference unless ``reference_attributes``
    says otherwise.
    """

    type_name: ClassVar[str] = ""
    attributes: ClassVar[Mapping[str, str]] = {}
    references: ClassVar[tuple[Reference, ...]] = ()
    reference_attributes: ClassVar[Mapping[str, str]] = {}

    def get_id(self, entity: Any) -> str:
        return str(entity.id)

    def get_attributes(self, entity: Any) -> dict[str, Any]:
        return {member: getattr(entity, attr) for member, attr in self.attributes.items()}

    def get_referenced(self, entity: Any, reference: Reference) -> list[Any]:
        attr = self.reference_attributes.get(reference.name, reference.name)
        return list(getattr(entity, attr, None) or [])

    def get_referenced_ids(self, entity: Any, reference: Reference) -> list[str]:
        return [str(item.id) for item in self.get_referenced(entity, reference)]

    # -------------------------- unmarshal --------------------------
    def unmarshal_attributes(self, attributes: Mapping[str, Any]) -> dict[str, Any]:
        values = {}
        for member, value in attributes.items():
            attr = self.attributes.get(member)
            if attr is None:
                raise bad_request(f"Unknown attribute '{member}' for type {self.type_name}")
            values[attr] = value
        return values

    def unmarshal(self, obj: ResourceObject) -> ResourceData:
        if obj.type != self.type_name:
            raise conflict(f"Resource type '{obj.type}' does not match endpoint type '{self.type_name}'")
        known = {reference.name: reference for reference in self.references}
        references: dict[str, list[str]] = {}
        for name, relationship in obj.relationships.items():
            reference = known.get(name)
            if reference is None:
                raise bad_request(f"Unknown relationship '{name}' for type {self.type_name}")
            references[name] = self.identifier_ids(reference, relationship.data)
        return ResourceData(id=obj.id, attributes=self.unmarshal_attributes(obj.attributes), references=references)

    def identifier_ids(self, reference: Reference, data) -> list[str]:
        ids = []
        for identifier in as_identifiers(data):
            if identifier.type != reference.type:
                raise conflict(
                    f"Relationship '{reference.name}' expects type '{reference.type}', got '{identifier.type}'"
                )
            ids.append(identifier.id)
        return ids


def identifiers(type_name: str, ids: Iterable[str]) -> list[dict[str, str]]:
    return [{"type": type_name, "id": i} for i in ids]
