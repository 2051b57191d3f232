"""Capabilities a resource implementation offers to the API."""
from __future__ import annotations

from .request import Request, ResourceData, Response


class CRUD:
    """Base class for resources; every method maps to one HTTP operation.

    Implementations raise ``HTTPError`` for client-visible failures.
    """

    def find_all(self, request: Request) -> Response:
        raise NotImplementedError

    def find_one(self, request: Request, resource_id: str) -> Response:
        raise NotImplementedError

    def create(self, request: Request, data: ResourceData) -> Response:
        raise NotImplementedError

    def update(self, request: Request, resource_id: str, data: ResourceData) -> Response:
        raise NotImplementedError

    def delete(self, request: Request, resource_id: str) -> Response:
        raise NotImplementedError


class ToManyRelations:
    """Mixin for resources whose to-many relationships can be edited in place."""

    def set_to_many_ids(self, request: Request, resource_id: str, name: str, ids: list[str]) -> Response:
        raise NotImplementedError

    def add_to_many_ids(self, request: Request, resource_id: str, name: str, ids: list[str]) -> Response:
        raise NotImplementedError

    def delete_to_many_ids(self, request: Request, resource_id: str, name: str, ids: list[str]) -> Response:
        raise NotImplementedError
