"""Users resource: CRUD plus the editable ``sweets`` relationship."""
from __future__ import annotations

import logging

from crud_api.jsonapi import CRUD, Request, ResourceData, Response, ToManyRelations
from crud_api.jsonapi.errors import not_found
from crud_api.repositories import ChocolateStorage, NotFoundError, UserStorage

from .base import require_text, to_http_error, window

logger = logging.getLogger(__name__)

SWEETS = "sweets"


class UserResource(CRUD, ToManyRelations):
    def __init__(self, user_storage: UserStorage, chocolate_storage: ChocolateStorage) -> None:
        self.user_storage = user_storage
        self.chocolate_storage = chocolate_storage

    def find_all(self, request: Request) -> Response:
        offset, limit = window(request.pagination)
        users = self.user_storage.get_all(offset=offset, limit=limit)
        return Response(result=users, total=self.user_storage.count())

    def find_one(self, request: Request, resource_id: str) -> Response:
        try:
            return Response(result=self.user_storage.get_one(resource_id))
        except NotFoundError as exc:
            raise to_http_error(exc) from exc

    def create(self, request: Request, data: ResourceData) -> Response:
        require_text(data.attributes, "username", "user-name", required=True)
        try:
            user = self.user_storage.insert(
                data.attributes["username"].strip(),
                sweet_ids=data.references.get(SWEETS, ()),
            )
        except NotFoundError as exc:
            raise to_http_error(exc) from exc
        logger.info("Created user %s", user.id)
        return Response(result=user, status=201)

    def update(self, request: Request, resource_id: str, data: ResourceData) -> Response:
        require_text(data.attributes, "username", "user-name", required=True, partial=True)
        values = dict(data.attributes)
        if "username" in values:
            values["username"] = values["username"].strip()
        try:
            user = self.user_storage.update(resource_id, sweet_ids=data.references.get(SWEETS), **values)
        except NotFoundError as exc:
            raise to_http_error(exc) from exc
        return Response(result=user)

    def delete(self, request: Request, resource_id: str) -> Response:
        try:
            self.user_storage.delete(resource_id)
        except NotFoundError as exc:
            raise to_http_error(exc) from exc
        logger.info("Deleted user %s", resource_id)
        return Response(status=204)

    # -------------------------- sweets --------------------------
    def _edit_sweets(self, operation, resource_id: str, name: str, ids: list[str]) -> Response:
        if name != SWEETS:
            raise not_found(f"users has no relationship '{name}'")
        try:
            operation(resource_id, ids)
        except NotFoundError as exc:
            raise to_http_error(exc) from exc
        return Response(status=204)

    def set_to_many_ids(self, request: Request, resource_id: str, name: str, ids: list[str]) -> Response:
        return self._edit_sweets(self.user_storage.replace_sweets, resource_id, name, ids)

    def add_to_many_ids(self, request: Request, resource_id: str, name: str, ids: list[str]) -> Response:
        return self._edit_sweets(self.user_storage.add_sweets, resource_id, name, ids)

    def delete_to_many_ids(self, request: Request, resource_id: str, name: str, ids: list[str]) -> Response:
        return self._edit_sweets(self.user_storage.remove_sweets, resource_id, name, ids)
