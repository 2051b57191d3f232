"""Chocolates resource.

Also serves ``GET /users/:id/sweets``: the API forwards that call to
``find_all`` with the ``usersID`` query parameter set.
"""
from __future__ import annotations

import logging

from crud_api.jsonapi import CRUD, Request, ResourceData, Response
from crud_api.repositories import ChocolateStorage, NotFoundError, UserStorage

from .base import require_text, to_http_error, window

logger = logging.getLogger(__name__)


class ChocolateResource(CRUD):
    def __init__(self, chocolate_storage: ChocolateStorage, user_storage: UserStorage) -> None:
        self.chocolate_storage = chocolate_storage
        self.user_storage = user_storage

    def find_all(self, request: Request) -> Response:
        user_id = request.param("usersID")
        if user_id is not None:
            return self._find_sweets(request, user_id)
        offset, limit = window(request.pagination)
        chocolates = self.chocolate_storage.get_all(offset=offset, limit=limit)
        return Response(result=chocolates, total=self.chocolate_storage.count())

    def _find_sweets(self, request: Request, user_id: str) -> Response:
        try:
            sweets = self.user_storage.get_sweets(user_id)
        except NotFoundError as exc:
            raise to_http_error(exc) from exc
        offset, limit = window(request.pagination)
        start = offset or 0
        page = sweets[start:] if limit is None else sweets[start:start + limit]
        return Response(result=page, total=len(sweets))

    def find_one(self, request: Request, resource_id: str) -> Response:
        try:
            return Response(result=self.chocolate_storage.get_one(resource_id))
        except NotFoundError as exc:
            raise to_http_error(exc) from exc

    def create(self, request: Request, data: ResourceData) -> Response:
        require_text(data.attributes, "name", "name", required=True)
        require_text(data.attributes, "taste", "taste", required=False)
        chocolate = self.chocolate_storage.insert(
            data.attributes["name"].strip(),
            taste=data.attributes.get("taste"),
        )
        logger.info("Created chocolate %s", chocolate.id)
        return Response(result=chocolate, status=201)

    def update(self, request: Request, resource_id: str, data: ResourceData) -> Response:
        require_text(data.attributes, "name", "name", required=True, partial=True)
        require_text(data.attributes, "taste", "taste", required=False)
        values = dict(data.attributes)
        if "name" in values:
            values["name"] = values["name"].strip()
        if "taste" in values:
            values["taste"] = values["taste"] or ""
        try:
            if values:
                chocolate = self.chocolate_storage.update(resource_id, **values)
            else:
                chocolate = self.chocolate_storage.get_one(resource_id)
        except NotFoundError as exc:
            raise to_http_error(exc) from exc
        return Response(result=chocolate)

    def delete(self, request: Request, resource_id: str) -> Response:
        try:
            self.chocolate_storage.delete(resource_id)
        except NotFoundError as exc:
            raise to_http_error(exc) from exc
        logger.info("Deleted chocolate %s", resource_id)
        return Response(status=204)
