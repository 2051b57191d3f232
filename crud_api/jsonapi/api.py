"""JSON:API server: turns resource registrations into routes on a ``Routeable``.

For a type ``T`` registered under prefix ``p`` the routes are::

    GET    /p/T                          find_all
    POST   /p/T                          create
    GET    /p/T/:id                      find_one
    PATCH  /p/T/:id                      update
    DELETE /p/T/:id                      delete
    GET    /p/T/:id/R                    related resources (target find_all)
    GET    /p/T/:id/relationships/R      relationship linkage
    PATCH  /p/T/:id/relationships/R      replace linkage
    POST   /p/T/:id/relationships/R      add to linkage
    DELETE /p/T/:id/relationships/R      remove from linkage

Only operations the resource overrides are routed.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .document import parse_linkage_document, parse_resource_document
from .errors import HTTPError, conflict, not_found
from .request import Request, Response, page_url
from .resolver import RequestURLResolver
from .resource import CRUD, ToManyRelations
from .routing import HandlerFunc, HTTPRequest, HTTPResponse, Routeable
from .schema import Reference, ResourceSchema, identifiers

logger = logging.getLogger(__name__)

MEDIA_TYPE = "application/vnd.api+json"


def _overrides(resource: Any, base: type, name: str) -> bool:
    return isinstance(resource, base) and getattr(type(resource), name) is not getattr(base, name)


@dataclass
class _Registered:
    schema: ResourceSchema
    resource: CRUD


class API:
    def __init__(self, prefix: str = "", resolver=None, router: Optional[Routeable] = None) -> None:
        if router is None:
            raise ValueError("API requires a router")
        self.prefix = "/" + prefix.strip("/") if prefix.strip("/") else ""
        self.resolver = resolver or RequestURLResolver()
        self.router = router
        self.resources: dict[str, _Registered] = {}

    # -------------------------- registration --------------------------
    def add_resource(self, schema: ResourceSchema, resource: CRUD) -> None:
        type_name = schema.type_name
        if not type_name:
            raise ValueError(f"{type(schema).__name__} has no type_name")
        if type_name in self.resources:
            raise ValueError(f"Resource type '{type_name}' is already registered")
        self.resources[type_name] = _Registered(schema, resource)

        base = f"{self.prefix}/{type_name}"
        routes = [
            ("GET", base, "find_all", self._find_all),
            ("POST", base, "create", self._create),
            ("GET", f"{base}/:id", "find_one", self._find_one),
            ("PATCH", f"{base}/:id", "update", self._update),
            ("DELETE", f"{base}/:id", "delete", self._delete),
        ]
        for method, route, capability, handler in routes:
            if _overrides(resource, CRUD, capability):
                self._handle(method, route, self._bind(type_name, handler))

        for reference in schema.references:
            related = f"{base}/:id/{reference.name}"
            relationship = f"{base}/:id/relationships/{reference.name}"
            self._handle("GET", related, self._bind(type_name, self._find_related, reference))
            self._handle("GET", relationship, self._bind(type_name, self._find_relationship, reference))
            edits = [
                ("PATCH", "set_to_many_ids"),
                ("POST", "add_to_many_ids"),
                ("DELETE", "delete_to_many_ids"),
            ]
            for method, capability in edits:
                if _overrides(resource, ToManyRelations, capability):
                    self._handle(method, relationship, self._bind(type_name, self._edit_relationship, reference, capability))
        logger.info("Registered JSON:API resource %s at %s", type_name, base)

    def _handle(self, method: str, route: str, handler: HandlerFunc) -> None:
        self.router.handle(method, route, handler)

    def _bind(self, type_name: str, operation, *args) -> HandlerFunc:
        def handler(http: HTTPRequest, params: dict[str, str], context: dict[str, Any]) -> HTTPResponse:
            try:
                request = Request.from_http(http, context)
                registered = self.resources[type_name]
                return operation(registered, request, params, *args)
            except HTTPError as exc:
                log = logger.error if exc.status >= 500 else logger.info
                log(
                    "%s %s -> %s %s",
                    http.method,
                    http.path,
                    exc.status,
                    exc.detail or exc.title,
                    extra={"method": http.method, "path": http.path, "status": exc.status},
                )
                return self._render(exc.status, exc.to_document())
            except Exception:
                logger.exception(
                    "Unhandled error on %s %s",
                    http.method,
                    http.path,
                    extra={"method": http.method, "path": http.path, "status": 500},
                )
                return self._render(500, HTTPError(500, "An unexpected error occurred").to_document())

        return handler

    # -------------------------- operations --------------------------
    def _find_all(self, reg: _Registered, request: Request, params: dict[str, str]) -> HTTPResponse:
        response = reg.resource.find_all(request)
        url = f"{self._base(request)}/{reg.schema.type_name}"
        return self._collection(reg, request, response, url)

    def _find_one(self, reg: _Registered, request: Request, params: dict[str, str]) -> HTTPResponse:
        response = reg.resource.find_one(request, params["id"])
        return self._single(reg, request, response)

    def _create(self, reg: _Registered, request: Request, params: dict[str, str]) -> HTTPResponse:
        data = reg.schema.unmarshal(parse_resource_document(request.http.body))
        response = reg.resource.create(request, data)
        return self._single(reg, request, response, default_status=201)

    def _update(self, reg: _Registered, request: Request, params: dict[str, str]) -> HTTPResponse:
        data = reg.schema.unmarshal(parse_resource_document(request.http.body))
        if data.id is not None and data.id != params["id"]:
            raise conflict(f"Resource id '{data.id}' does not match URL id '{params['id']}'")
        data.id = params["id"]
        response = reg.resource.update(request, params["id"], data)
        return self._single(reg, request, response)

    def _delete(self, reg: _Registered, request: Request, params: dict[str, str]) -> HTTPResponse:
        response = reg.resource.delete(request, params["id"])
        if response.status == 204 or response.meta is None:
            return HTTPResponse(status=204)
        return self._render(response.status, {"meta": response.meta})

    def _find_related(self, reg: _Registered, request: Request, params: dict[str, str], reference: Reference) -> HTTPResponse:
        target = self.resources.get(reference.type)
        if target is None or not _overrides(target.resource, CRUD, "find_all"):
            raise not_found(f"Related resource type '{reference.type}' is not served")
        owner = reg.schema.type_name
        request.query[f"{owner}ID"] = [params["id"]]
        request.query[f"{owner}Name"] = [reference.name]
        response = target.resource.find_all(request)
        url = f"{self._base(request)}/{owner}/{params['id']}/{reference.name}"
        return self._collection(target, request, response, url)

    def _find_relationship(self, reg: _Registered, request: Request, params: dict[str, str], reference: Reference) -> HTTPResponse:
        entity = reg.resource.find_one(request, params["id"]).result
        document = {
            "links": self._relationship_links(request, reg.schema, params["id"], reference),
            "data": identifiers(reference.type, reg.schema.get_referenced_ids(entity, reference)),
        }
        return self._render(200, document)

    def _edit_relationship(
        self, reg: _Registered, request: Request, params: dict[str, str], reference: Reference, capability: str
    ) -> HTTPResponse:
        ids = reg.schema.identifier_ids(reference, parse_linkage_document(request.http.body))
        response = getattr(reg.resource, capability)(request, params["id"], reference.name, ids)
        if response.status == 204 or response.result is None:
            return HTTPResponse(status=204)
        entity = response.result
        document = {
            "links": self._relationship_links(request, reg.schema, params["id"], reference),
            "data": identifiers(reference.type, reg.schema.get_referenced_ids(entity, reference)),
        }
        return self._render(response.status, document)

    # -------------------------- rendering --------------------------
    def _base(self, request: Request) -> str:
        return f"{self.resolver.resolve(request.http)}{self.prefix}"

    def _relationship_links(self, request: Request, schema: ResourceSchema, resource_id: str, reference: Reference) -> dict:
        self_url = f"{self._base(request)}/{schema.type_name}/{resource_id}"
        return {
            "self": f"{self_url}/relationships/{reference.name}",
            "related": f"{self_url}/{reference.name}",
        }

    def marshal(self, request: Request, schema: ResourceSchema, entity: Any) -> dict:
        resource_id = schema.get_id(entity)
        obj = {
            "type": schema.type_name,
            "id": resource_id,
            "attributes": schema.get_attributes(entity),
        }
        if schema.references:
            obj["relationships"] = {
                reference.name: {
                    "links": self._relationship_links(request, schema, resource_id, reference),
                    "data": identifiers(reference.type, schema.get_referenced_ids(entity, reference)),
                }
                for reference in schema.references
            }
        obj["links"] = {"self": f"{self._base(request)}/{schema.type_name}/{resource_id}"}
        return obj

    def _included(self, request: Request, schema: ResourceSchema, entities: Iterable[Any]) -> list[dict]:
        seen: set[tuple[str, str]] = set()
        included = []
        for entity in entities:
            for reference in schema.references:
                target = self.resources.get(reference.type)
                if target is None:
                    continue
                for related in schema.get_referenced(entity, reference):
                    key = (reference.type, target.schema.get_id(related))
                    if key in seen:
                        continue
                    seen.add(key)
                    included.append(self.marshal(request, target.schema, related))
        return included

    def _single(self, reg: _Registered, request: Request, response: Response, default_status: int = 200) -> HTTPResponse:
        status = response.status if response.status != 200 else default_status
        if status == 204 or response.result is None:
            return HTTPResponse(status=204)
        document: dict[str, Any] = {"data": self.marshal(request, reg.schema, response.result)}
        included = self._included(request, reg.schema, [response.result])
        if included:
            document["included"] = included
        if response.meta:
            document["meta"] = response.meta
        return self._render(status, document)

    def _collection(self, reg: _Registered, request: Request, response: Response, url: str) -> HTTPResponse:
        entities = list(response.result or [])
        document: dict[str, Any] = {
            "links": {"self": url},
            "data": [self.marshal(request, reg.schema, entity) for entity in entities],
        }
        meta = dict(response.meta or {})
        if response.total is not None:
            meta.setdefault("total", response.total)
            if request.pagination is not None:
                for name, query in request.pagination.links(response.total).items():
                    document["links"][name] = page_url(url, query)
        if meta:
            document["meta"] = meta
        included = self._included(request, reg.schema, entities)
        if included:
            document["included"] = included
        return self._render(response.status, document)

    def _render(self, status: int, document: dict) -> HTTPResponse:
        body = json.dumps(document, ensure_ascii=False).encode("utf-8")
        return HTTPResponse(status=status, body=body, headers={"Content-Type": MEDIA_TYPE})
