"""Adapter that lets the JSON:API server register its routes on FastAPI."""
from __future__ import annotations

import re

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from crud_api.jsonapi.routing import HandlerFunc, HTTPRequest

_PLACEHOLDER = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


def to_fastapi_path(route: str) -> str:
    """``/v0/users/:id`` -> ``/v0/users/{id}``"""
    return _PLACEHOLDER.sub(r"{\1}", route)


def request_context(request: Request) -> dict:
    """Copy of the values middleware stored on ``request.state``."""
    # Starlette keeps them in the private State._state dict.
    return dict(getattr(request.state, "_state", {}))


async def to_http_request(request: Request) -> HTTPRequest:
    return HTTPRequest.build(
        request.method,
        request.url.path,
        base_url=str(request.base_url),
        query_string=request.url.query,
        headers=request.headers,
        body=await request.body(),
    )


class FastAPIRouter:
    """``Routeable`` backed by a FastAPI application (or APIRouter)."""

    def __init__(self, app: FastAPI) -> None:
        self.app = app

    def handle(self, method: str, route: str, handler: HandlerFunc) -> None:
        async def endpoint(request: Request) -> Response:
            params = {key: str(value) for key, value in request.path_params.items()}
            context = request_context(request)
            http_request = await to_http_request(request)
            result = await run_in_threadpool(handler, http_request, params, context)
            return Response(content=result.body, status_code=result.status, headers=result.headers)

        self.app.add_api_route(
            to_fastapi_path(route),
            endpoint,
            methods=[method],
            include_in_schema=False,
            name=f"{method} {route}",
        )
