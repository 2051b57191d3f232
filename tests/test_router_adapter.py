from __future__ import annotations

import json

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from crud_api.jsonapi import HTTPResponse
from crud_api.routers.jsonapi_adapter import FastAPIRouter, request_context, to_fastapi_path


def _recording_app():
    app = FastAPI()
    calls = []

    @app.middleware("http")
    async def add_tenant(request, call_next):
        request.state.tenant = "acme"
        return await call_next(request)

    def handler(request, params, context):
        calls.append((request, params, context))
        body = json.dumps({"params": params}).encode()
        return HTTPResponse(status=299, body=body, headers={"Content-Type": "application/json", "X-Handled": "yes"})

    router = FastAPIRouter(app)
    router.handle("PATCH", "/v0/users/:id/relationships/:name", handler)
    router.handle("GET", "/v0/users", handler)
    return app, calls


def test_placeholders_are_translated():
    assert to_fastapi_path("/v0/users/:id") == "/v0/users/{id}"
    assert to_fastapi_path("/v0/users/:id/relationships/sweets") == "/v0/users/{id}/relationships/sweets"
    assert to_fastapi_path("/ping") == "/ping"


def test_params_context_and_request_pass_through():
    app, calls = _recording_app()
    client = TestClient(app)

    response = client.patch(
        "/v0/users/7/relationships/sweets?x=1",
        content=b'{"data": []}',
        headers={"REQUEST_URI": "https://proxy.example.com"},
    )

    assert response.status_code == 299
    assert response.headers["x-handled"] == "yes"
    assert response.json() == {"params": {"id": "7", "name": "sweets"}}

    request, params, context = calls[0]
    assert params == {"id": "7", "name": "sweets"}
    assert context["tenant"] == "acme"
    assert request.method == "PATCH"
    assert request.path == "/v0/users/7/relationships/sweets"
    assert request.body == b'{"data": []}'
    assert request.query == [("x", "1")]
    assert request.header("request_uri") == "https://proxy.example.com"
    assert request.base_url == "http://testserver"


def test_routes_without_params_get_an_empty_map():
    app, calls = _recording_app()
    response = TestClient(app).get("/v0/users")
    assert response.status_code == 299
    assert calls[0][1] == {}


def test_unmatched_routes_are_left_to_the_framework():
    app, calls = _recording_app()
    client = TestClient(app)
    assert client.get("/v0/chocolates").status_code == 404
    assert client.delete("/v0/users").status_code == 405
    assert calls == []


def test_request_context_copies_state_values():
    request = Request({"type": "http", "method": "GET", "path": "/", "headers": [], "state": {"tenant": "acme"}})
    context = request_context(request)
    assert context == {"tenant": "acme"}
    context["tenant"] = "other"
    assert request.state.tenant == "acme"
