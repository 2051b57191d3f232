"""Base URL resolvers used when rendering links."""
from __future__ import annotations

from .routing import HTTPRequest

REQUEST_URI_HEADER = "REQUEST_URI"


class StaticResolver:
    """Always renders links against the same base URL."""

    def __init__(self, base_url: str) -> None:
        self.base_url = (base_url or "").rstrip("/")

    def resolve(self, request: HTTPRequest) -> str:
        return self.base_url


class RequestURLResolver:
    """Uses the ``REQUEST_URI`` header when a proxy sets it, else the request's own origin."""

    def __init__(self, header: str = REQUEST_URI_HEADER) -> None:
        self.header = header

    def resolve(self, request: HTTPRequest) -> str:
        override = (request.header(self.header) or "").strip()
        if override:
            return override.rstrip("/")
        return request.base_url.rstrip("/")
