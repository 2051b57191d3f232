"""Framework-neutral routing contract.

The API registers its handlers through a ``Routeable``; an adapter per web
framework turns native requests into ``HTTPRequest`` and ``HTTPResponse``
back into whatever the framework writes. Routes use ``:name`` placeholders.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Protocol
from urllib.parse import parse_qsl


@dataclass
class HTTPRequest:
    method: str
    path: str
    base_url: str
    headers: dict[str, str] = field(default_factory=dict)
    query: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""

    @classmethod
    def build(cls, method: str, path: str, *, base_url: str = "", query_string: str = "", headers=None, body: bytes = b""):
        return cls(
            method=method.upper(),
            path=path,
            base_url=base_url.rstrip("/"),
            headers={k.lower(): v for k, v in (headers or {}).items()},
            query=parse_qsl(query_string, keep_blank_values=True),
            body=body,
        )

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)


@dataclass
class HTTPResponse:
    status: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)


HandlerFunc = Callable[[HTTPRequest, dict[str, str], dict[str, Any]], HTTPResponse]


class Routeable(Protocol):
    def handle(self, method: str, route: str, handler: HandlerFunc) -> None:
        ...
