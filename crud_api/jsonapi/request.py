"""Request/response values exchanged between the API and resources."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlencode

from .errors import bad_request
from .routing import HTTPRequest

OFFSET_STYLE = "offset"
NUMBER_STYLE = "number"

# Offsets are handed to the database as signed 64-bit integers.
MAX_PAGE_VALUE = 2**63 - 1


@dataclass(frozen=True)
class Pagination:
    """A page window; ``limit`` is None when only ``page[offset]`` was sent."""

    offset: int = 0
    limit: Optional[int] = None
    style: str = OFFSET_STYLE

    @property
    def number(self) -> int:
        if not self.limit:
            return 1
        return self.offset // self.limit + 1

    def links(self, total: int) -> dict[str, dict[str, str]]:
        """Query parameters for first/prev/next/last, keyed by link name."""
        if not self.limit:
            return {}
        if self.style == NUMBER_STYLE:
            size = self.limit
            last = max(math.ceil(total / size), 1)
            links = {"first": 1, "last": last}
            if self.number > 1:
                links["prev"] = self.number - 1
            if self.number < last:
                links["next"] = self.number + 1
            return {
                name: {"page[number]": str(number), "page[size]": str(size)}
                for name, number in links.items()
            }
        limit = self.limit
        offsets = {"first": 0, "last": max(total - limit, 0)}
        if self.offset > 0:
            offsets["prev"] = max(self.offset - limit, 0)
        if self.offset + limit < total:
            offsets["next"] = self.offset + limit
        return {
            name: {"page[offset]": str(offset), "page[limit]": str(limit)}
            for name, offset in offsets.items()
        }


def _page_int(params: dict[str, str], key: str, minimum: int) -> Optional[int]:
    raw = params.get(key)
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise bad_request(f"{key} must be an integer") from None
    if value < minimum:
        raise bad_request(f"{key} must be at least {minimum}")
    if value > MAX_PAGE_VALUE:
        raise bad_request(f"{key} must be at most {MAX_PAGE_VALUE}")
    return value


def parse_pagination(query: list[tuple[str, str]]) -> Optional[Pagination]:
    """Read ``page[offset]/page[limit]`` or ``page[number]/page[size]``; None when absent."""
    params = {key: value for key, value in query if key.startswith("page[")}
    if not params:
        return None
    offset = _page_int(params, "page[offset]", 0)
    limit = _page_int(params, "page[limit]", 1)
    number = _page_int(params, "page[number]", 1)
    size = _page_int(params, "page[size]", 1)
    offset_style = offset is not None or limit is not None
    number_style = number is not None or size is not None
    if offset_style and number_style:
        raise bad_request("Use either page[offset]/page[limit] or page[number]/page[size], not both")
    if number_style:
        if size is None:
            raise bad_request("page[number] requires page[size]")
        offset = ((number or 1) - 1) * size
        if offset > MAX_PAGE_VALUE:
            raise bad_request("page[number] times page[size] is out of range")
        return Pagination(offset=offset, limit=size, style=NUMBER_STYLE)
    if offset_style:
        return Pagination(offset=offset or 0, limit=limit, style=OFFSET_STYLE)
    unknown = sorted(params)[0]
    raise bad_request(f"Unsupported pagination parameter {unknown}")


@dataclass
class Request:
    """What a resource sees of an incoming call."""

    http: HTTPRequest
    query: dict[str, list[str]] = field(default_factory=dict)
    pagination: Optional[Pagination] = None
    context: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_http(cls, http: HTTPRequest, context: Optional[dict[str, Any]] = None) -> "Request":
        query: dict[str, list[str]] = {}
        for key, value in http.query:
            query.setdefault(key, []).append(value)
        return cls(http=http, query=query, pagination=parse_pagination(http.query), context=dict(context or {}))

    def param(self, name: str) -> Optional[str]:
        values = self.query.get(name)
        return values[0] if values else None


@dataclass
class ResourceData:
    """A create/update payload after unmarshalling; attribute keys are entity fields."""

    id: Optional[str] = None
    attributes: dict[str, Any] = field(default_factory=dict)
    references: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class Response:
    """Result of a resource call.

    ``total`` is the unpaginated collection size; set it on find_all results
    so the API can emit pagination links and ``meta.total``.
    """

    result: Any = None
    status: int = 200
    total: Optional[int] = None
    meta: Optional[dict[str, Any]] = None


def page_url(url: str, query: dict[str, str]) -> str:
    return f"{url}?{urlencode(query, safe='[]')}"
