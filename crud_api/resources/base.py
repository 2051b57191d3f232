"""Helpers shared by the resource handlers."""
from __future__ import annotations

from typing import Any, Mapping

from crud_api.jsonapi.errors import HTTPError, not_found, unprocessable
from crud_api.jsonapi.request import Pagination
from crud_api.repositories import NotFoundError


def to_http_error(exc: NotFoundError) -> HTTPError:
    return not_found(str(exc))


def window(pagination: Pagination | None) -> tuple[int | None, int | None]:
    if pagination is None:
        return None, None
    return pagination.offset, pagination.limit


def require_text(values: Mapping[str, Any], field: str, member: str, *, required: bool, partial: bool = False) -> None:
    """Reject non-string values and, where ``required``, blank ones.

    A missing ``field`` is only an error for full (non ``partial``) payloads.
    """
    if field not in values:
        if required and not partial:
            raise unprocessable(f"{member} is required")
        return
    value = values[field]
    if value is not None and not isinstance(value, str):
        raise unprocessable(f"{member} must be a string")
    if required and not (value or "").strip():
        raise unprocessable(f"{member} must not be empty")
