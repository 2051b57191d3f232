"""JSON:API error objects."""
from __future__ import annotations

from http import HTTPStatus
from typing import Optional


class HTTPError(Exception):
    """An error the API renders as ``{"errors": [...]}`` with ``status``."""

    def __init__(self, status: int, detail: Optional[str] = None, *, title: Optional[str] = None) -> None:
        self.status = int(status)
        self.title = title or HTTPStatus(self.status).phrase
        self.detail = detail
        super().__init__(detail or self.title)

    def to_document(self) -> dict:
        error = {"status": str(self.status), "title": self.title}
        if self.detail:
            error["detail"] = self.detail
        return {"errors": [error]}


def bad_request(detail: str) -> HTTPError:
    return HTTPError(400, detail)


def not_found(detail: str) -> HTTPError:
    return HTTPError(404, detail)


def conflict(detail: str) -> HTTPError:
    return HTTPError(409, detail)


def unprocessable(detail: str) -> HTTPError:
    return HTTPError(422, detail)
