"""
Framework-neutral JSON:API server.

Resources implement ``CRUD`` (and optionally ``ToManyRelations``), schemas
describe their wire shape, and ``API`` registers the routes on any object
implementing ``Routeable``.
"""

from .api import API, MEDIA_TYPE
from .errors import HTTPError
from .request import Pagination, Request, ResourceData, Response
from .resolver import RequestURLResolver, StaticResolver
from .resource import CRUD, ToManyRelations
from .routing import HandlerFunc, HTTPRequest, HTTPResponse, Routeable
from .schema import Reference, ResourceSchema

__all__ = [
    "API",
    "CRUD",
    "HTTPError",
    "HTTPRequest",
    "HTTPResponse",
    "HandlerFunc",
    "MEDIA_TYPE",
    "Pagination",
    "Reference",
    "Request",
    "RequestURLResolver",
    "ResourceData",
    "ResourceSchema",
    "Response",
    "Routeable",
    "StaticResolver",
    "ToManyRelations",
]
