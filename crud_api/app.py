import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from crud_api.core.config import Settings, get_settings
from crud_api.core.observability import setup_logging
from crud_api.db.session import Database
from crud_api.jsonapi import API, RequestURLResolver, StaticResolver
from crud_api.repositories import ChocolateStorage, UserStorage
from crud_api.resources import ChocolateResource, ChocolateSchema, UserResource, UserSchema
from crud_api.routers import ping as ping_router
from crud_api.routers.jsonapi_adapter import FastAPIRouter

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Give every request an id, visible to resources through the request context."""

    async def dispatch(self, request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers.setdefault("X-Request-ID", request_id)
        return response


def _open_database(settings: Settings) -> Database:
    try:
        database = Database(settings.database_url)
        database.create_all()
    except (SQLAlchemyError, RuntimeError) as exc:
        logger.critical("Database initialisation failed: %s", exc)
        raise SystemExit(f"Failed to initialise database: {exc}") from exc
    return database


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory usable by uvicorn (``uvicorn crud_api.app:create_app --factory``)."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database = _open_database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        database.dispose()

    app = FastAPI(title="Sweets JSON:API", lifespan=lifespan)
    app.add_middleware(RequestContextMiddleware)
    app.state.settings = settings
    app.state.database = database

    resolver = StaticResolver(settings.base_url) if settings.base_url else RequestURLResolver()
    api = API(prefix=settings.api_prefix, resolver=resolver, router=FastAPIRouter(app))
    user_storage = UserStorage(database)
    chocolate_storage = ChocolateStorage(database)
    api.add_resource(UserSchema(), UserResource(user_storage, chocolate_storage))
    api.add_resource(ChocolateSchema(), ChocolateResource(chocolate_storage, user_storage))
    app.state.api = api

    app.include_router(ping_router.router)
    return app
