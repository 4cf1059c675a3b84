from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from taskboard.app import App
from taskboard.config import Config
from taskboard.errors import PersistenceError, UserError
from taskboard.web.error_handlers import (
    general_exception_handler,
    persistence_error_handler,
    request_validation_error_handler,
    user_error_handler,
)
from taskboard.web.middleware import RequestContextMiddleware
from taskboard.web.openapi import set_custom_openapi
from taskboard.web.routers import (
    auth_router,
    comments_router,
    metadata_router,
    notifications_router,
    profile_router,
    tasks_router,
    users_router,
)

API_PREFIX = "/api/v1"

API_ROUTERS = (
    auth_router,
    profile_router,
    users_router,
    tasks_router,
    comments_router,
    notifications_router,
    metadata_router,
)


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Build the HTTP layer around an App facade.

    The facade is attached to app.state immediately, so routes work without
    running the lifespan (tests use this); the lifespan starts and stops Core.
    """

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncGenerator[None]:
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="Taskboard API", lifespan=lifespan)
    app.state.app = app_instance
    app.state.config = config

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )
    app.add_middleware(RequestContextMiddleware)

    @app.get("/health", tags=["metadata"])
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    for router in API_ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)
    return app
