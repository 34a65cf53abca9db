from textwrap import dedent

import pydantic
from fastapi import FastAPI
from fastapi.routing import APIRoute
from loguru import logger

from userdir_api.db.exceptions import UserConstraintError
from userdir_api.db.exceptions import UserStoreError
from userdir_api.db.pool import UserDBPool
from userdir_api.db.repository_user import UserRepository
from userdir_api.errors import handle_broad_exceptions
from userdir_api.errors import handle_pydantic_validation_errors
from userdir_api.errors import handle_user_store_errors
from userdir_api.monitoring.logger import configure_logger
from userdir_api.monitoring.request_context import RequestContextMiddleware
from userdir_api.routes.routes_health import ROUTER_HEALTH
from userdir_api.routes.routes_users import ROUTER_USERS
from userdir_api.settings import Settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application.

    Configuration is loaded directly from environment variables via pydantic-settings.
    - Deployed: set variables in the service environment
    - Local development: use a .env file in the project root
    """
    settings = settings or Settings()

    configure_logger(log_level=settings.log_level)

    logger.info(
        "Configuration loaded successfully",
        pool_min_size=settings.db_pool_min_size,
        pool_max_size=settings.db_pool_max_size,
        create_schema_on_startup=settings.create_schema_on_startup,
    )

    app = FastAPI(
        title=settings.service_name,
        version="v1",
        description=dedent(
            """
        Registration, profile lookup, profile search and profile update
        for users authenticated through an external identity provider.
        """
        ),
        generate_unique_id_function=custom_generate_unique_id,
    )
    app.state.settings = settings

    user_db_pool = UserDBPool(
        settings.database_connection_string,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        command_timeout=settings.db_command_timeout,
        connect_timeout=settings.db_connect_timeout,
    )
    app.state.user_db_pool = user_db_pool

    # Add request context middleware for tracking who/where requests come from
    app.add_middleware(RequestContextMiddleware)
    app.include_router(ROUTER_HEALTH, prefix="/api")
    app.include_router(ROUTER_USERS, prefix="/api")

    @app.on_event("startup")
    async def startup_user_db():
        """Initialize the user directory pool and optionally bootstrap the schema."""
        await app.state.user_db_pool.initialize()

        if settings.create_schema_on_startup:
            try:
                await UserRepository(app.state.user_db_pool).create_user_table()
            except UserConstraintError:
                logger.info("Users table already exists - skipping schema bootstrap")

    @app.on_event("shutdown")
    async def shutdown_user_db():
        """Close user directory database connections."""
        await app.state.user_db_pool.close()
        logger.info("User directory database closed")

    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=UserStoreError,
        handler=handle_user_store_errors,
    )

    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
