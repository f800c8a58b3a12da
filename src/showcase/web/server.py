from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from showcase.app import App
from showcase.config import Config
from showcase.errors import StorageUnavailableError, UserError
from showcase.web.error_handlers import general_exception_handler, storage_unavailable_handler, user_error_handler
from showcase.web.openapi import set_custom_openapi
from showcase.web.routers import (
    admin_router,
    auth_router,
    blogs_router,
    events_router,
    gallery_router,
    hero_sliders_router,
    media_router,
    services_router,
    works_router,
)


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        # Store app instance and config in app state
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Showcase API",
        lifespan=lifespan,
        openapi_tags=[],  # Tags will be added by custom OpenAPI function
    )

    # Browsers on the public site and the admin panel call the API cross-origin
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "commit": config.git_commit_hash, "build_time": config.build_time}

    # API v1 routes
    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")
    app.include_router(blogs_router, prefix="/api/v1")
    app.include_router(events_router, prefix="/api/v1")
    app.include_router(gallery_router, prefix="/api/v1")
    app.include_router(works_router, prefix="/api/v1")
    app.include_router(services_router, prefix="/api/v1")
    app.include_router(hero_sliders_router, prefix="/api/v1")
    app.include_router(media_router)

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(StorageUnavailableError, storage_unavailable_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
