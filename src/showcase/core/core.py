from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from showcase.config import Config

if TYPE_CHECKING:
    from showcase.core.modules.content.models import ContentType
    from showcase.core.modules.content.service import ContentService


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    from showcase.core.modules.access.service import AccessService  # noqa: PLC0415
    from showcase.core.modules.auth.service import AuthService  # noqa: PLC0415
    from showcase.core.modules.blog.service import BlogService  # noqa: PLC0415
    from showcase.core.modules.counter.service import CounterService  # noqa: PLC0415
    from showcase.core.modules.event.service import EventService  # noqa: PLC0415
    from showcase.core.modules.gallery.service import GalleryService  # noqa: PLC0415
    from showcase.core.modules.hero_slider.service import HeroSliderService  # noqa: PLC0415
    from showcase.core.modules.media.service import MediaService  # noqa: PLC0415
    from showcase.core.modules.password_reset.service import PasswordResetService  # noqa: PLC0415
    from showcase.core.modules.service.service import ServiceOfferingService  # noqa: PLC0415
    from showcase.core.modules.user.service import UserService  # noqa: PLC0415
    from showcase.core.modules.work.service import WorkService  # noqa: PLC0415

    user: UserService
    auth: AuthService
    access: AccessService
    password_reset: PasswordResetService
    counter: CounterService
    media: MediaService
    blog: BlogService
    event: EventService
    gallery: GalleryService
    work: WorkService
    service: ServiceOfferingService
    hero_slider: HeroSliderService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._database = database

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters for initialization - user must be first so the admin cache is warm
        service_configs = [
            ("user", "showcase.core.modules.user.service", "UserService"),
            ("auth", "showcase.core.modules.auth.service", "AuthService"),
            ("access", "showcase.core.modules.access.service", "AccessService"),
            ("password_reset", "showcase.core.modules.password_reset.service", "PasswordResetService"),
            ("counter", "showcase.core.modules.counter.service", "CounterService"),
            ("media", "showcase.core.modules.media.service", "MediaService"),
            ("blog", "showcase.core.modules.blog.service", "BlogService"),
            ("event", "showcase.core.modules.event.service", "EventService"),
            ("gallery", "showcase.core.modules.gallery.service", "GalleryService"),
            ("work", "showcase.core.modules.work.service", "WorkService"),
            ("service", "showcase.core.modules.service.service", "ServiceOfferingService"),
            ("hero_slider", "showcase.core.modules.hero_slider.service", "HeroSliderService"),
        ]

        # Dynamically import and instantiate services
        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def content(self, content_type: ContentType) -> ContentService[Any]:
        """Get the content service handling a resource type."""
        return cast("ContentService[Any]", getattr(self, content_type.value))

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, database, and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config) -> None:
        """Initialize core with config, MongoDB, and auto-register services."""
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Start all services on application startup."""
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        await self.mongo_client.aclose()
