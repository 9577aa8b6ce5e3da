"""Application factory for creating and configuring the FastAPI app."""

from collections.abc import Iterable

from fastapi import FastAPI

from mustache_views import __version__
from mustache_views.config import ViewSettings, get_settings
from mustache_views.core.lifespan import build_lifespan
from mustache_views.middleware.error_handlers import register_error_handlers
from mustache_views.protocols import ModelContribution, ResourceNamespace
from mustache_views.routers import health_router, view_router


def create_app(
    settings: ViewSettings | None = None,
    *,
    namespace: ResourceNamespace | None = None,
    contributions: Iterable[ModelContribution] = (),
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: View settings (default: loaded from environment / .env)
        namespace: Template resource namespace (default: settings.templates_dir on disk)
        contributions: Model contributions applied to every rendered view

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Mustache Views",
        description="Renders mustache templates as HTML pages. `GET /<view>` renders `<view>.html`.",
        version=__version__,
        lifespan=build_lifespan(settings, namespace, tuple(contributions)),
    )

    register_error_handlers(app)

    # Health first: the view router's catch-all route would shadow it
    app.include_router(health_router.router, tags=["health"])
    app.include_router(view_router.router, tags=["views"])

    return app
