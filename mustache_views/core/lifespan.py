"""Application lifespan management."""

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import FastAPI

from mustache_views import __version__
from mustache_views.config import ViewSettings
from mustache_views.logging_config import get_logger, log_with_context
from mustache_views.protocols import ModelContribution, ResourceNamespace
from mustache_views.resolver import create_resolver
from mustache_views.resources import DirectoryResourceNamespace

logger = get_logger(__name__)


def build_lifespan(
    settings: ViewSettings,
    namespace: ResourceNamespace | None = None,
    contributions: tuple[ModelContribution, ...] = (),
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Create a lifespan that initializes the view resolver on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifespan - startup and shutdown events.

        Exceptions after yield are re-raised so FastAPI can clean up.
        """
        log_with_context(
            logger,
            "info",
            "Starting mustache views application",
            version=__version__,
            event_type="app_startup",
        )

        resource_namespace = namespace if namespace is not None else DirectoryResourceNamespace(settings.templates_dir)
        # Startup aborts if the resolver cannot initialize
        app.state.view_resolver = create_resolver(
            settings,
            namespace=resource_namespace,
            contributions=contributions,
        )
        log_with_context(
            logger,
            "info",
            "View resolver ready",
            namespace=repr(resource_namespace),
            event_type="view_resolver_ready",
        )

        try:
            yield
        except Exception as e:
            log_with_context(
                logger,
                "error",
                "Application error during lifespan",
                error=str(e),
                error_type=type(e).__name__,
                event_type="app_error",
            )
            raise
        finally:
            app.state.view_resolver = None
            log_with_context(
                logger,
                "info",
                "Shutting down mustache views application",
                event_type="app_shutdown",
            )

    return lifespan
