"""FastAPI dependencies for dependency injection."""

from fastapi import Request

from mustache_views.resolver import MustacheViewResolver


async def get_view_resolver(request: Request) -> MustacheViewResolver:
    """
    Get the shared view resolver from app state.

    Args:
        request: The FastAPI request object.

    Returns:
        The initialized MustacheViewResolver.

    Raises:
        RuntimeError: If the resolver is not initialized.
    """
    resolver: MustacheViewResolver | None = getattr(request.app.state, "view_resolver", None)

    if resolver is None or not resolver.initialized:
        raise RuntimeError("View resolver not initialized. This should never happen.")

    return resolver
