"""URL-based view resolution.

Maps a logical view name to a resource path (``prefix + name + suffix``),
instantiates the configured view class and hands it to the concrete resolver
to build. Template-engine specifics live in subclasses.
"""

from collections.abc import Iterable, Mapping
from typing import Any, TextIO

from mustache_views.config import ViewSettings
from mustache_views.exceptions import ConfigurationException, ResolverNotInitializedException
from mustache_views.logging_config import get_logger, log_with_context
from mustache_views.protocols import ModelContribution, ResourceNamespace

logger = get_logger(__name__)


class AbstractTemplateView:
    """A renderable unit: resource url plus response metadata."""

    def __init__(self) -> None:
        self.url: str | None = None
        self.content_type: str | None = None
        self.encoding: str | None = None
        self.contributions: tuple[ModelContribution, ...] = ()

    def create_merged_model(self, model: Mapping[str, Any] | None) -> dict[str, Any]:
        """Copy ``model`` and apply contributions in registration order.

        Later contributions overwrite earlier ones and the caller's keys.
        """
        merged = dict(model or {})
        for contribution in self.contributions:
            contribution.contribute(merged)
        return merged

    def render(self, model: Mapping[str, Any] | None, writer: TextIO) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.url!r})"


class UrlBasedViewResolver:
    """Base resolver: view class, path composition and lifecycle.

    Lifecycle is two-state: unconfigured after construction, ready after
    ``initialize()``. Views are never cached; every resolution builds a new one.
    """

    def __init__(
        self,
        view_class: type[AbstractTemplateView],
        contributions: Iterable[ModelContribution] = (),
        *,
        namespace: ResourceNamespace | None = None,
        settings: ViewSettings | None = None,
    ) -> None:
        if contributions is None:
            raise ConfigurationException("Model contributions cannot be None")
        self.contributions: tuple[ModelContribution, ...] = tuple(contributions)
        self.namespace = namespace
        self.settings = settings or ViewSettings()
        self.set_view_class(view_class)
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def view_class(self) -> type[AbstractTemplateView]:
        return self._view_class

    def set_view_class(self, view_class: type[AbstractTemplateView]) -> None:
        required = self.required_view_class()
        if not isinstance(view_class, type) or not issubclass(view_class, required):
            raise ConfigurationException(
                f"Given view class {getattr(view_class, '__name__', view_class)!r} "
                f"is not of type {required.__name__}",
                details={"required_view_class": required.__name__},
            )
        self._view_class = view_class

    def required_view_class(self) -> type[AbstractTemplateView]:
        """The view type this resolver guarantees to produce."""
        return AbstractTemplateView

    def initialize(self) -> None:
        """Validate configuration. Subclasses extend this and call super() first."""
        if self.namespace is None:
            raise ConfigurationException("A resource namespace is required")
        required = self.required_view_class()
        if not issubclass(self._view_class, required):
            raise ConfigurationException(f"View class must be a subclass of {required.__name__}")
        self._initialized = True

    def url_for(self, view_name: str) -> str:
        return f"{self.settings.prefix}{view_name}{self.settings.suffix}"

    def resolve_view_name(self, view_name: str) -> AbstractTemplateView:
        """Create and build a fresh view for ``view_name``."""
        if not self._initialized:
            raise ResolverNotInitializedException()
        view = self._view_class()
        view.url = self.url_for(view_name)
        view.content_type = self.settings.content_type
        view.encoding = self.settings.encoding
        view.contributions = self.contributions
        log_with_context(
            logger,
            "debug",
            "Resolving view",
            view_name=view_name,
            url=view.url,
            event_type="view_resolve",
        )
        self.build_view(view)
        return view

    def build_view(self, view: AbstractTemplateView) -> None:
        raise NotImplementedError
