"""Mustache view resolver.

Resolves ``home`` to ``/home.html`` (by default), reads it from the configured
resource namespace, compiles it and wraps it in a MustacheView::

    resolver = create_resolver(namespace=DirectoryResourceNamespace("templates"))
    html = resolver.resolve("home", {"name": "World"})
"""

from collections.abc import Iterable, Mapping
from contextlib import closing
from typing import Any, cast

from mustache_views.base import AbstractTemplateView, UrlBasedViewResolver
from mustache_views.config import ViewSettings, lookup_encoding
from mustache_views.engine import MustacheFactory
from mustache_views.exceptions import ResolverNotInitializedException, ViewException
from mustache_views.logging_config import get_logger, log_with_context
from mustache_views.protocols import ModelContribution, ResourceNamespace
from mustache_views.resources import LazyResourceReader, normalize_path
from mustache_views.views import MustacheView

logger = get_logger(__name__)


class MustacheViewResolver(UrlBasedViewResolver):
    """A view resolver for mustache templates.

    Defaults: content type ``text/html;charset=UTF-8``, prefix ``/``,
    suffix ``.html``, encoding UTF-8 (see ViewSettings).

    Args:
        view_class: MustacheView or a subclass of it
        contributions: Model contributions, applied in order. Cannot be None.
        namespace: Resource namespace templates are read from
        settings: Immutable view settings
    """

    def __init__(
        self,
        view_class: type[MustacheView] = MustacheView,
        contributions: Iterable[ModelContribution] = (),
        *,
        namespace: ResourceNamespace | None = None,
        settings: ViewSettings | None = None,
    ) -> None:
        super().__init__(view_class, contributions, namespace=namespace, settings=settings)
        self._mustache_factory: MustacheFactory | None = None

    @property
    def mustache_factory(self) -> MustacheFactory | None:
        """The mustache template engine (None until initialized)."""
        return self._mustache_factory

    @property
    def encoding(self) -> str:
        return self.settings.encoding

    def initialize(self) -> None:
        """Validate configuration and build the mustache factory."""
        super().initialize()
        self._mustache_factory = MustacheFactory(self.read, warn_missing=self.settings.warn_missing)
        log_with_context(
            logger,
            "info",
            "Mustache view resolver initialized",
            view_class=self.view_class.__name__,
            prefix=self.settings.prefix,
            suffix=self.settings.suffix,
            encoding=self.settings.encoding,
            contributions=len(self.contributions),
            event_type="resolver_initialized",
        )

    def build_view(self, view: AbstractTemplateView) -> None:
        """Read, compile and attach the template for ``view.url``.

        The reader is closed on every path, including read and compile failures.
        """
        if self._mustache_factory is None:
            raise ResolverNotInitializedException()
        if not isinstance(view, MustacheView):
            raise ViewException(f"Cannot build {type(view).__name__}: expected a MustacheView")
        if view.url is None:
            raise ViewException("View has no url to build from")
        resource_name = view.url
        try:
            with closing(self.read(resource_name)) as reader:
                mustache = self._mustache_factory.compile(reader, resource_name)
        except ViewException as e:
            log_with_context(
                logger,
                "warning",
                "Failed to build view",
                url=resource_name,
                error_code=e.code.value,
                error=e.message,
                event_type="view_build_failed",
            )
            raise
        view.set_template(mustache)

    def read(self, path: str) -> LazyResourceReader:
        """Open a reader for the resource at ``path``.

        Never fails for a missing resource: the reader raises
        TemplateNotFoundException on its first read.
        """
        if self.namespace is None:
            raise ResolverNotInitializedException("No resource namespace configured")
        return LazyResourceReader(self.namespace, normalize_path(path), self.settings.encoding)

    def set_encoding(self, encoding: str) -> None:
        """Set the charset encoding. Default is UTF-8.

        Raises:
            UnsupportedEncodingException: Immediately, leaving the current encoding in place
        """
        encoding = lookup_encoding(encoding)
        self.settings = self.settings.model_copy(update={"encoding": encoding})

    def required_view_class(self) -> type[MustacheView]:
        return MustacheView

    def resolve_view_name(self, view_name: str) -> MustacheView:
        # set_view_class only accepts MustacheView subclasses
        return cast(MustacheView, super().resolve_view_name(view_name))

    def resolve(self, view_name: str, model: Mapping[str, Any] | None = None) -> str:
        """Resolve ``view_name`` and render it with ``model``."""
        return self.resolve_view_name(view_name).render_to_string(model)


def create_resolver(
    settings: ViewSettings | None = None,
    *,
    namespace: ResourceNamespace,
    contributions: Iterable[ModelContribution] = (),
    view_class: type[MustacheView] = MustacheView,
) -> MustacheViewResolver:
    """Build and initialize a ready-to-use resolver."""
    resolver = MustacheViewResolver(view_class, contributions, namespace=namespace, settings=settings)
    resolver.initialize()
    return resolver
