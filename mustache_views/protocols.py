"""Protocol definitions for the collaborators a view resolver consumes."""

from typing import Any, BinaryIO, Protocol


class ResourceNamespace(Protocol):
    """Hierarchical store of template sources, keyed by absolute path.

    Mirrors a web container's static resource lookup: implementations return
    an open binary stream, or ``None`` when nothing exists at ``path``.
    """

    def get_resource_stream(self, path: str) -> BinaryIO | None:
        """Open the resource at ``path`` (always starts with ``/``)."""
        ...


class ModelContribution(Protocol):
    """Pluggable step that adds or overrides entries in a view's model."""

    def contribute(self, model: dict[str, Any]) -> None:
        """Mutate ``model`` in place."""
        ...


class TemplateReader(Protocol):
    """Character stream handed to the templating engine."""

    def read(self, size: int = -1) -> str: ...

    def close(self) -> None: ...
