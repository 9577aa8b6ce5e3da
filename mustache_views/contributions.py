"""Model contributions applied to every rendered view."""

from collections.abc import Mapping
from typing import Any

from mustache_views.protocols import ModelContribution

__all__ = ["ModelContribution", "StaticModelContribution"]


class StaticModelContribution:
    """Copy a fixed set of values into every model (site name, asset URLs, ...)."""

    def __init__(self, values: Mapping[str, Any] | None = None, **kwargs: Any):
        self.values = {**(values or {}), **kwargs}

    def contribute(self, model: dict[str, Any]) -> None:
        model.update(self.values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.values!r})"
