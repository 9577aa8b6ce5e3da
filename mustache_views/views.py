"""Mustache-backed views."""

import io
import re
from collections.abc import Mapping
from typing import Any, TextIO

from fastapi.responses import Response

from mustache_views.base import AbstractTemplateView
from mustache_views.config import DEFAULT_CONTENT_TYPE, DEFAULT_ENCODING
from mustache_views.engine import Mustache
from mustache_views.exceptions import ViewException

_CHARSET_PARAM = re.compile(r"(;\s*charset=)[^;]*", re.IGNORECASE)


def content_type_with_charset(content_type: str, encoding: str) -> str:
    """Make the ``charset`` parameter of ``content_type`` name ``encoding``.

    Examples:
        >>> content_type_with_charset("text/html;charset=UTF-8", "ISO-8859-1")
        'text/html;charset=ISO-8859-1'
        >>> content_type_with_charset("text/plain", "UTF-8")
        'text/plain;charset=UTF-8'
    """
    if _CHARSET_PARAM.search(content_type):
        return _CHARSET_PARAM.sub(lambda m: m.group(1) + encoding, content_type, count=1)
    return f"{content_type};charset={encoding}"


class MustacheView(AbstractTemplateView):
    """A view rendered by a compiled mustache template."""

    def __init__(self) -> None:
        super().__init__()
        self._template: Mustache | None = None

    @property
    def template(self) -> Mustache | None:
        return self._template

    def set_template(self, template: Mustache) -> None:
        self._template = template

    def render(self, model: Mapping[str, Any] | None, writer: TextIO) -> None:
        """Render ``model`` (plus contributions) into ``writer``.

        Raises:
            ViewException: If no template has been set
        """
        if self._template is None:
            raise ViewException(f"View {self.url!r} has no template; it was never built")
        self._template.execute(writer, self.create_merged_model(model))

    def render_to_string(self, model: Mapping[str, Any] | None = None) -> str:
        writer = io.StringIO()
        self.render(model, writer)
        return writer.getvalue()

    def to_response(self, model: Mapping[str, Any] | None = None, status_code: int = 200) -> Response:
        """Render into a FastAPI response.

        The body is encoded with the view encoding and the content type's
        charset is set to match it.
        """
        encoding = self.encoding or DEFAULT_ENCODING
        body = self.render_to_string(model).encode(encoding)
        return Response(
            content=body,
            status_code=status_code,
            media_type=content_type_with_charset(self.content_type or DEFAULT_CONTENT_TYPE, encoding),
        )
