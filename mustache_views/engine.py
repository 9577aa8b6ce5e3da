"""Mustache template engine backed by chevron.

Templates and their partials are loaded through a single reader hook, so a
``{{> partial}}`` is resolved from the same resource namespace, with the same
encoding, as the template that includes it.
"""

import posixpath
from collections.abc import Callable, Mapping
from contextlib import closing
from typing import Any, TextIO

import chevron
from chevron.tokenizer import tokenize

from mustache_views.exceptions import TemplateCompileException
from mustache_views.protocols import TemplateReader


def resolve_partial_path(template_name: str, partial_name: str) -> str:
    """Resolve a partial reference against the template that includes it.

    Relative names resolve inside the including template's directory; names
    without an extension take the including template's extension.

    Examples:
        >>> resolve_partial_path("/pages/home.html", "footer")
        '/pages/footer.html'
        >>> resolve_partial_path("/pages/home.html", "/shared/nav")
        '/shared/nav.html'
    """
    partial_name = partial_name.strip()
    directory, _, filename = template_name.rpartition("/")
    _, extension = posixpath.splitext(filename)
    if not posixpath.splitext(partial_name)[1]:
        partial_name += extension
    if not partial_name.startswith("/"):
        partial_name = f"{directory}/{partial_name}"
    return posixpath.normpath(partial_name)


Token = tuple[str, str]


def tokenize_template(source: str, name: str) -> list[Token]:
    """Tokenize ``source`` with partial references made absolute.

    Each ``{{> partial}}`` key is resolved against ``name``, so a partial that
    includes another partial looks it up relative to itself.

    Raises:
        TemplateCompileException: When the source is not valid mustache
    """
    try:
        tokens = list(tokenize(source))
    except chevron.ChevronError as e:
        raise TemplateCompileException(name, str(e)) from e
    return [
        (tag, resolve_partial_path(name, key)) if tag == "partial" else (tag, key)
        for tag, key in tokens
    ]


class _PartialSources(dict):
    """Tokenized partials for one render, keyed by absolute path and loaded on first reference."""

    def __init__(self, factory: "MustacheFactory"):
        super().__init__()
        self._factory = factory

    def __missing__(self, path: str) -> list[Token]:
        with closing(self._factory.get_reader(path)) as reader:
            source = reader.read()
        tokens = tokenize_template(source, path)
        self[path] = tokens
        return tokens


class Mustache:
    """A compiled template, identified by its resource path."""

    def __init__(self, factory: "MustacheFactory", name: str, source: str, tokens: list[Token]):
        self.name = name
        self.source = source
        self.tokens = tokens
        self._factory = factory

    def render(self, scope: Mapping[str, Any]) -> str:
        return chevron.render(
            template=self.tokens,
            data=dict(scope),
            partials_dict=_PartialSources(self._factory),
            warn=self._factory.warn_missing,
        )

    def execute(self, writer: TextIO, scope: Mapping[str, Any]) -> TextIO:
        """Render into ``writer`` and return it."""
        writer.write(self.render(scope))
        return writer

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class MustacheFactory:
    """Compile mustache templates read through a reader hook.

    Args:
        get_reader: Opens a character reader for a resource path. Used for
            partials; top-level templates are handed in already open.
        warn_missing: Whether chevron warns about variables missing from the model
    """

    def __init__(self, get_reader: Callable[[str], TemplateReader], *, warn_missing: bool = False) -> None:
        self._get_reader = get_reader
        self.warn_missing = warn_missing

    def get_reader(self, path: str) -> TemplateReader:
        return self._get_reader(path)

    def compile(self, reader: TemplateReader, name: str) -> Mustache:
        """Compile the template source available from ``reader``.

        The caller owns ``reader`` and is responsible for closing it.

        Raises:
            TemplateNotFoundException: When the reader's resource does not exist
            TemplateCompileException: When the source is not valid mustache
        """
        source = reader.read()
        return Mustache(self, name, source, tokenize_template(source, name))
