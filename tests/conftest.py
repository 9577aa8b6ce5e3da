"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from mustache_views.config import ViewSettings
from mustache_views.core.app_factory import create_app
from mustache_views.resolver import MustacheViewResolver, create_resolver
from mustache_views.resources import MappingResourceNamespace


@pytest.fixture
def view_settings(tmp_path):
    """ViewSettings with defaults, isolated from the environment's templates dir."""
    return ViewSettings(templates_dir=tmp_path)


@pytest.fixture
def namespace():
    """In-memory template tree used across resolver and app tests."""
    return MappingResourceNamespace(
        {
            "/index.html": "<h1>Index</h1>{{> header}}",
            "/header.html": "<header>{{site}}</header>",
            "/home.html": "Hello {{name}}",
            "/greeting.html": "{{greeting}}, {{name}}!",
            "/broken.html": "{{#open}}never closed properly{{/other}}",
            "/pages/about.html": "About{{> footer}}",
            "/pages/footer.html": " | footer",
            "/unicode.html": "Grüße, {{name}} ☃",
        }
    )


@pytest.fixture
def resolver(namespace, view_settings) -> MustacheViewResolver:
    """Initialized resolver over the in-memory namespace."""
    return create_resolver(view_settings, namespace=namespace)


@pytest.fixture
def app(namespace, view_settings):
    """FastAPI app serving the in-memory namespace."""
    return create_app(view_settings, namespace=namespace)


@pytest.fixture
def test_client(app):
    """FastAPI test client with lifespan context."""
    with TestClient(app) as client:
        yield client


class RecordingReader:
    """Reader double that records close() calls."""

    def __init__(self, content: str = "", error: Exception | None = None):
        self.content = content
        self.error = error
        self.close_calls = 0

    def read(self, size: int = -1) -> str:
        if self.error is not None:
            raise self.error
        return self.content

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def recording_reader_factory():
    """Build RecordingReader instances."""
    return RecordingReader
