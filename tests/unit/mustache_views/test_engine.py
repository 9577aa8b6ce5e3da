"""Unit tests for the chevron-backed mustache engine."""

import io

import pytest

from mustache_views.engine import MustacheFactory, resolve_partial_path
from mustache_views.exceptions import TemplateCompileException, TemplateNotFoundException
from mustache_views.resources import LazyResourceReader, MappingResourceNamespace


class CountingNamespace(MappingResourceNamespace):
    """Mapping namespace that counts lookups per path."""

    def __init__(self, resources):
        super().__init__(resources)
        self.lookups: dict[str, int] = {}

    def get_resource_stream(self, path):
        self.lookups[path] = self.lookups.get(path, 0) + 1
        return super().get_resource_stream(path)


def make_factory(namespace) -> MustacheFactory:
    return MustacheFactory(lambda path: LazyResourceReader(namespace, path, "UTF-8"))


class TestResolvePartialPath:
    """Tests for partial path resolution."""

    @pytest.mark.parametrize(
        "template_name,partial_name,expected",
        [
            ("/home.html", "footer", "/footer.html"),
            ("/pages/home.html", "footer", "/pages/footer.html"),
            ("/pages/home.html", "/shared/nav", "/shared/nav.html"),
            ("/pages/home.html", "footer.txt", "/pages/footer.txt"),
            ("/pages/home.html", "../footer", "/footer.html"),
            ("/pages/home.html", " footer ", "/pages/footer.html"),
        ],
    )
    def test_resolve_partial_path(self, template_name, partial_name, expected):
        """Test partials resolve relative to the including template."""
        assert resolve_partial_path(template_name, partial_name) == expected


class TestCompile:
    """Tests for MustacheFactory.compile."""

    def test_compile_keeps_name_and_source(self):
        """Test compiled templates carry their identity and source."""
        factory = make_factory(MappingResourceNamespace())

        mustache = factory.compile(io.StringIO("Hello {{name}}"), "/home.html")

        assert mustache.name == "/home.html"
        assert mustache.source == "Hello {{name}}"
        assert ("variable", "name") in mustache.tokens

    def test_compile_rejects_mismatched_section(self):
        """Test malformed templates raise TemplateCompileException naming the template."""
        factory = make_factory(MappingResourceNamespace())

        with pytest.raises(TemplateCompileException) as exc_info:
            factory.compile(io.StringIO("{{#items}}x{{/other}}"), "/broken.html")

        assert exc_info.value.name == "/broken.html"
        assert exc_info.value.__cause__ is not None

    def test_compile_propagates_missing_resource(self):
        """Test a missing resource surfaces from compile."""
        namespace = MappingResourceNamespace()
        factory = make_factory(namespace)

        with pytest.raises(TemplateNotFoundException):
            factory.compile(LazyResourceReader(namespace, "/missing.html", "UTF-8"), "/missing.html")


class TestRender:
    """Tests for rendering compiled templates."""

    def test_render_variables(self):
        """Test variable substitution."""
        factory = make_factory(MappingResourceNamespace())
        mustache = factory.compile(io.StringIO("Hello {{name}}"), "/home.html")

        assert mustache.render({"name": "World"}) == "Hello World"

    def test_render_escapes_html(self):
        """Test double-brace variables are HTML-escaped."""
        factory = make_factory(MappingResourceNamespace())
        mustache = factory.compile(io.StringIO("{{value}}|{{{value}}}"), "/raw.html")

        assert mustache.render({"value": "<b>"}) == "&lt;b&gt;|<b>"

    def test_execute_writes_to_writer(self):
        """Test execute writes the output and returns the writer."""
        factory = make_factory(MappingResourceNamespace())
        mustache = factory.compile(io.StringIO("Hi {{name}}"), "/hi.html")
        writer = io.StringIO()

        assert mustache.execute(writer, {"name": "Ann"}) is writer
        assert writer.getvalue() == "Hi Ann"

    def test_partials_load_through_reader_hook(self):
        """Test partials are read from the same namespace."""
        namespace = MappingResourceNamespace({"/pages/footer.html": "<footer>{{year}}</footer>"})
        factory = make_factory(namespace)
        mustache = factory.compile(io.StringIO("Body{{> footer}}"), "/pages/about.html")

        assert mustache.render({"year": 2024}) == "Body<footer>2024</footer>"

    def test_partial_loaded_once_per_render(self):
        """Test a partial used in a loop is read once per render."""
        namespace = CountingNamespace({"/item.html": "<li>{{n}}</li>"})
        factory = make_factory(namespace)
        mustache = factory.compile(io.StringIO("<ul>{{#items}}{{> item}}{{/items}}</ul>"), "/list.html")

        output = mustache.render({"items": [{"n": 1}, {"n": 2}, {"n": 3}]})

        assert output == "<ul><li>1</li><li>2</li><li>3</li></ul>"
        assert namespace.lookups == {"/item.html": 1}

    def test_missing_partial_raises(self):
        """Test a missing partial raises instead of rendering empty."""
        factory = make_factory(MappingResourceNamespace())
        mustache = factory.compile(io.StringIO("A{{> nope}}B"), "/home.html")

        with pytest.raises(TemplateNotFoundException) as exc_info:
            mustache.render({})

        assert exc_info.value.path == "/nope.html"


class TestNestedPartials:
    """Tests for partials that include other partials."""

    def test_nested_partial_resolves_against_including_partial(self):
        """Test a partial's own partials resolve relative to the partial's directory."""
        namespace = MappingResourceNamespace(
            {
                "/pages/about.html": "A{{> footer}}",
                "/pages/footer.html": "F",
            }
        )
        factory = make_factory(namespace)
        mustache = factory.compile(io.StringIO("I{{> /pages/about}}"), "/index.html")

        assert mustache.render({}) == "IAF"

    def test_same_partial_name_in_two_directories(self):
        """Test partials with the same name in different directories do not collide."""
        namespace = MappingResourceNamespace(
            {
                "/footer.html": "root-footer",
                "/pages/about.html": "[{{> footer}}]",
                "/pages/footer.html": "page-footer",
            }
        )
        factory = make_factory(namespace)
        mustache = factory.compile(io.StringIO("{{> footer}} {{> pages/about}}"), "/index.html")

        assert mustache.render({}) == "root-footer [page-footer]"

    def test_malformed_partial_raises_compile_error(self):
        """Test a partial with bad syntax raises TemplateCompileException naming the partial."""
        namespace = MappingResourceNamespace({"/p.html": "{{#a}}x{{/b}}"})
        factory = make_factory(namespace)
        mustache = factory.compile(io.StringIO("I{{> p}}"), "/index.html")

        with pytest.raises(TemplateCompileException) as exc_info:
            mustache.render({})

        assert exc_info.value.name == "/p.html"
        assert exc_info.value.__cause__ is not None


class TestTokens:
    """Tests for the compiled token list."""

    def test_partial_tokens_are_absolute(self):
        """Test compile stores partial references as absolute paths."""
        factory = make_factory(MappingResourceNamespace())

        mustache = factory.compile(io.StringIO("Body{{> footer}}"), "/pages/about.html")

        assert ("partial", "/pages/footer.html") in mustache.tokens

    def test_render_uses_compiled_tokens(self):
        """Test rendering works from the token list, not the source text."""
        factory = make_factory(MappingResourceNamespace())
        mustache = factory.compile(io.StringIO("Hello {{name}}"), "/home.html")
        mustache.source = "stale"

        assert mustache.render({"name": "World"}) == "Hello World"
