"""Unit tests for the compiled template namespace."""

import pytest
from jinja2 import TemplateNotFound, TemplateSyntaxError, UndefinedError

from atomic_templates.namespace import ROOT_NAME, NamespaceLoader, TemplateNamespace


def test_namespace_starts_empty():
    """Test a new namespace has no templates and does not resolve its root name."""
    namespace = TemplateNamespace()

    assert len(namespace) == 0
    assert namespace.name == ROOT_NAME
    assert namespace.lookup(ROOT_NAME) is None
    assert ROOT_NAME not in namespace


def test_parse_registers_template():
    """Test parsing registers the body under the given name."""
    namespace = TemplateNamespace()

    template = namespace.parse("greeting.html", "Hello {{ who }}!", "/tmp/greeting.html")

    assert namespace.lookup("greeting.html") is template
    assert template.name == "greeting.html"
    assert template.filename == "/tmp/greeting.html"
    assert template.render(who="world") == "Hello world!"


def test_alias_shares_compiled_template():
    """Test an alias resolves to the very same compiled template object."""
    namespace = TemplateNamespace()
    template = namespace.parse("greeting.html", "Hello")

    namespace.add_alias("greeting", template)

    assert namespace.lookup("greeting") is template
    assert namespace.names() == ["greeting", "greeting.html"]
    assert len(namespace) == 2


def test_parse_syntax_error_registers_nothing():
    """Test invalid syntax raises and leaves the namespace untouched."""
    namespace = TemplateNamespace()

    with pytest.raises(TemplateSyntaxError):
        namespace.parse("broken.html", "{% if %}")

    assert "broken.html" not in namespace


def test_include_resolves_other_names():
    """Test templates include each other through the namespace loader."""
    namespace = TemplateNamespace()
    atom = namespace.parse("atoms/atom-1.html", "<i>atom</i>")
    namespace.add_alias("atoms-atom-1", atom)
    page = namespace.parse("page.html", "{% include 'atoms-atom-1' %}|{% include 'atoms/atom-1.html' %}")

    assert page.render() == "<i>atom</i>|<i>atom</i>"


def test_include_of_unknown_name_fails():
    """Test including an unregistered name raises TemplateNotFound at render time."""
    namespace = TemplateNamespace()
    page = namespace.parse("page.html", "{% include 'missing' %}")

    with pytest.raises(TemplateNotFound):
        page.render()


def test_custom_delimiters():
    """Test variable delimiters are applied to parsed bodies."""
    namespace = TemplateNamespace(left_delimiter="<<<", right_delimiter=">>>")
    template = namespace.parse("page.html", "<<< title >>> {{ kept }}")

    assert template.render(title="Home") == "Home {{ kept }}"


def test_functions_are_available():
    """Test bound functions can be called from templates."""
    namespace = TemplateNamespace(functions={"shout": lambda s: s.upper() + "!"})
    template = namespace.parse("page.html", "{{ shout('hi') }}")

    assert template.render() == "HI!"


def test_strict_undefined_by_default():
    """Test undefined variables raise unless strict_undefined is disabled."""
    strict = TemplateNamespace().parse("page.html", "{{ missing.field }}")
    lenient = TemplateNamespace(strict_undefined=False).parse("page.html", "[{{ missing }}]")

    with pytest.raises(UndefinedError):
        strict.render()
    assert lenient.render() == "[]"


def test_autoescape():
    """Test HTML escaping of variables can be switched off."""
    escaped = TemplateNamespace().parse("page.html", "{{ v }}")
    raw = TemplateNamespace(autoescape=False).parse("page.html", "{{ v }}")

    assert escaped.render(v="<b>") == "&lt;b&gt;"
    assert raw.render(v="<b>") == "<b>"


def test_loader_get_source():
    """Test the loader exposes the source of registered names."""
    namespace = TemplateNamespace()
    template = namespace.parse("page.html", "body", "/tmp/page.html")
    namespace.add_alias("page", template)

    loader = namespace.environment.loader
    assert isinstance(loader, NamespaceLoader)

    source, filename, uptodate = loader.get_source(namespace.environment, "page")
    assert source == "body"
    assert filename == "/tmp/page.html"
    assert uptodate() is True

    with pytest.raises(TemplateNotFound):
        loader.get_source(namespace.environment, "missing")
