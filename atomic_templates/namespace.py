"""Compiled template namespace backed by a single Jinja2 environment.

A namespace owns one ``jinja2.Environment`` whose loader resolves names
against the templates compiled into the namespace, so ``{% include %}`` and
``{% extends %}`` work with any registered long or short alias. Bodies are
compiled once; additional aliases share the compiled template object.
"""

from collections.abc import Callable, Mapping
from typing import Any

from jinja2 import BaseLoader, Environment, StrictUndefined, Template, TemplateNotFound, Undefined

ROOT_NAME = "atomic-template-manager"


class NamespaceLoader(BaseLoader):
    """Jinja2 loader serving already compiled templates by name."""

    def __init__(self):
        self._templates: dict[str, Template] = {}
        self._sources: dict[str, tuple[str, str | None]] = {}

    def add(self, name: str, template: Template, source: str, filename: str | None) -> None:
        """Register a compiled template and its source under a name."""
        self._templates[name] = template
        self._sources[name] = (source, filename)

    def alias(self, alias: str, name: str) -> None:
        """Point an additional name at the template registered under name."""
        self._templates[alias] = self._templates[name]
        self._sources[alias] = self._sources[name]

    def get(self, name: str) -> Template | None:
        return self._templates.get(name)

    def get_source(self, environment: Environment, template: str) -> tuple[str, str | None, Callable[[], bool]]:
        try:
            source, filename = self._sources[template]
        except KeyError:
            raise TemplateNotFound(template) from None
        return source, filename, lambda: True

    def list_templates(self) -> list[str]:
        return sorted(self._templates)

    def load(
        self,
        environment: Environment,
        name: str,
        globals: Mapping[str, Any] | None = None,
    ) -> Template:
        # Serve the compiled object so aliases never trigger a re-parse
        template = self._templates.get(name)
        if template is None:
            raise TemplateNotFound(name)
        return template


class TemplateNamespace:
    """A named collection of compiled templates sharing one configuration.

    Delimiters and function bindings are fixed when the namespace is created;
    they apply to every body parsed into it afterwards.
    """

    def __init__(
        self,
        name: str = ROOT_NAME,
        left_delimiter: str = "{{",
        right_delimiter: str = "}}",
        functions: Mapping[str, Callable[..., Any]] | None = None,
        autoescape: bool = True,
        strict_undefined: bool = True,
    ):
        """Initialize an empty namespace.

        Args:
            name: Root name identifying the namespace, never a template name
            left_delimiter: Variable start delimiter
            right_delimiter: Variable end delimiter
            functions: Callables exposed to every template by name
            autoescape: HTML-escape rendered variables
            strict_undefined: Raise on undefined variables instead of rendering them empty
        """
        self.name = name
        self._loader = NamespaceLoader()
        self.environment = Environment(
            loader=self._loader,
            cache_size=0,
            autoescape=autoescape,
            undefined=StrictUndefined if strict_undefined else Undefined,
            variable_start_string=left_delimiter,
            variable_end_string=right_delimiter,
            keep_trailing_newline=True,
        )
        if functions:
            self.environment.globals.update(functions)

    def parse(self, name: str, source: str, filename: str | None = None) -> Template:
        """Compile a template body and register it under a name.

        Args:
            name: Name to register the template under
            source: Template source text
            filename: Path of the file the source was read from

        Returns:
            The compiled template

        Raises:
            jinja2.TemplateSyntaxError: If the source is not a valid template
        """
        code = self.environment.compile(source, name, filename)
        template = self.environment.template_class.from_code(
            self.environment, code, self.environment.make_globals(None)
        )
        self._loader.add(name, template, source, filename)
        return template

    def add_alias(self, alias: str, template: Template) -> None:
        """Register an already compiled template under an additional name.

        Raises:
            KeyError: If the template was not parsed into this namespace
        """
        self._loader.alias(alias, template.name)

    def lookup(self, name: str) -> Template | None:
        return self._loader.get(name)

    def names(self) -> list[str]:
        return self._loader.list_templates()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._loader.get(name) is not None

    def __len__(self) -> int:
        return len(self._loader.list_templates())
