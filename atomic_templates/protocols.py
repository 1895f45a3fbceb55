"""Protocol definitions for the template manager surface."""

from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from jinja2 import Template

from atomic_templates.exceptions import TemplateManagerException


class Writer(Protocol):
    """A text sink rendered output is streamed into (e.g., io.StringIO, sys.stdout)."""

    def write(self, s: str, /) -> Any: ...


@runtime_checkable
class TemplateManagerProtocol(Protocol):
    """Protocol for template namespace managers.

    Configuration methods return the manager itself so calls can be chained.
    Changes to directories, extensions, delimiters and functions take effect
    on the next call to ``parse_templates``.
    """

    def add_directories(self, *paths: str) -> "TemplateManagerProtocol":
        """Register root directories to be scanned for templates."""
        ...

    def add_extension(self, ext: str) -> "TemplateManagerProtocol":
        """Treat files with this extension (no leading dot) as templates."""
        ...

    def remove_extension(self, ext: str) -> "TemplateManagerProtocol":
        """Stop treating files with this extension as templates."""
        ...

    def delims(self, left: str, right: str) -> "TemplateManagerProtocol":
        """Set the variable delimiters used when parsing templates."""
        ...

    def funcs(self, functions: Mapping[str, Callable[..., Any]]) -> "TemplateManagerProtocol":
        """Set the functions available to every template."""
        ...

    def set_reparse_on_execute(self, reparse: bool) -> "TemplateManagerProtocol":
        """Recompile every template before each render when True."""
        ...

    def parse_templates(self) -> list[TemplateManagerException]:
        """Rebuild the namespace from every registered directory.

        Returns:
            Errors collected while compiling, empty on success
        """
        ...

    def lookup(self, name: str) -> Template | None:
        """Find a compiled template by long or short alias."""
        ...

    def execute(self, writer: Writer, name: str, data: Any = None) -> None:
        """Render a template into writer."""
        ...

    def templates(self) -> list[Template]:
        """Return one compiled template per discovered file."""
        ...
