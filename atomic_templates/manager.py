"""Template namespace manager.

Scans registered directories for template files, registers every file under
a long and a short alias in one shared Jinja2 namespace, and renders
templates by either name.

Example::

    manager = TemplateManager()
    manager.add_directories("/tmp/template-dir")
    errors = manager.parse_templates()

    manager.execute(sys.stdout, "pages-page-1", {"title": "Home"})
    manager.execute(sys.stdout, "pages/page-1.html", {"title": "Home"})
"""

import io
import os
import threading
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any

from jinja2 import Template, TemplateSyntaxError

from atomic_templates.aliases import file_extension, template_aliases
from atomic_templates.config import RESERVED_START_STRINGS, NamespaceSettings, get_settings
from atomic_templates.exceptions import (
    ConfigurationException,
    PathResolutionException,
    RenderException,
    TemplateManagerException,
    TemplateNotFoundException,
    TemplateParseException,
    TemplateReadException,
    WalkException,
    WalkPermissionException,
)
from atomic_templates.logging_config import get_logger, log_with_context, setup_logging
from atomic_templates.namespace import ROOT_NAME, TemplateNamespace
from atomic_templates.protocols import Writer

logger = get_logger(__name__)

DEFAULT_LEFT_DELIMITER = "{{"
DEFAULT_RIGHT_DELIMITER = "}}"


@dataclass(frozen=True)
class CompileSnapshot:
    """Manager state captured at the start of a compile cycle."""

    directories: tuple[str, ...]
    extensions: frozenset[str]
    strip_numeric_prefixes: bool
    continue_on_file_error: bool
    encoding: str


class TemplateManager:
    """Manages a namespace of templates discovered in registered directories.

    Every file whose extension is allowed is reachable under its path relative
    to its root directory (``atoms/subatoms/sub-atom-1.html``) and under a
    short alias made of the first and last path segments
    (``atoms-sub-atom-1``). Names that collide are resolved last-writer-wins;
    directories are walked concurrently, so collisions across roots resolve in
    no particular order.

    A single lock guards the namespace. Lookups, the namespace swap at the end
    of a compile, every write of a parsed body, and every render hold it.
    """

    def __init__(self, settings: NamespaceSettings | None = None):
        """Initialize the manager.

        Args:
            settings: Settings to start from (defaults to get_settings())
        """
        self._settings = settings if settings is not None else get_settings()
        self._lock = threading.Lock()

        self._dirs: set[str] = set()
        self._extensions: set[str] = set(self._settings.extensions)
        self._left_delim = self._settings.left_delimiter
        self._right_delim = self._settings.right_delimiter
        self._functions: dict[str, Callable[..., Any]] = {}
        self._reparse = self._settings.reparse_on_execute
        self._strip_numeric_prefixes = self._settings.strip_numeric_prefixes

        self._namespace = self._new_namespace()
        self._templates: list[Template] = []

    # =========================================================================
    # Configuration
    # =========================================================================

    def add_directories(self, *paths: str) -> "TemplateManager":
        """Register root directories to be scanned for templates.

        Paths are stored in absolute form, so registering the same directory
        twice is a no-op. A directory should not be a descendant of another
        registered directory, or its templates are registered twice. Call
        parse_templates() to pick up the new directories.

        Args:
            *paths: Directory paths, relative or absolute

        Returns:
            The manager, for chaining

        Raises:
            PathResolutionException: If any path could not be made absolute.
                The other paths are still registered.
        """
        failed: dict[str, str] = {}

        for path in paths:
            try:
                abs_path = os.path.abspath(os.fspath(path))
            except (OSError, TypeError, ValueError) as e:
                failed[str(path)] = str(e)
                log_with_context(
                    logger,
                    "warning",
                    "Could not resolve template directory",
                    path=str(path),
                    error=str(e),
                    event_type="directory_resolution_error",
                )
                continue

            with self._lock:
                self._dirs.add(abs_path)

            log_with_context(
                logger,
                "debug",
                "Template directory registered",
                path=abs_path,
                event_type="directory_registered",
            )

        if failed:
            raise PathResolutionException(
                f"Could not resolve {len(failed)} template directory path(s)",
                details={"failed_paths": failed},
            )

        return self

    def add_extension(self, ext: str) -> "TemplateManager":
        """Treat files with this extension (no leading dot) as templates."""
        with self._lock:
            self._extensions.add(ext)
        return self

    def remove_extension(self, ext: str) -> "TemplateManager":
        """Stop treating files with this extension as templates. No-op if absent."""
        with self._lock:
            self._extensions.discard(ext)
        return self

    def delims(self, left: str, right: str) -> "TemplateManager":
        """Set the variable delimiters used for the next parse_templates() call.

        An empty string selects the default delimiter for that side.

        Raises:
            ConfigurationException: If both delimiters are identical, or the left
                delimiter clashes with block ({%) or comment ({#) syntax
        """
        left = left or DEFAULT_LEFT_DELIMITER
        right = right or DEFAULT_RIGHT_DELIMITER
        if left == right:
            raise ConfigurationException(
                "Left and right delimiters must differ",
                details={"left": left, "right": right},
            )
        if left in RESERVED_START_STRINGS:
            raise ConfigurationException(
                "Left delimiter clashes with block or comment syntax",
                details={"left": left, "reserved": sorted(RESERVED_START_STRINGS)},
            )

        with self._lock:
            self._left_delim, self._right_delim = left, right
        return self

    def funcs(self, functions: Mapping[str, Callable[..., Any]]) -> "TemplateManager":
        """Set the functions available to every template.

        Replaces any previously set functions. Takes effect on the next
        parse_templates() call.

        Raises:
            ConfigurationException: If a value is not callable
        """
        not_callable = sorted(name for name, func in functions.items() if not callable(func))
        if not_callable:
            raise ConfigurationException(
                "Template functions must be callable",
                details={"names": not_callable},
            )

        with self._lock:
            self._functions = dict(functions)
        return self

    def set_reparse_on_execute(self, reparse: bool) -> "TemplateManager":
        """Recompile the whole namespace before every execute() when True.

        Useful while developing templates. Because templates reference each
        other, the entire namespace is rebuilt on every render.
        """
        with self._lock:
            self._reparse = reparse
        return self

    def set_strip_numeric_prefixes(self, strip: bool) -> "TemplateManager":
        """Strip ``00-`` style ordering prefixes from short alias segments when True."""
        with self._lock:
            self._strip_numeric_prefixes = strip
        return self

    @property
    def directories(self) -> list[str]:
        with self._lock:
            return sorted(self._dirs)

    @property
    def extensions(self) -> list[str]:
        with self._lock:
            return sorted(self._extensions)

    # =========================================================================
    # Compilation
    # =========================================================================

    def parse_templates(self) -> list[TemplateManagerException]:
        """Rebuild the namespace from every registered directory.

        Each root directory is walked in its own worker thread. The new
        namespace is swapped in once every worker has finished; until then
        lookups and renders keep using the previous one. Compilation is best
        effort: templates that parsed are kept even when others failed.

        Returns:
            Errors collected from all directories in completion order, empty
            when every template compiled
        """
        with self._lock:
            snapshot = CompileSnapshot(
                directories=tuple(sorted(self._dirs)),
                extensions=frozenset(self._extensions),
                strip_numeric_prefixes=self._strip_numeric_prefixes,
                continue_on_file_error=self._settings.continue_on_file_error,
                encoding=self._settings.encoding,
            )
            namespace = self._new_namespace()

        known: list[Template] = []
        errors: list[TemplateManagerException] = []

        if snapshot.directories:
            max_workers = self._settings.max_workers or len(snapshot.directories)
            with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="template-walker") as pool:
                futures = [
                    pool.submit(self._walk_directory, root, snapshot, namespace, known)
                    for root in snapshot.directories
                ]
                for future in as_completed(futures):
                    errors.extend(future.result())

        with self._lock:
            self._namespace = namespace
            self._templates = known

        log_with_context(
            logger,
            "info" if not errors else "warning",
            "Templates compiled",
            directory_count=len(snapshot.directories),
            template_count=len(known),
            name_count=len(namespace),
            error_count=len(errors),
            event_type="templates_compiled",
        )

        return errors

    def _walk_directory(
        self,
        root: str,
        snapshot: CompileSnapshot,
        namespace: TemplateNamespace,
        known: list[Template],
    ) -> list[TemplateManagerException]:
        """Compile every template below root, one file at a time.

        Permission errors are collected and the walk continues past them. Any
        other walk error aborts the walk, as does a file that fails to read
        or parse unless continue_on_file_error is set.

        Returns:
            Errors encountered in this directory
        """
        errors: list[TemplateManagerException] = []

        def on_walk_error(error: OSError) -> None:
            if not isinstance(error, PermissionError):
                raise error
            path = error.filename or root
            errors.append(WalkPermissionException(path, details={"root": root, "error": str(error)}))
            log_with_context(
                logger,
                "warning",
                "Permission denied while walking template directory",
                root=root,
                path=path,
                event_type="template_walk_permission_denied",
            )

        try:
            for dirpath, dirnames, filenames in os.walk(root, onerror=on_walk_error):
                dirnames.sort()
                for filename in sorted(filenames):
                    ext = file_extension(filename)
                    if ext not in snapshot.extensions:
                        continue

                    try:
                        self._compile_file(root, os.path.join(dirpath, filename), ext, snapshot, namespace, known)
                    except (TemplateReadException, TemplateParseException) as e:
                        errors.append(e)
                        if not snapshot.continue_on_file_error:
                            return errors
        except OSError as e:
            path = e.filename or root
            errors.append(WalkException(path, details={"root": root, "error": str(e)}))
            log_with_context(
                logger,
                "error",
                "Walking template directory failed",
                root=root,
                path=path,
                error=str(e),
                event_type="template_walk_error",
            )

        return errors

    def _compile_file(
        self,
        root: str,
        path: str,
        ext: str,
        snapshot: CompileSnapshot,
        namespace: TemplateNamespace,
        known: list[Template],
    ) -> None:
        """Read, parse and register a single template under both aliases.

        Raises:
            TemplateReadException: If the file could not be read
            TemplateParseException: If the file is not a valid template
        """
        aliases = template_aliases(root, path, ext, snapshot.strip_numeric_prefixes)

        try:
            with open(path, encoding=snapshot.encoding) as f:
                source = f.read()
        except (OSError, UnicodeDecodeError) as e:
            log_with_context(
                logger,
                "error",
                "Failed to read template file",
                path=path,
                error=str(e),
                event_type="template_read_error",
            )
            raise TemplateReadException(path, details={"root": root, "error": str(e)}) from e

        with self._lock:
            for alias in set(aliases):
                if alias in namespace:
                    log_with_context(
                        logger,
                        "warning",
                        "Template alias already registered, overwriting",
                        alias=alias,
                        path=path,
                        previous_path=namespace.lookup(alias).filename,
                        event_type="template_alias_collision",
                    )

            try:
                template = namespace.parse(aliases.long, source, path)
            except TemplateSyntaxError as e:
                log_with_context(
                    logger,
                    "error",
                    "Failed to parse template file",
                    path=path,
                    line=e.lineno,
                    error=e.message,
                    event_type="template_parse_error",
                )
                raise TemplateParseException(
                    path, details={"root": root, "line": e.lineno, "error": e.message}
                ) from e

            if aliases.short != aliases.long:
                namespace.add_alias(aliases.short, template)
            known.append(template)

        log_with_context(
            logger,
            "debug",
            "Template parsed",
            path=path,
            long_alias=aliases.long,
            short_alias=aliases.short,
            event_type="template_parsed",
        )

    def _new_namespace(self) -> TemplateNamespace:
        """Create an empty namespace with the current rendering configuration."""
        return TemplateNamespace(
            name=ROOT_NAME,
            left_delimiter=self._left_delim,
            right_delimiter=self._right_delim,
            functions=self._functions,
            autoescape=self._settings.autoescape,
            strict_undefined=self._settings.strict_undefined,
        )

    # =========================================================================
    # Lookup & Rendering
    # =========================================================================

    def lookup(self, name: str) -> Template | None:
        """Find a compiled template by long or short alias.

        Returns:
            The template, or None if no template has that name
        """
        with self._lock:
            return self._namespace.lookup(name)

    def execute(self, writer: Writer, name: str, data: Any = None) -> None:
        """Render a template into writer.

        A mapping passed as data becomes the template's variables; any other
        value is available as ``data``. Renders are serialized with each other
        and with compilation. The body is rendered in full before anything is
        written, so a failed render leaves writer untouched.

        Args:
            writer: Destination with a write(str) method
            name: Long or short alias of the template
            data: Template data

        Raises:
            TemplateNotFoundException: If no template has that name
            RenderException: If the template body raises while rendering, whether
                a template error or an exception from a bound function
        """
        with self._lock:
            reparse = self._reparse

        if reparse:
            errors = self.parse_templates()
            if errors:
                log_with_context(
                    logger,
                    "warning",
                    "Reparse before render reported errors",
                    template_name=name,
                    error_count=len(errors),
                    event_type="template_reparse_errors",
                )

        with self._lock:
            template = self._namespace.lookup(name)
            if template is None:
                log_with_context(
                    logger,
                    "warning",
                    "Template not found",
                    template_name=name,
                    event_type="template_not_found",
                )
                raise TemplateNotFoundException(name, details={"namespace": self._namespace.name})

            try:
                output = template.render(template_context(data))
            except Exception as e:
                log_with_context(
                    logger,
                    "error",
                    "Template rendering failed",
                    template_name=name,
                    error=str(e),
                    error_type=type(e).__name__,
                    event_type="template_render_error",
                )
                raise RenderException(
                    name, details={"error": str(e), "error_type": type(e).__name__}
                ) from e

            writer.write(output)

    def render(self, name: str, data: Any = None) -> str:
        """Render a template to a string. See execute()."""
        buffer = io.StringIO()
        self.execute(buffer, name, data)
        return buffer.getvalue()

    # =========================================================================
    # Introspection
    # =========================================================================

    def templates(self) -> list[Template]:
        """Return one compiled template per discovered file, in no particular order."""
        with self._lock:
            return list(self._templates)

    def names(self) -> list[str]:
        """Return every registered long and short alias, sorted."""
        with self._lock:
            return self._namespace.names()


def template_context(data: Any) -> dict[str, Any]:
    """Build the template variables for a render call."""
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return dict(data)
    return {"data": data}


def create_manager(settings: NamespaceSettings | None = None, configure_logging: bool = False) -> TemplateManager:
    """Create a manager with the directories from settings already registered.

    Args:
        settings: Settings to use (defaults to get_settings())
        configure_logging: Also set up package logging from the log_level and
            log_file settings

    Returns:
        TemplateManager ready for parse_templates()
    """
    settings = settings if settings is not None else get_settings()
    if configure_logging:
        setup_logging(settings.log_level, settings.log_file)

    manager = TemplateManager(settings)
    if settings.directories:
        manager.add_directories(*settings.directories)
    return manager
