"""Template alias derivation.

Every template file is reachable under two names derived from its path
relative to the root directory it was found in::

    root = /tmp/templates
    path = /tmp/templates/atoms/subatoms/sub-atom-1.html

    long alias  = "atoms/subatoms/sub-atom-1.html"
    short alias = "atoms-sub-atom-1"

The long alias keeps the platform path separator as-is. The short alias joins
the first and last path segments with a hyphen and drops everything in
between. A top-level file ``template-1.html`` gets ``template-1.html`` and
``template-1``.
"""

import os
import re
from typing import NamedTuple

NUMERIC_PREFIX_PATTERN = re.compile(r"^[0-9]+-")


class TemplateAliases(NamedTuple):
    """The names a single template file is registered under."""

    long: str
    short: str


def file_extension(filename: str) -> str:
    """Return the extension of a file name without its leading dot."""
    return os.path.splitext(filename)[1].removeprefix(".")


def remove_leading_numbers(segment: str, enabled: bool = False) -> str:
    """Strip an ordering prefix such as ``00-`` from a path segment.

    Disabled by default, in which case the segment is returned unchanged.

    Args:
        segment: A single path segment
        enabled: Whether to strip the prefix

    Returns:
        The segment, without its numeric prefix when enabled
    """
    if not enabled:
        return segment
    stripped = NUMERIC_PREFIX_PATTERN.sub("", segment)
    # Keep purely numeric names like "01-" intact
    return stripped or segment


def template_aliases(
    root: str,
    path: str,
    ext: str,
    strip_numeric_prefixes: bool = False,
) -> TemplateAliases:
    """Derive the long and short aliases for a template file.

    Args:
        root: Root template directory the file was discovered in
        path: Full path of the template file
        ext: The file's extension, without leading dot
        strip_numeric_prefixes: Strip ``00-`` style prefixes from short alias segments

    Returns:
        TemplateAliases with the long and short names

    Raises:
        ValueError: If path is not located below root
    """
    prefix = os.path.join(root, "")
    if not path.startswith(prefix) or len(path) == len(prefix):
        raise ValueError(f"{path!r} is not a file below {root!r}")

    long_alias = path[len(prefix):]
    without_extension = long_alias.removesuffix("." + ext) if ext else long_alias
    parts = without_extension.split(os.sep)

    if len(parts) == 1:
        short_alias = remove_leading_numbers(parts[0], strip_numeric_prefixes)
    else:
        short_alias = (
            remove_leading_numbers(parts[0], strip_numeric_prefixes)
            + "-"
            + remove_leading_numbers(parts[-1], strip_numeric_prefixes)
        )

    return TemplateAliases(long=long_alias, short=short_alias)
