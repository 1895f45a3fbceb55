"""Unit tests for template alias derivation."""

import os

import pytest

from atomic_templates.aliases import (
    TemplateAliases,
    file_extension,
    remove_leading_numbers,
    template_aliases,
)

ROOT = os.path.join(os.sep, "tmp", "templates")


def _path(*parts: str) -> str:
    return os.path.join(ROOT, *parts)


def test_top_level_file_aliases():
    """Test a top-level file is named by its file name with and without extension."""
    aliases = template_aliases(ROOT, _path("template-1.html"), "html")

    assert aliases == TemplateAliases(long="template-1.html", short="template-1")


def test_nested_file_aliases():
    """Test a file one level down gets 'dir-file' as short alias."""
    aliases = template_aliases(ROOT, _path("pages", "page-1.html"), "html")

    assert aliases.long == os.path.join("pages", "page-1.html")
    assert aliases.short == "pages-page-1"


def test_doubly_nested_file_drops_intermediate_directories():
    """Test only the first and last segments make up the short alias."""
    aliases = template_aliases(ROOT, _path("atoms", "subatoms", "sub-atom-1.html"), "html")

    assert aliases.long == os.path.join("atoms", "subatoms", "sub-atom-1.html")
    assert aliases.short == "atoms-sub-atom-1"


def test_long_alias_keeps_platform_separator():
    """Test the long alias is not normalized to forward slashes."""
    aliases = template_aliases(ROOT, _path("atoms", "atom-1.html"), "html")

    assert aliases.long == "atoms" + os.sep + "atom-1.html"


def test_only_trailing_extension_is_stripped():
    """Test dots inside the file name survive in the short alias."""
    aliases = template_aliases(ROOT, _path("emails", "welcome.en.tpl"), "tpl")

    assert aliases.short == "emails-welcome.en"


def test_root_with_trailing_separator():
    """Test a root given with a trailing separator yields the same aliases."""
    aliases = template_aliases(ROOT + os.sep, _path("pages", "page-1.html"), "html")

    assert aliases.short == "pages-page-1"


def test_numeric_prefixes_kept_by_default():
    """Test numeric ordering prefixes are left untouched unless enabled."""
    aliases = template_aliases(ROOT, _path("00-atoms", "01-subdir", "template-1.html"), "html")

    assert aliases.short == "00-atoms-template-1"


def test_numeric_prefixes_stripped_when_enabled():
    """Test numeric ordering prefixes are removed from short alias segments."""
    aliases = template_aliases(
        ROOT,
        _path("00-atoms", "00-subdir", "template-1.html"),
        "html",
        strip_numeric_prefixes=True,
    )

    assert aliases.short == "atoms-template-1"
    # Long alias always keeps the real path
    assert aliases.long == os.path.join("00-atoms", "00-subdir", "template-1.html")


@pytest.mark.parametrize(
    ("segment", "expected"),
    [
        ("00-section", "section"),
        ("12-page", "page"),
        ("page-12", "page-12"),
        ("2024report", "2024report"),
        ("01-", "01-"),
    ],
)
def test_remove_leading_numbers(segment, expected):
    """Test numeric prefix stripping on individual segments."""
    assert remove_leading_numbers(segment, enabled=True) == expected


def test_remove_leading_numbers_disabled_is_identity():
    """Test stripping is a no-op when disabled."""
    assert remove_leading_numbers("00-section") == "00-section"


def test_path_outside_root_rejected():
    """Test a path that is not below the root raises ValueError."""
    with pytest.raises(ValueError):
        template_aliases(ROOT, os.path.join(os.sep, "elsewhere", "page.html"), "html")

    with pytest.raises(ValueError):
        template_aliases(ROOT, ROOT, "html")


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("page.html", "html"),
        ("atom.new-tpl", "new-tpl"),
        ("archive.tar.gz", "gz"),
        ("Makefile", ""),
        (".hidden", ""),
    ],
)
def test_file_extension(filename, expected):
    """Test extension extraction without the leading dot."""
    assert file_extension(filename) == expected
