"""Pytest configuration and shared fixtures."""

import logging
from pathlib import Path

import pytest

from atomic_templates.config import NamespaceSettings
from atomic_templates.logging_config import PACKAGE_LOGGER
from atomic_templates.manager import TemplateManager

# Relative path -> contents of the standard template tree
TEMPLATE_FILES = {
    "top-level.html": "<h1>Top level</h1>",
    "none.none": "{% this is not a template %}",
    "atoms/atom-1.html": "<span>atom 1</span>",
    "atoms/atom-2.tpl": "<span>atom 2</span>",
    "atoms/fonts/font-1.html": "<em>font 1</em>",
    "atoms/subatoms/sub-atom-1.html": "<b>sub atom 1</b>",
    "pages/page-1.html": "<title>{{ title }}</title>{% include 'atoms-atom-1' %}",
}


def write_templates(root: Path, files: dict[str, str]) -> Path:
    """Write a tree of template files below root."""
    for relative, contents in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(contents, encoding="utf-8")
    return root


@pytest.fixture
def settings():
    """Settings with defaults only, isolated from the environment and .env files."""
    return NamespaceSettings(_env_file=None)


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Standard template tree with one empty directory and one foreign extension."""
    root = tmp_path / "templates"
    (root / "pages" / "front-page").mkdir(parents=True)
    return write_templates(root, TEMPLATE_FILES)


@pytest.fixture
def manager(settings) -> TemplateManager:
    """Fresh TemplateManager with no directories registered."""
    return TemplateManager(settings)


@pytest.fixture
def parsed_manager(manager: TemplateManager, template_dir: Path) -> TemplateManager:
    """TemplateManager with the standard tree registered and compiled."""
    manager.add_directories(str(template_dir))
    assert manager.parse_templates() == []
    return manager


@pytest.fixture
def restore_package_logger():
    """Restore the package logger's handlers, level and propagation after the test."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level, propagate = list(package_logger.handlers), package_logger.level, package_logger.propagate
    yield package_logger
    for handler in package_logger.handlers:
        if handler not in handlers:
            handler.close()
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate
