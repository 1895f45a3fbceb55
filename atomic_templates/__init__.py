"""Atomic Templates: directory-scanning template namespace manager for Jinja2."""

from importlib.metadata import PackageNotFoundError, version

from atomic_templates.config import NamespaceSettings, get_settings
from atomic_templates.exceptions import (
    ErrorCode,
    PathResolutionException,
    RenderException,
    TemplateManagerException,
    TemplateNotFoundException,
)
from atomic_templates.manager import TemplateManager, create_manager

try:
    __version__ = version("atomic-templates")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "ErrorCode",
    "NamespaceSettings",
    "PathResolutionException",
    "RenderException",
    "TemplateManager",
    "TemplateManagerException",
    "TemplateNotFoundException",
    "create_manager",
    "get_settings",
]
