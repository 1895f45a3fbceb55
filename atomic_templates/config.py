from pathlib import Path

from jinja2.defaults import BLOCK_START_STRING, COMMENT_START_STRING
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_EXTENSIONS = ["html", "tpl"]

# Jinja2 requires block, variable and comment start strings to be distinct
RESERVED_START_STRINGS = frozenset({BLOCK_START_STRING, COMMENT_START_STRING})


class NamespaceSettings(BaseSettings):
    """Template manager settings with validation.

    Every field can be provided through an ``ATOMIC_TEMPLATES_``-prefixed
    environment variable or a ``.env`` file in the working directory. List
    fields are read from the environment as JSON arrays.

    Uses Pydantic v2 API:
    - model_config with SettingsConfigDict
    - @field_validator / @model_validator decorators
    """

    # Scanning
    directories: list[str] = Field(default_factory=list, description="Template root directories")
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="File extensions (without leading dot) treated as templates",
    )
    encoding: str = Field(default="utf-8", min_length=1, description="Encoding used to read template files")
    max_workers: int | None = Field(default=None, ge=1, description="Directory walker threads (default: one per root)")

    # Rendering
    left_delimiter: str = Field(default="{{", min_length=1, description="Variable start delimiter")
    right_delimiter: str = Field(default="}}", min_length=1, description="Variable end delimiter")
    autoescape: bool = Field(default=True, description="HTML-escape rendered variables")
    strict_undefined: bool = Field(default=True, description="Fail rendering on undefined variables")

    # Behavior
    reparse_on_execute: bool = Field(default=False, description="Recompile every template before each render")
    strip_numeric_prefixes: bool = Field(default=False, description="Strip '00-' style prefixes from short aliases")
    continue_on_file_error: bool = Field(
        default=False, description="Keep walking a directory after a file fails to read or parse"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Path | None = Field(default=None, description="JSON log file path (console only when unset)")

    model_config = SettingsConfigDict(
        env_prefix="ATOMIC_TEMPLATES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    @field_validator("extensions", mode="after")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        """Drop a leading dot so '.html' and 'html' mean the same thing."""
        return [ext[1:] if ext.startswith(".") else ext for ext in v]

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log_level is a known logging level name."""
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL, got {v!r}")
        return v

    @model_validator(mode="after")
    def validate_delimiters(self) -> "NamespaceSettings":
        """Ensure the delimiters differ and do not clash with block or comment syntax."""
        if self.left_delimiter == self.right_delimiter:
            raise ValueError("left_delimiter and right_delimiter must differ")
        if self.left_delimiter in RESERVED_START_STRINGS:
            reserved = ", ".join(sorted(RESERVED_START_STRINGS))
            raise ValueError(f"left_delimiter {self.left_delimiter!r} clashes with block or comment syntax ({reserved})")
        return self


# Singleton settings instance
_settings_instance: NamespaceSettings | None = None


def get_settings() -> NamespaceSettings:
    """Get the singleton NamespaceSettings instance.

    The environment and ``.env`` file are read once per process.

    Returns:
        Cached NamespaceSettings instance
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = NamespaceSettings()
    return _settings_instance
