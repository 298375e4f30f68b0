"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (command-line options)
2. Environment variables (PYSG__SECTION__KEY)
3. Global YAML (~/.config/pysg/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    PYSG__<SECTION>__<KEY>=<VALUE>

Examples:
    PYSG__LOGGING__LEVEL=DEBUG
    PYSG__SEARCH__WORKERS=4
    PYSG__SEARCH__RESPECT_IGNORE=false
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        PYSG__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Matches and per-file diagnostics are not logs.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class SearchConfig(BaseModel):
    """File enumeration and worker pool configuration.

    Env vars:
        PYSG__SEARCH__GLOBS: JSON list of file name globs to search
        PYSG__SEARCH__RESPECT_IGNORE: Honour .gitignore/.ignore and default exclusions
        PYSG__SEARCH__HIDDEN: Also walk hidden files and directories
        PYSG__SEARCH__WORKERS: Worker processes (default: CPU count)
    """

    globs: list[str] = Field(
        default_factory=lambda: ["*.py", "*.pyi"],
        description="File name globs selecting files inside searched directories.",
    )
    respect_ignore: bool = Field(
        default=True,
        description="Skip paths matched by .gitignore/.ignore files and default exclusions.",
    )
    hidden: bool = Field(
        default=False,
        description="Walk hidden (dot) files and directories.",
    )
    workers: int | None = Field(
        default=None,
        description="Worker processes. None uses the number of CPUs.",
    )

    @field_validator("globs")
    @classmethod
    def validate_globs(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one glob is required")
        return v

    @field_validator("workers")
    @classmethod
    def validate_workers(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError(f"Workers must be at least 1, got {v}")
        return v


class PysgConfig(BaseModel):
    """Root configuration. Type hints for loaded settings."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
