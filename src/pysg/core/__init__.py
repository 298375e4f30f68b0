"""Core module exports."""

from pysg.core.console import diagnostic, status
from pysg.core.errors import (
    ConfigError,
    EnumerationError,
    ErrorCode,
    FileError,
    InternalError,
    PysgError,
    QueryError,
)
from pysg.core.logging import (
    bound_file,
    configure_logging,
    get_logger,
)

__all__ = [
    # Errors
    "ConfigError",
    "EnumerationError",
    "ErrorCode",
    "FileError",
    "InternalError",
    "PysgError",
    "QueryError",
    # Logging
    "bound_file",
    "configure_logging",
    "get_logger",
    # Console
    "diagnostic",
    "status",
]
