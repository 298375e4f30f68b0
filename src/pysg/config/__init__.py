"""Config module exports."""

from pysg.config.loader import PysgSettings, load_config
from pysg.config.models import (
    LoggingConfig,
    LogOutputConfig,
    PysgConfig,
    SearchConfig,
)

__all__ = [
    "load_config",
    "LoggingConfig",
    "LogOutputConfig",
    "PysgConfig",
    "PysgSettings",
    "SearchConfig",
]
