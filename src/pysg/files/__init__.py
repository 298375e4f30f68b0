"""Input file enumeration."""

from pysg.files.discovery import DEFAULT_GLOBS, discover_files, matches_globs
from pysg.files.ignore import IgnoreChecker, IgnoreRule

__all__ = [
    "DEFAULT_GLOBS",
    "IgnoreChecker",
    "IgnoreRule",
    "discover_files",
    "matches_globs",
]
