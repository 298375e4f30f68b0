"""Canonical directory exclusions with tiered architecture.

Tier 0 (HARDCODED_DIRS): Never traversed, not user-configurable.
    - VCS internals

Tier 1 (DEFAULT_PRUNABLE_DIRS): Excluded by default, user can override with
    ``!dirname`` in an ignore file, or disable all ignoring with --no-ignore.
    - Virtualenvs, caches, build outputs

The combined PRUNABLE_DIRS = HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS.
"""

from __future__ import annotations

# =============================================================================
# Tier 0: HARDCODED - Never traverse, not user-configurable
# =============================================================================

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        ".git",
        ".svn",
        ".hg",
        ".bzr",
    )
)

# =============================================================================
# Tier 1: DEFAULT_PRUNABLE - Excluded by default, user can override
# =============================================================================
# Python sources under these directories are third-party or generated.

DEFAULT_PRUNABLE_DIRS: frozenset[str] = frozenset(
    (
        # -------------------------------------------------------------------------
        # Virtual environments and installed packages
        # -------------------------------------------------------------------------
        "venv",
        ".venv",
        ".virtualenv",
        "virtualenv",
        "env",
        ".env",
        "site-packages",
        "__pypackages__",
        "eggs",
        ".eggs",
        # -------------------------------------------------------------------------
        # Tool caches
        # -------------------------------------------------------------------------
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".ruff_cache",
        ".pytype",
        ".tox",
        ".nox",
        ".hypothesis",
        ".ipynb_checkpoints",
        "htmlcov",
        # -------------------------------------------------------------------------
        # Other ecosystems commonly vendored next to Python code
        # -------------------------------------------------------------------------
        "node_modules",
        "target",
        # -------------------------------------------------------------------------
        # Generic build/output directories
        # -------------------------------------------------------------------------
        "build",
        "dist",
        # -------------------------------------------------------------------------
        # IDE/Editor directories
        # -------------------------------------------------------------------------
        ".idea",
        ".vscode",
    )
)

PRUNABLE_DIRS: frozenset[str] = HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS


def is_hardcoded_dir(dirname: str) -> bool:
    """Check if directory is hardcoded (never traversable, not overridable)."""
    return dirname in HARDCODED_DIRS


def is_default_prunable(dirname: str) -> bool:
    """Check if directory is prunable by default (but user can override)."""
    return dirname in DEFAULT_PRUNABLE_DIRS
