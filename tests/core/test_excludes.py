"""Tests for core/excludes.py module.

Covers:
- HARDCODED_DIRS / DEFAULT_PRUNABLE_DIRS / PRUNABLE_DIRS frozensets
- is_hardcoded_dir() and is_default_prunable() functions
"""

from __future__ import annotations

from pysg.core.excludes import (
    DEFAULT_PRUNABLE_DIRS,
    HARDCODED_DIRS,
    PRUNABLE_DIRS,
    is_default_prunable,
    is_hardcoded_dir,
)


class TestPrunableDirs:
    """Tests for PRUNABLE_DIRS constant."""

    def test_is_union_of_tiers(self) -> None:
        assert PRUNABLE_DIRS == HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS

    def test_tiers_are_disjoint(self) -> None:
        assert not HARDCODED_DIRS & DEFAULT_PRUNABLE_DIRS

    def test_contains_vcs_directories(self) -> None:
        """Contains version control directories."""
        assert ".git" in HARDCODED_DIRS
        assert ".hg" in HARDCODED_DIRS

    def test_contains_python_cache(self) -> None:
        """Contains Python cache directories."""
        assert "__pycache__" in DEFAULT_PRUNABLE_DIRS
        assert ".pytest_cache" in DEFAULT_PRUNABLE_DIRS
        assert ".mypy_cache" in DEFAULT_PRUNABLE_DIRS

    def test_contains_virtual_envs(self) -> None:
        """Contains virtual environment directories."""
        assert ".venv" in DEFAULT_PRUNABLE_DIRS
        assert "venv" in DEFAULT_PRUNABLE_DIRS
        assert "site-packages" in DEFAULT_PRUNABLE_DIRS

    def test_all_lowercase(self) -> None:
        """All entries are lowercase for consistent matching."""
        for entry in PRUNABLE_DIRS:
            assert entry == entry.lower()


class TestPredicates:
    def test_is_hardcoded_dir(self) -> None:
        assert is_hardcoded_dir(".git")
        assert not is_hardcoded_dir("venv")
        assert not is_hardcoded_dir("src")

    def test_is_default_prunable(self) -> None:
        assert is_default_prunable("venv")
        assert not is_default_prunable(".git")
        assert not is_default_prunable("src")
