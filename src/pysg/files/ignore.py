"""Ignore-file matching with tiered architecture.

Tiered Architecture:
- HARDCODED_DIRS: Always pruned, not overridable (VCS internals)
- DEFAULT_PRUNABLE_DIRS: Pruned by default, user can opt-in via !dirname
- .gitignore / .ignore patterns: User-defined patterns with negation support

Pattern syntax (gitignore subset):
- Standard glob patterns (fnmatch)
- Patterns without an inner slash match the name at any depth
- Patterns with a slash are anchored to the directory of their ignore file
- Trailing / restricts the pattern to directories
- Negation with ! prefix; the last matching pattern wins
"""

from __future__ import annotations

import fnmatch
from dataclasses import dataclass
from pathlib import Path

from pysg.core.excludes import (
    DEFAULT_PRUNABLE_DIRS,
    HARDCODED_DIRS,
    PRUNABLE_DIRS,
    is_hardcoded_dir,
)

__all__ = [
    "PRUNABLE_DIRS",
    "HARDCODED_DIRS",
    "DEFAULT_PRUNABLE_DIRS",
    "IgnoreChecker",
    "IgnoreRule",
]


@dataclass(frozen=True, slots=True)
class IgnoreRule:
    """One line of an ignore file."""

    pattern: str
    base: str = ""  # POSIX dir of the ignore file, relative to the root
    negated: bool = False
    dir_only: bool = False
    anchored: bool = False

    @classmethod
    def parse(cls, line: str, base: str = "") -> IgnoreRule | None:
        line = line.strip()
        if not line or line.startswith("#"):
            return None

        negated = line.startswith("!")
        if negated:
            line = line[1:]

        dir_only = line.endswith("/")
        line = line.rstrip("/")
        anchored = "/" in line
        line = line.lstrip("/")
        if not line:
            return None

        return cls(
            pattern=line,
            base=base,
            negated=negated,
            dir_only=dir_only,
            anchored=anchored,
        )

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        if self.base:
            if not rel_path.startswith(f"{self.base}/"):
                return False
            rel_path = rel_path[len(self.base) + 1 :]
        if self.anchored:
            return fnmatch.fnmatchcase(rel_path, self.pattern)
        return fnmatch.fnmatchcase(rel_path.rsplit("/", 1)[-1], self.pattern)


class IgnoreChecker:
    """Checks if paths under one search root should be skipped.

    Ignore files are read from the root and every non-pruned directory
    below it; patterns of a nested file apply relative to its directory.
    """

    IGNORE_FILE_NAMES = (".gitignore", ".ignore")

    def __init__(self, root: Path, extra_patterns: list[str] | None = None) -> None:
        self._root = root
        self._rules: list[IgnoreRule] = []
        self._negated_dirs: set[str] = set()
        self._ignore_paths: list[Path] = []
        self._load_recursive(root)
        for pattern in extra_patterns or []:
            self._add(pattern, "")

    @property
    def negated_dirs(self) -> frozenset[str]:
        """Directory names opted back in with a root-level ``!dirname``."""
        return frozenset(self._negated_dirs)

    @property
    def ignore_paths(self) -> list[Path]:
        """All ignore files that were loaded."""
        return self._ignore_paths.copy()

    def should_prune_dir(self, dirname: str) -> bool:
        """Check if a directory should be pruned by name alone.

        Example:
            # User adds "!venv/" to .ignore
            checker.should_prune_dir("venv")   # False (opted-in)
            checker.should_prune_dir(".git")   # True (hardcoded)
            checker.should_prune_dir("build")  # True (default)
        """
        if is_hardcoded_dir(dirname):
            return True
        if dirname in DEFAULT_PRUNABLE_DIRS:
            return dirname not in self._negated_dirs
        return False

    def should_ignore(self, path: Path, *, is_dir: bool = False) -> bool:
        try:
            rel_path = path.relative_to(self._root)
        except ValueError:
            return True

        rel_str = rel_path.as_posix()
        ignored = False
        for rule in self._rules:
            if rule.matches(rel_str, is_dir):
                ignored = not rule.negated
        return ignored

    def _load_recursive(self, root: Path) -> None:
        for dirpath, dirnames, filenames in root.walk():
            dirnames[:] = sorted(d for d in dirnames if d not in PRUNABLE_DIRS)
            rel_dir = "" if dirpath == root else dirpath.relative_to(root).as_posix()
            for name in self.IGNORE_FILE_NAMES:
                if name in filenames:
                    self._load_ignore_file(dirpath / name, rel_dir)

    def _load_ignore_file(self, path: Path, base: str = "") -> None:
        try:
            content = path.read_text(errors="replace")
        except OSError:
            return
        self._ignore_paths.append(path)
        for line in content.splitlines():
            self._add(line, base)

    def _add(self, line: str, base: str) -> None:
        rule = IgnoreRule.parse(line, base)
        if rule is None:
            return
        # Only root-level "!name" lines can re-enable a default-pruned directory
        if rule.negated and not base and "/" not in rule.pattern and "*" not in rule.pattern:
            self._negated_dirs.add(rule.pattern)
        self._rules.append(rule)
