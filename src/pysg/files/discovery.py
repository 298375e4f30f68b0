"""Input file enumeration.

Paths named on the command line are searched as given. Directories are
walked in sorted order so a run is reproducible; inside them only files
whose name matches one of the globs are kept. Display names keep the form
the path was given in (``src`` yields ``src/pkg/mod.py``).

Enumeration finishes before any file is searched, and any failure here is
fatal for the run.
"""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Sequence
from pathlib import Path

from pysg.core.errors import EnumerationError
from pysg.core.excludes import is_hardcoded_dir
from pysg.core.logging import get_logger
from pysg.files.ignore import IgnoreChecker

logger = get_logger("discovery")

DEFAULT_GLOBS: tuple[str, ...] = ("*.py", "*.pyi")


def matches_globs(filename: str, globs: Sequence[str]) -> bool:
    return any(fnmatch.fnmatch(filename, pattern) for pattern in globs)


def discover_files(
    paths: Sequence[str],
    *,
    globs: Sequence[str] = DEFAULT_GLOBS,
    respect_ignore: bool = True,
    hidden: bool = False,
) -> list[str]:
    """Expand paths into the list of files to search.

    Args:
        paths: Files or directories, as given by the user.
        globs: File name patterns kept inside directories.
        respect_ignore: Apply .gitignore/.ignore files and default exclusions.
        hidden: Walk hidden files and directories.

    Returns:
        Display names of the files to search, in enumeration order.

    Raises:
        EnumerationError: A path does not exist or a directory cannot be walked.
    """
    files: list[str] = []
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise EnumerationError.path_not_found(raw)
        if path.is_dir():
            files.extend(
                _walk(raw, globs=globs, respect_ignore=respect_ignore, hidden=hidden)
            )
        else:
            files.append(raw)

    logger.debug("files_discovered", roots=len(paths), files=len(files))
    return files


def _walk(
    root: str,
    *,
    globs: Sequence[str],
    respect_ignore: bool,
    hidden: bool,
) -> list[str]:
    checker = IgnoreChecker(Path(root)) if respect_ignore else None

    def on_error(err: OSError) -> None:
        raise EnumerationError.traversal_failed(
            str(err.filename or root), err.strerror or str(err)
        ) from err

    found: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        current = Path(dirpath)
        dirnames[:] = sorted(
            d for d in dirnames if _keep_dir(current / d, checker, hidden=hidden)
        )
        for filename in sorted(filenames):
            if not hidden and filename.startswith("."):
                continue
            if not matches_globs(filename, globs):
                continue
            if checker is not None and checker.should_ignore(current / filename):
                continue
            found.append(os.path.join(dirpath, filename))
    return found


def _keep_dir(path: Path, checker: IgnoreChecker | None, *, hidden: bool) -> bool:
    name = path.name
    if is_hardcoded_dir(name):
        return False
    if not hidden and name.startswith("."):
        return False
    if checker is None:
        return True
    if checker.should_prune_dir(name):
        return False
    return not checker.should_ignore(path, is_dir=True)
