"""Multi-file search driver.

Each input runs through its own pipeline::

    Reading -> Parsing -> Projecting -> Querying -> Rendering -> Finished
                  \\________ read or parse failure ________/ -> Failed

Files are independent units of work spread over a process pool. A worker
returns the rendered lines of one file; the driver process is the only
writer of the output stream and writes each file's lines in one piece, so
lines of two files never interleave. Files complete in any order.

Failures:
- read and parse errors skip the file with a diagnostic, the run goes on;
- query errors are the same for every file, so the first one ends the run;
- internal errors end the run, and so does a worker process dying;
- anything else raised by one file's pipeline is reported for that file.
"""

from __future__ import annotations

import ast
import functools
import os
import sys
from collections.abc import Callable, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from concurrent.futures.process import BrokenProcessPool
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, TextIO

from pysg.config.models import LoggingConfig
from pysg.core.console import diagnostic
from pysg.core.errors import FileError, InternalError, PysgError
from pysg.core.logging import bound_file, configure_logging, get_logger
from pysg.query.evaluator import compile_query
from pysg.query.renderer import render
from pysg.syntax.projector import project

logger = get_logger("driver")

STDIN_NAME = "<stdin>"


@dataclass(frozen=True, slots=True)
class SearchOptions:
    """Per-run settings shared read-only by every file's pipeline."""

    expression: str
    line_numbers: bool = False


@dataclass(slots=True)
class FileReport:
    """Outcome of one file's pipeline."""

    name: str
    lines: list[str] = field(default_factory=list)
    error: str | None = None


@dataclass(slots=True)
class SearchSummary:
    searched: int = 0
    matched: int = 0
    failed: int = 0
    lines: int = 0

    def record(self, report: FileReport) -> None:
        self.searched += 1
        if report.error is not None:
            self.failed += 1
        elif report.lines:
            self.matched += 1
            self.lines += len(report.lines)


def read_source(path: Path, name: str) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise FileError.read_failed(name, e.strerror or str(e)) from e


def parse_source(source: bytes, name: str) -> ast.Module:
    """Parse raw bytes. The coding cookie or BOM selects the encoding."""
    try:
        return ast.parse(source, filename=name)
    except SyntaxError as e:
        raise FileError.parse_failed(name, e.msg, e.lineno, e.offset) from e
    except (ValueError, RecursionError) as e:
        raise FileError.parse_failed(name, str(e)) from e


def search_source(source: bytes, name: str, options: SearchOptions) -> list[str]:
    """Run parse, projection, query and rendering for one input."""
    with bound_file(name):
        module = parse_source(source, name)
        projection = project(module)
        result = compile_query(options.expression).evaluate(projection.tree)
        lines = render(result, projection, name, line_numbers=options.line_numbers)
        logger.debug("file_searched", nodes=len(projection.registry), lines=len(lines))
        return lines


def _collect(name: str, load: Callable[[], bytes], options: SearchOptions) -> FileReport:
    report = FileReport(name=name)
    try:
        report.lines = search_source(load(), name, options)
    except FileError as e:
        logger.debug("file_failed", file=name, **e.to_dict())
        report.error = e.message
    return report


def search_file(name: str, options: SearchOptions) -> FileReport:
    """Worker entry point: search one file, turning file errors into a report."""
    return _collect(name, lambda: read_source(Path(name), name), options)


def search_stream(stream: BinaryIO, name: str, options: SearchOptions) -> FileReport:
    """Search an already open binary stream."""

    def load() -> bytes:
        try:
            return stream.read()
        except OSError as e:
            raise FileError.read_failed(name, e.strerror or str(e)) from e

    return _collect(name, load, options)


def _init_worker(log_config: LoggingConfig | None) -> None:
    if log_config is not None:
        configure_logging(config=log_config)


def _describe(exc: BaseException) -> str:
    return f"{type(exc).__name__}: {exc}"


class SearchDriver:
    """Runs one expression over many inputs.

    The expression is compiled on construction, so a malformed expression
    fails before any input is enumerated or read.
    """

    def __init__(
        self,
        options: SearchOptions,
        *,
        workers: int | None = None,
        out: TextIO | None = None,
        on_error: Callable[[str, str], None] = diagnostic,
        log_config: LoggingConfig | None = None,
    ) -> None:
        compile_query(options.expression)
        self.options = options
        self.workers = workers or os.cpu_count() or 1
        self._out = out
        self._on_error = on_error
        self._log_config = log_config

    def run_stream(self, stream: BinaryIO, name: str = STDIN_NAME) -> SearchSummary:
        """Search a single stream in-process."""
        summary = SearchSummary()
        report = self._guarded(name, functools.partial(search_stream, stream, name, self.options))
        self._emit(report, summary)
        return summary

    def run_files(self, files: Sequence[str]) -> SearchSummary:
        """Search files, in parallel when more than one worker is useful."""
        summary = SearchSummary()
        workers = min(self.workers, len(files))
        logger.debug("search_started", files=len(files), workers=workers)
        if workers <= 1:
            for name in files:
                report = self._guarded(name, functools.partial(search_file, name, self.options))
                self._emit(report, summary)
        else:
            self._run_parallel(files, workers, summary)
        logger.debug(
            "search_finished",
            searched=summary.searched,
            matched=summary.matched,
            failed=summary.failed,
        )
        return summary

    def _run_parallel(self, files: Sequence[str], workers: int, summary: SearchSummary) -> None:
        with ProcessPoolExecutor(
            max_workers=workers,
            initializer=_init_worker,
            initargs=(self._log_config,),
        ) as executor:
            futures = {executor.submit(search_file, name, self.options): name for name in files}
            try:
                for future in as_completed(futures):
                    name = futures[future]
                    try:
                        report = self._guarded(name, future.result)
                    except BrokenProcessPool as e:
                        raise InternalError.worker_crashed(name, str(e)) from e
                    self._emit(report, summary)
            except BaseException:
                executor.shutdown(wait=True, cancel_futures=True)
                raise

    def _guarded(self, name: str, produce: Callable[[], FileReport]) -> FileReport:
        """Collect one file's report, keeping its failures to itself.

        Errors of the whole run (query, internal, a dead worker pool) propagate.
        """
        try:
            return produce()
        except (PysgError, BrokenProcessPool):
            raise
        except Exception as e:
            logger.warning("file_pipeline_crashed", file=name, error=_describe(e))
            return FileReport(name=name, error=_describe(e))

    def _emit(self, report: FileReport, summary: SearchSummary) -> None:
        summary.record(report)
        if report.error is not None:
            self._on_error(report.name, report.error)
            return
        if report.lines:
            out = self._out or sys.stdout
            out.write("".join(f"{line}\n" for line in report.lines))
            out.flush()

