"""pysg error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Enumeration (fatal)
- 4xxx: File (recovered per file)
- 5xxx: Query (fatal)
- 9xxx: Internal (fatal)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Enumeration (3xxx)
    PATH_NOT_FOUND = 3001
    TRAVERSAL_FAILED = 3002

    # File (4xxx)
    READ_FAILED = 4001
    PARSE_FAILED = 4002

    # Query (5xxx)
    QUERY_SYNTAX = 5001
    QUERY_EVALUATION = 5002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    BACKREF_OUT_OF_RANGE = 9002
    UNCOVERED_KIND = 9003
    UNMAPPED_FIELD = 9004
    WORKER_CRASHED = 9005


@dataclass(frozen=True, slots=True)
class PysgError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'PARSE_FAILED')."""
        return self.code.name

    @property
    def is_fatal(self) -> bool:
        """Whether the error ends the whole run rather than one file."""
        return not isinstance(self, FileError)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __reduce__(self) -> tuple[Any, ...]:
        # Worker processes hand errors back to the driver by pickling.
        return (type(self), (self.code, self.message, self.details))

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(PysgError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class EnumerationError(PysgError):
    """The set of input files could not be enumerated."""

    @classmethod
    def path_not_found(cls, path: str) -> "EnumerationError":
        return cls(
            code=ErrorCode.PATH_NOT_FOUND,
            message=f"No such file or directory: {path}",
            details={"path": path},
        )

    @classmethod
    def traversal_failed(cls, path: str, reason: str) -> "EnumerationError":
        return cls(
            code=ErrorCode.TRAVERSAL_FAILED,
            message=f"Failed to walk {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class FileError(PysgError):
    """A single input could not be searched. The run continues."""

    @property
    def name(self) -> str:
        return str(self.details.get("name", ""))

    @classmethod
    def read_failed(cls, name: str, reason: str) -> "FileError":
        return cls(
            code=ErrorCode.READ_FAILED,
            message=reason,
            details={"name": name},
        )

    @classmethod
    def parse_failed(
        cls, name: str, reason: str, line: int | None = None, column: int | None = None
    ) -> "FileError":
        message = reason
        if line is not None:
            message = f"{reason} (line {line}" + (
                f", column {column})" if column is not None else ")"
            )
        return cls(
            code=ErrorCode.PARSE_FAILED,
            message=message,
            details={"name": name, "line": line, "column": column},
        )


class QueryError(PysgError):
    """The XPath expression is unusable. Shared by every file, so fatal."""

    @classmethod
    def invalid_syntax(cls, expression: str, reason: str) -> "QueryError":
        return cls(
            code=ErrorCode.QUERY_SYNTAX,
            message=f"Invalid expression {expression!r}: {reason}",
            details={"expression": expression, "reason": reason},
        )

    @classmethod
    def evaluation_failed(cls, expression: str, reason: str) -> "QueryError":
        return cls(
            code=ErrorCode.QUERY_EVALUATION,
            message=f"Failed to evaluate {expression!r}: {reason}",
            details={"expression": expression, "reason": reason},
        )


class InternalError(PysgError):
    """Internal/unexpected errors. These indicate a bug in pysg."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

    @classmethod
    def backref_out_of_range(cls, ref: int, size: int) -> "InternalError":
        return cls(
            code=ErrorCode.BACKREF_OUT_OF_RANGE,
            message=f"Backreference {ref} outside registry of {size} nodes",
            details={"ref": ref, "size": size},
        )

    @classmethod
    def uncovered_kinds(cls, kinds: list[str]) -> "InternalError":
        return cls(
            code=ErrorCode.UNCOVERED_KIND,
            message=f"No projection rule for syntax kinds: {', '.join(kinds)}",
            details={"kinds": kinds},
        )

    @classmethod
    def unmapped_field(cls, kind: str, field: str, value_type: str) -> "InternalError":
        return cls(
            code=ErrorCode.UNMAPPED_FIELD,
            message=f"{kind}.{field} holds unmapped {value_type} value",
            details={"kind": kind, "field": field, "type": value_type},
        )

    @classmethod
    def worker_crashed(cls, name: str, reason: str) -> "InternalError":
        return cls(
            code=ErrorCode.WORKER_CRASHED,
            message=f"Worker process died while searching {name}: {reason}",
            details={"file": name, "reason": reason},
        )
