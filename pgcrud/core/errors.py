"""
Error types and PostgreSQL error classification for pgcrud.

Every driver failure raised while executing a statement is wrapped into
``DatabaseExecutionError``. Its ``info`` attribute is an ``ErrorInfo``
describing what kind of failure it was, so callers can branch on
``err.info.kind`` or ``err.info.retryable`` without string matching:

    try:
        await insert("book", columns, values, pool)
    except DatabaseExecutionError as err:
        if err.info.kind == ErrorKind.DB_CONSTRAINT:
            ...
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Database error categories."""

    DB_CONNECTION = "db_connection" # Connection refused, lost, pool exhausted
    DB_CONSTRAINT = "db_constraint" # Unique, foreign key, not null, check
    DB_DEADLOCK = "db_deadlock"     # Deadlock or serialization failure
    DB_TIMEOUT = "db_timeout"       # Statement or pool timeout
    DB_SYNTAX = "db_syntax"         # Syntax error or unknown table/column
    UNKNOWN = "unknown"


class ErrorInfo(BaseModel):
    """Structured description of a database failure."""

    kind: ErrorKind = Field(
        default=ErrorKind.UNKNOWN,
        description="Error category"
    )
    retryable: bool = Field(
        default=False,
        description="Whether the same statement may succeed if re-run"
    )
    code: str = Field(
        default="PG_UNKNOWN",
        description="PG_<sqlstate> or PG_UNKNOWN"
    )
    message: str = Field(
        default="Unknown error",
        description="Driver error message"
    )
    pg_code: Optional[str] = Field(
        None, description="PostgreSQL SQLSTATE (e.g. 40001, 40P01, 23505)"
    )
    exception_type: Optional[str] = Field(
        None, description="Driver exception class name"
    )

    def to_dict(self) -> dict[str, Any]:
        d = {
            "kind": self.kind.value,
            "retryable": self.retryable,
            "code": self.code,
            "message": self.message,
        }
        if self.pg_code is not None:
            d["pg_code"] = self.pg_code
        if self.exception_type is not None:
            d["exception_type"] = self.exception_type
        return d


class PgCrudError(Exception):
    """Base class for pgcrud errors."""


class QueryBuildError(PgCrudError, ValueError):
    """Raised when a statement cannot be built from the given inputs."""


class FieldConversionError(PgCrudError, ValueError):
    """Raised when a result field cannot be converted to the requested type."""


class DatabaseExecutionError(PgCrudError):
    """A statement failed in the driver, the pool or the database."""

    def __init__(self, info: ErrorInfo, operation: str, table: Optional[str] = None):
        self.info = info
        self.operation = operation
        self.table = table
        target = f" on {table}" if table else ""
        super().__init__(f"{operation}{target} failed: {info.message}")


def classify_postgres_error(
    error: Exception,
    error_code: Optional[str] = None,
) -> ErrorInfo:
    """Classify a psycopg / psycopg_pool exception."""
    error_str = str(error).lower()

    pg_code = error_code or getattr(error, "sqlstate", None)
    code = f"PG_{pg_code}" if pg_code else "PG_UNKNOWN"

    def _info(kind: ErrorKind, retryable: bool) -> ErrorInfo:
        return ErrorInfo(
            kind=kind,
            retryable=retryable,
            code=code,
            message=str(error),
            pg_code=pg_code,
            exception_type=type(error).__name__,
        )

    # The server's SQLSTATE wins; message text may name tables or columns
    if pg_code:
        if pg_code in ("40001", "40P01"):
            return _info(ErrorKind.DB_DEADLOCK, True)
        if pg_code.startswith("23"):
            return _info(ErrorKind.DB_CONSTRAINT, False)
        if pg_code == "57014":
            return _info(ErrorKind.DB_TIMEOUT, True)
        if pg_code.startswith("08"):
            return _info(ErrorKind.DB_CONNECTION, True)
        if pg_code.startswith("42"):
            return _info(ErrorKind.DB_SYNTAX, False)
        return _info(ErrorKind.UNKNOWN, False)

    # Client-side failures (pool checkout, lost connection) carry no SQLSTATE
    if type(error).__name__ == "PoolTimeout" or "timeout" in error_str:
        return _info(ErrorKind.DB_TIMEOUT, True)
    if "deadlock" in error_str:
        return _info(ErrorKind.DB_DEADLOCK, True)
    if "duplicate key" in error_str or "violates" in error_str:
        return _info(ErrorKind.DB_CONSTRAINT, False)
    if "connection" in error_str:
        return _info(ErrorKind.DB_CONNECTION, True)

    return _info(ErrorKind.UNKNOWN, False)


__all__ = [
    "ErrorKind",
    "ErrorInfo",
    "PgCrudError",
    "QueryBuildError",
    "FieldConversionError",
    "DatabaseExecutionError",
    "classify_postgres_error",
]
