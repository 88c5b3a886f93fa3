from pgcrud.core.errors import (
    ErrorKind,
    ErrorInfo,
    PgCrudError,
    QueryBuildError,
    FieldConversionError,
    DatabaseExecutionError,
)
from pgcrud.query import (
    Statement,
    format_insert_query,
    format_update_query,
    format_select_string,
    build_insert,
    build_update,
    build_select,
    FieldKind,
    FieldValue,
)
from pgcrud.executor import insert, update, select, insert_transaction
from pgcrud.io import read_delimited

__version__ = "0.1.0"

__all__ = [
    "format_insert_query",
    "insert",
    "format_update_query",
    "update",
    "format_select_string",
    "select",
    "insert_transaction",
    "build_insert",
    "build_update",
    "build_select",
    "Statement",
    "FieldKind",
    "FieldValue",
    "ErrorKind",
    "ErrorInfo",
    "PgCrudError",
    "QueryBuildError",
    "FieldConversionError",
    "DatabaseExecutionError",
    "read_delimited",
]
