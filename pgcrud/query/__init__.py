from pgcrud.query.formatter import (
    Statement,
    format_insert_query,
    format_update_query,
    format_select_string,
    build_insert,
    build_update,
    build_select,
    sql_summary,
)
from pgcrud.query.values import FieldKind, FieldValue

__all__ = [
    "Statement",
    "format_insert_query",
    "format_update_query",
    "format_select_string",
    "build_insert",
    "build_update",
    "build_select",
    "sql_summary",
    "FieldKind",
    "FieldValue",
]
