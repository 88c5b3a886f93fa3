"""
SQL text for INSERT, UPDATE and SELECT statements.

Two families live here:

- ``format_*`` functions render literal SQL text. Values are wrapped in
  single quotes without escaping and identifiers are inserted verbatim, so
  the output must never carry untrusted input to the database. They are kept
  for their exact textual output (logging, inspection, scripts).
- ``build_*`` functions return a ``Statement``: a ``psycopg.sql.Composed``
  with quoted identifiers and ``%s`` placeholders plus the tuple of values
  to bind. The executors only ever send these.
"""

from typing import Any, NamedTuple, Sequence, Tuple

from psycopg import sql

from pgcrud.core.errors import QueryBuildError


class Statement(NamedTuple):
    query: sql.Composed
    params: Tuple[Any, ...]


def format_insert_query(table_name: str, columns: Sequence[str], values: Sequence[str]) -> str:
    """
    INSERT INTO <table> (<c1>,<c2>,...) VALUES ('<v1>','<v2>',...)

    Column and value counts are not checked; empty lists give malformed SQL.
    """
    query = "INSERT INTO " + table_name + " ("
    for column in columns:
        query += column + ","
    query = query[:-1] + ") VALUES ("
    for value in values:
        query += "'" + value + "',"
    return query[:-1] + ")"


def format_update_query(table_name: str, updates: Sequence[Tuple[str, str]], key: Tuple[str, str]) -> str:
    """UPDATE <table> SET <c1> = '<v1>',<c2> = '<v2>' WHERE <k> = '<kv>'"""
    query = "UPDATE " + table_name + " SET "
    for column, value in updates:
        query += column + " = '" + value + "',"
    query = query[:-1]
    key_column, key_value = key
    return query + " WHERE " + key_column + " = '" + key_value + "'"


def format_select_string(table_name: str, fields: Sequence[str], key: Tuple[str, str]) -> str:
    """SELECT <f1>,<f2> FROM <table> WHERE <k> = '<kv>'"""
    query = "SELECT "
    for field in fields:
        query += field + ","
    query = query[:-1]
    key_column, key_value = key
    return query + " FROM " + table_name + " WHERE " + key_column + " = '" + key_value + "'"


def _table_identifier(table_name: str) -> sql.Identifier:
    if not table_name or not table_name.strip():
        raise QueryBuildError("Table name cannot be empty")
    # schema.table -> "schema"."table"
    parts = table_name.split(".")
    if any(not part for part in parts):
        raise QueryBuildError(f"Invalid table name: {table_name!r}")
    return sql.Identifier(*parts)


def _column_identifiers(columns: Sequence[str], what: str) -> sql.Composed:
    if not columns:
        raise QueryBuildError(f"At least one {what} is required")
    for column in columns:
        if not column:
            raise QueryBuildError(f"Empty {what} name in {list(columns)!r}")
    return sql.SQL(",").join(sql.Identifier(column) for column in columns)


def _key_clause(key: Tuple[str, Any]) -> Tuple[sql.Composed, Any]:
    try:
        key_column, key_value = key
    except (TypeError, ValueError):
        raise QueryBuildError(f"Key must be a (column, value) pair, got {key!r}")
    if not key_column:
        raise QueryBuildError("Key column cannot be empty")
    clause = sql.SQL("{} = {}").format(sql.Identifier(key_column), sql.Placeholder())
    return clause, key_value


def build_insert(table_name: str, columns: Sequence[str], values: Sequence[Any]) -> Statement:
    """Parameterized INSERT. ``values`` must line up with ``columns``."""
    column_list = _column_identifiers(columns, "column")
    if len(values) != len(columns):
        raise QueryBuildError(
            f"INSERT into {table_name} has {len(columns)} columns but {len(values)} values"
        )
    query = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({placeholders})").format(
        table=_table_identifier(table_name),
        columns=column_list,
        placeholders=sql.SQL(",").join(sql.Placeholder() * len(columns)),
    )
    return Statement(query, tuple(values))


def build_update(table_name: str, updates: Sequence[Tuple[str, Any]], key: Tuple[str, Any]) -> Statement:
    """Parameterized UPDATE ... SET ... WHERE <key column> = <key value>."""
    if not updates:
        raise QueryBuildError("At least one update is required")
    assignments = []
    params = []
    for column, value in updates:
        if not column:
            raise QueryBuildError(f"Empty column name in updates for {table_name}")
        assignments.append(sql.SQL("{} = {}").format(sql.Identifier(column), sql.Placeholder()))
        params.append(value)
    where, key_value = _key_clause(key)
    query = sql.SQL("UPDATE {table} SET {assignments} WHERE {where}").format(
        table=_table_identifier(table_name),
        assignments=sql.SQL(",").join(assignments),
        where=where,
    )
    params.append(key_value)
    return Statement(query, tuple(params))


def build_select(table_name: str, fields: Sequence[str], key: Tuple[str, Any]) -> Statement:
    """Parameterized SELECT <fields> FROM <table> WHERE <key column> = <key value>."""
    field_list = _column_identifiers(fields, "field")
    where, key_value = _key_clause(key)
    query = sql.SQL("SELECT {fields} FROM {table} WHERE {where}").format(
        fields=field_list,
        table=_table_identifier(table_name),
        where=where,
    )
    return Statement(query, (key_value,))


def sql_summary(statement) -> str:
    """Operation keyword and length, for logging without values."""
    if isinstance(statement, Statement):
        text = statement.query.as_string(None)
    elif isinstance(statement, sql.Composable):
        text = statement.as_string(None)
    else:
        text = statement or ""
    trimmed = text.strip()
    if not trimmed:
        return "UNKNOWN len=0"
    operation = trimmed.split(None, 1)[0].upper()
    return f"{operation} len={len(trimmed)}"
