"""
Async execution of INSERT, UPDATE and SELECT statements.

Every function takes a *target*: an ``AsyncConnectionPool`` (a connection
is checked out for the call, committed on success and rolled back on error
by the pool) or an open ``AsyncConnection`` that the caller already owns,
in which case commit and rollback stay with the caller.

Driver failures are logged once and re-raised as DatabaseExecutionError.
Nothing is retried.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, List, Sequence, Tuple, Union

import psycopg
from psycopg import AsyncConnection
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from pgcrud.core.errors import DatabaseExecutionError, classify_postgres_error
from pgcrud.core.logger import setup_logger
from pgcrud.core.logging_context import LoggingContext
from pgcrud.query.formatter import Statement, build_insert, build_select, build_update, sql_summary
from pgcrud.query.values import FieldValue

logger = setup_logger(__name__, include_location=True)

Target = Union[AsyncConnectionPool, AsyncConnection]


@asynccontextmanager
async def _connection(target: Target):
    # Anything with a cursor() is already a connection
    if hasattr(target, "cursor"):
        yield target
    else:
        async with target.connection() as conn:
            yield conn


def _wrap(error: Exception, operation: str, table: str) -> DatabaseExecutionError:
    info = classify_postgres_error(error)
    logger.error(f"{operation} on {table} failed: [{info.code}] {info.message}")
    return DatabaseExecutionError(info, operation=operation, table=table)


def _log_statement(statement: Statement) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Executing %s with %s params", sql_summary(statement), len(statement.params))


async def _execute(conn, statement: Statement) -> int:
    _log_statement(statement)
    async with conn.cursor() as cur:
        await cur.execute(statement.query, statement.params)
        return cur.rowcount


async def insert(table_name: str, columns: Sequence[str], values: Sequence[Any], target: Target) -> None:
    """Insert one row."""
    statement = build_insert(table_name, columns, values)
    with LoggingContext(logger, operation="insert", table=table_name):
        try:
            async with _connection(target) as conn:
                await _execute(conn, statement)
        except psycopg.Error as e:
            raise _wrap(e, "insert", table_name) from e
        logger.debug(f"Inserted 1 row into {table_name}")


async def update(
        table_name: str,
        updates: Sequence[Tuple[str, Any]],
        key: Tuple[str, Any],
        target: Target,
) -> int:
    """Update rows matching ``key``; returns the affected row count."""
    statement = build_update(table_name, updates, key)
    with LoggingContext(logger, operation="update", table=table_name):
        try:
            async with _connection(target) as conn:
                rowcount = await _execute(conn, statement)
        except psycopg.Error as e:
            raise _wrap(e, "update", table_name) from e
        logger.debug(f"Updated {rowcount} rows in {table_name}")
        return rowcount


async def select(
        table_name: str,
        fields: Sequence[str],
        key: Tuple[str, Any],
        target: Target,
) -> List[List[FieldValue]]:
    """
    Select ``fields`` from rows matching ``key``.

    Each row comes back as a list of FieldValue in the order of ``fields``,
    looked up by name in the result row.
    """
    statement = build_select(table_name, fields, key)
    with LoggingContext(logger, operation="select", table=table_name):
        try:
            async with _connection(target) as conn:
                _log_statement(statement)
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(statement.query, statement.params)
                    rows = await cur.fetchall()
        except psycopg.Error as e:
            raise _wrap(e, "select", table_name) from e

        output = []
        for row in rows:
            output.append([FieldValue.from_python(row[field]) for field in fields])
        logger.debug(f"Fetched {len(output)} rows from {table_name}")
        return output


async def insert_transaction(
        table_name: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        target: Target,
) -> int:
    """
    Insert ``rows`` one statement at a time inside a single transaction.

    Commits once after the last row. The first failing statement rolls the
    whole transaction back and is raised as DatabaseExecutionError.
    Returns the number of rows inserted.
    """
    statements = [build_insert(table_name, columns, row) for row in rows]
    with LoggingContext(logger, operation="insert_transaction", table=table_name):
        done = 0
        try:
            async with _connection(target) as conn:
                async with conn.transaction():
                    for statement in statements:
                        await _execute(conn, statement)
                        done += 1
        except psycopg.Error as e:
            logger.warning(
                f"Rolled back transaction on {table_name} at statement {done + 1}/{len(statements)}"
            )
            raise _wrap(e, "insert_transaction", table_name) from e
        logger.success(f"Committed {done} rows into {table_name}")
        return done
