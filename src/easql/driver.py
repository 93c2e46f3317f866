"""SQLAlchemy-backed row-mapping driver.

The driver runs already-rendered SQL through ``exec_driver_sql`` and decodes
the result with a :class:`~easql.mapper.FieldMapper`. It is bound either to an
``Engine`` (each call checks a connection out of the pool; writes autocommit)
or to a ``Connection`` inside an open transaction (nothing is committed here).

Execution errors propagate as SQLAlchemy exceptions; classifying and tagging
them is the query adapter's job.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy.engine import Connection, CursorResult, Engine

from .errors import NoRowsError
from .mapper import FieldMapper
from .types import ExecResult


class SQLAlchemyDriver:
    """Row-mapping driver over an ``Engine`` or a ``Connection``."""

    def __init__(self, bind: Engine | Connection, mapper: FieldMapper | None = None):
        self._bind = bind
        self._mapper = mapper or FieldMapper()

    @property
    def bind(self) -> Engine | Connection:
        return self._bind

    @property
    def mapper(self) -> FieldMapper:
        return self._mapper

    def fetch_one(
        self, dest: Any, sql: str, args: Sequence[Any], *, timeout: float | None = None
    ) -> Any:
        with self._reading() as conn:
            result = self._run(conn, sql, args, timeout)
            columns = list(result.keys())
            row = result.first()
        if row is None:
            raise NoRowsError("no rows in result set")
        return self._mapper.map_row(dest, columns, row)

    def fetch_many(
        self, dest: type, sql: str, args: Sequence[Any], *, timeout: float | None = None
    ) -> list[Any]:
        with self._reading() as conn:
            result = self._run(conn, sql, args, timeout)
            columns = list(result.keys())
            rows = result.fetchall()
        return self._mapper.map_rows(dest, columns, rows)

    def execute(
        self, sql: str, args: Sequence[Any], *, timeout: float | None = None
    ) -> ExecResult:
        with self._writing() as conn:
            result = self._run(conn, sql, args, timeout)
            return ExecResult(
                rows_affected=result.rowcount,
                last_insert_id=result.lastrowid or None,
            )

    # ------------------------------------------------------------------

    @staticmethod
    def _run(
        conn: Connection, sql: str, args: Sequence[Any], timeout: float | None
    ) -> CursorResult:
        options = {"timeout": timeout} if timeout is not None else None
        return conn.exec_driver_sql(sql, tuple(args), execution_options=options)

    @contextmanager
    def _reading(self) -> Iterator[Connection]:
        if isinstance(self._bind, Engine):
            with self._bind.connect() as conn:
                yield conn
        else:
            yield self._bind

    @contextmanager
    def _writing(self) -> Iterator[Connection]:
        if isinstance(self._bind, Engine):
            with self._bind.begin() as conn:
                yield conn
        else:
            yield self._bind


__all__ = [
    "SQLAlchemyDriver",
]
