"""
Query adapter: compile, forward, wrap.

Manifesto:
    The adapter is the whole of easql's query behavior and deliberately
    nothing more: render the expression, hand ``(sql, args)`` to the driver
    exactly once, and tag whatever goes wrong with the step that failed.
    No retries, no argument rewriting, no validation beyond compilation.

Architecture:
    ::

        get / select                  insert / update / delete
             │                                 │
        compile ──x──> CompileError     compile ──x──> CompileError
             │          "error to sql"          │
        fetch_one / fetch_many           execute
             │                                 │
             x──> QueryError / NoRowsError     x──> ExecError "error exec"
             x──> MappingError
                  "error get" / "error select"

    :class:`QueryerDelegate` forwards the five verbs to a held adapter, which
    is how :class:`~easql.DB` and :class:`~easql.Tx` share one surface.

Tags:
    queryer, adapter, delegation, easql
"""

from __future__ import annotations

from typing import Any, NoReturn

from .compiler import StatementCompiler
from .errors import CompileError, EasqlError, ExecError, MappingError, QueryError
from .logging import get_logger
from .protocols import RowDriver, Statement
from .types import ExecResult

logger = get_logger(__name__)

TAG_COMPILE = "error to sql"
TAG_GET = "error get"
TAG_SELECT = "error select"
TAG_EXEC = "error exec"


def _reraise(
    e: Exception,
    tag: str,
    default: type[EasqlError],
    keep: tuple[type[EasqlError], ...] = (),
    **context: Any,
) -> NoReturn:
    # Errors of the expected kinds keep their class; everything else becomes `default`.
    if isinstance(e, (default, *keep)):
        raise e.wrap(tag).with_context(**context) from e
    raise default(f"{tag}: {e}", cause=e).with_context(**context) from e


class QueryAdapter:
    """Stateless adapter over a borrowed :class:`~easql.protocols.RowDriver`."""

    def __init__(self, raw: RowDriver, compiler: StatementCompiler):
        self._raw = raw
        self._compiler = compiler

    @property
    def raw(self) -> RowDriver:
        return self._raw

    def get(self, dest: Any, stmt: Statement, *, timeout: float | None = None) -> Any:
        """Fetch one row into ``dest`` (a type, or a record instance to populate)."""
        sql, args = self._compile("get", stmt)
        try:
            return self._raw.fetch_one(dest, sql, args, timeout=timeout)
        except Exception as e:
            _reraise(e, TAG_GET, QueryError, (MappingError,), operation="get", sql=sql)

    def select(
        self, dest: type, stmt: Statement, *, timeout: float | None = None
    ) -> list[Any]:
        """Fetch every row as a ``dest`` value, in result order."""
        sql, args = self._compile("select", stmt)
        try:
            return self._raw.fetch_many(dest, sql, args, timeout=timeout)
        except Exception as e:
            _reraise(e, TAG_SELECT, QueryError, (MappingError,), operation="select", sql=sql)

    def insert(self, stmt: Statement, *, timeout: float | None = None) -> ExecResult:
        return self._exec("insert", stmt, timeout)

    def update(self, stmt: Statement, *, timeout: float | None = None) -> ExecResult:
        return self._exec("update", stmt, timeout)

    def delete(self, stmt: Statement, *, timeout: float | None = None) -> ExecResult:
        return self._exec("delete", stmt, timeout)

    # ------------------------------------------------------------------

    def _compile(self, op: str, stmt: Statement) -> tuple[str, list[Any]]:
        try:
            sql, args = self._compiler.compile(stmt)
        except Exception as e:
            _reraise(e, TAG_COMPILE, CompileError, operation=op)
        logger.debug("sql_compiled", op=op, sql=sql, args=len(args))
        return sql, args

    def _exec(self, op: str, stmt: Statement, timeout: float | None) -> ExecResult:
        sql, args = self._compile(op, stmt)
        try:
            return self._raw.execute(sql, args, timeout=timeout)
        except Exception as e:
            _reraise(e, TAG_EXEC, ExecError, operation=op, sql=sql)


class QueryerDelegate:
    """Expose a held :class:`QueryAdapter`'s verbs as this object's own."""

    _queryer: QueryAdapter

    def get(self, dest: Any, stmt: Statement, *, timeout: float | None = None) -> Any:
        return self._queryer.get(dest, stmt, timeout=timeout)

    def select(
        self, dest: type, stmt: Statement, *, timeout: float | None = None
    ) -> list[Any]:
        return self._queryer.select(dest, stmt, timeout=timeout)

    def insert(self, stmt: Statement, *, timeout: float | None = None) -> ExecResult:
        return self._queryer.insert(stmt, timeout=timeout)

    def update(self, stmt: Statement, *, timeout: float | None = None) -> ExecResult:
        return self._queryer.update(stmt, timeout=timeout)

    def delete(self, stmt: Statement, *, timeout: float | None = None) -> ExecResult:
        return self._queryer.delete(stmt, timeout=timeout)


__all__ = [
    "QueryAdapter",
    "QueryerDelegate",
]
