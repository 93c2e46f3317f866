"""Statement compilation: expression tree -> ``(sql, args)``.

Two kinds of expression are accepted:

* SQLAlchemy Core constructs (``select``, ``insert``, ``update``, ``delete``,
  ``text``), compiled against the handle's dialect;
* any object with a ``to_sql()`` method returning ``(sql, args)``.

Arguments are always returned as an ordered list, so the dialect must use a
positional paramstyle (``qmark`` / ``format`` / ``numeric``). MySQL and
SQLite drivers do.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy.engine import Compiled, Dialect
from sqlalchemy.sql import ClauseElement

from .errors import CompileError
from .protocols import SqlBuilder, Statement


class StatementCompiler:
    """Render statements for a single SQL dialect."""

    def __init__(self, dialect: Dialect):
        self._dialect = dialect

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    def compile(self, stmt: Statement) -> tuple[str, list[Any]]:
        """Render ``stmt``; raises :class:`CompileError` on any failure."""
        if isinstance(stmt, ClauseElement):
            return self._compile_clause(stmt)
        if isinstance(stmt, SqlBuilder):
            return self._compile_builder(stmt)
        raise CompileError(f"unsupported statement type {type(stmt).__name__}")

    def _compile_clause(self, stmt: ClauseElement) -> tuple[str, list[Any]]:
        if not self._dialect.positional:
            raise CompileError(
                f"dialect {self._dialect.name!r} uses {self._dialect.paramstyle!r} "
                "parameters; a positional paramstyle is required"
            )
        try:
            compiled = stmt.compile(
                dialect=self._dialect,
                compile_kwargs={"render_postcompile": True},
            )
            args = self._bound_args(compiled)
        except Exception as e:
            raise CompileError(str(e), cause=e) from e
        return str(compiled), args

    @staticmethod
    def _bound_args(compiled: Compiled) -> list[Any]:
        # exec_driver_sql skips type processing, so apply the column types'
        # bind processors (JSON, Enum, ...) the way a Core execute would.
        params = compiled.params
        processors = dict(compiled._bind_processors)
        expanded = compiled._post_compile_expanded_state
        if expanded is not None:
            processors.update(expanded.processors)

        args = []
        for name in compiled.positiontup or ():
            process = processors.get(name)
            value = params[name]
            args.append(process(value) if callable(process) else value)
        return args

    @staticmethod
    def _compile_builder(stmt: SqlBuilder) -> tuple[str, list[Any]]:
        try:
            sql, args = stmt.to_sql()
        except Exception as e:
            raise CompileError(str(e), cause=e) from e

        if not isinstance(sql, str):
            raise CompileError(f"to_sql returned {type(sql).__name__} for sql text")
        if args is None:
            return sql, []
        if isinstance(args, (str, bytes, Mapping)) or not isinstance(args, Sequence):
            raise CompileError(f"to_sql returned {type(args).__name__} for args; expected a sequence")
        return sql, list(args)


__all__ = [
    "StatementCompiler",
]
