"""
Structural protocols for easql.

Architecture:
    ::

        caller ──> Queryer (DB | Tx) ──> QueryAdapter
                                            │
                          SqlBuilder.to_sql()│ / SQLAlchemy ClauseElement
                                            v
                                        RowDriver ──> database

    ``SqlBuilder`` and ``RowDriver`` are the two collaborators the adapter
    consumes; ``Queryer`` is the surface both handles expose.

Tags:
    protocol, queryer, driver, builder, easql
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, Union, runtime_checkable

from sqlalchemy.sql import ClauseElement

if TYPE_CHECKING:
    from .types import ExecResult


@runtime_checkable
class SqlBuilder(Protocol):
    """Anything that renders itself to ``(sql, args)``."""

    def to_sql(self) -> tuple[str, Sequence[Any]]:
        ...


Statement = Union[ClauseElement, SqlBuilder]


@runtime_checkable
class RowDriver(Protocol):
    """
    Row-mapping driver the adapter forwards rendered SQL to.

    ``timeout`` is an opaque deadline forwarded from the caller; interpreting
    it is the driver's business.
    """

    def fetch_one(
        self, dest: Any, sql: str, args: Sequence[Any], *, timeout: float | None = None
    ) -> Any:
        ...

    def fetch_many(
        self, dest: type, sql: str, args: Sequence[Any], *, timeout: float | None = None
    ) -> list[Any]:
        ...

    def execute(
        self, sql: str, args: Sequence[Any], *, timeout: float | None = None
    ) -> ExecResult:
        ...


@runtime_checkable
class Queryer(Protocol):
    """Query surface shared by :class:`~easql.DB` and :class:`~easql.Tx`."""

    def get(self, dest: Any, stmt: Statement, *, timeout: float | None = None) -> Any:
        ...

    def select(
        self, dest: type, stmt: Statement, *, timeout: float | None = None
    ) -> list[Any]:
        ...

    def insert(self, stmt: Statement, *, timeout: float | None = None) -> ExecResult:
        ...

    def update(self, stmt: Statement, *, timeout: float | None = None) -> ExecResult:
        ...

    def delete(self, stmt: Statement, *, timeout: float | None = None) -> ExecResult:
        ...


__all__ = [
    "SqlBuilder",
    "Statement",
    "RowDriver",
    "Queryer",
]
