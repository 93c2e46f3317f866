"""
Connection handle and engine factory.

Manifesto:
    A ``DB`` is an explicitly constructed, owned handle over one SQLAlchemy
    engine. There is no process-wide instance: code that needs a shared
    handle receives it as an argument, which keeps tests free to build as
    many isolated handles as they like.

Features:
    - ``DB``: pooled query surface + ``begin()`` / ``transaction()`` / ``close()``
    - ``open_db()``: URL -> engine -> mapper -> ping, for any SQLAlchemy URL
    - ``create_pooled_engine()``: idle/open connection limits mapped onto
      SQLAlchemy's ``pool_size`` / ``max_overflow``

Examples:
    >>> db = open_db("sqlite:///app.db")
    >>> with db.transaction() as tx:
    ...     tx.insert(insert(users).values(id=1))
    >>> db.close()

Tags:
    connection, pool, handle, engine, easql
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.pool import NullPool

from .compiler import StatementCompiler
from .driver import SQLAlchemyDriver
from .errors import BeginError, CloseError, DatabaseConnectionError
from .logging import get_logger
from .mapper import FieldMapper
from .queryer import QueryAdapter, QueryerDelegate
from .tx import Tx

logger = get_logger(__name__)


class DB(QueryerDelegate):
    """
    Connection handle over a SQLAlchemy ``Engine``.

    Safe to share between threads: every query checks its own connection out
    of the pool. ``close()`` is terminal and not guarded against repeats.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        mapper: FieldMapper | None = None,
        compiler: StatementCompiler | None = None,
    ):
        self._engine = engine
        self._mapper = mapper or FieldMapper()
        self._compiler = compiler or StatementCompiler(engine.dialect)
        self._queryer = QueryAdapter(SQLAlchemyDriver(engine, self._mapper), self._compiler)

    @property
    def raw(self) -> Engine:
        return self._engine

    def ping(self) -> None:
        """Check the database is reachable."""
        try:
            with self._engine.connect() as conn:
                conn.exec_driver_sql("SELECT 1")
        except Exception as e:
            logger.warning("db_ping_failed", error=str(e))
            raise DatabaseConnectionError(f"error ping: {e}", cause=e) from e

    def begin(self) -> Tx:
        """Check out a connection and open a transaction on it."""
        conn = None
        try:
            conn = self._engine.connect()
            trans = conn.begin()
        except Exception as e:
            if conn is not None:
                conn.close()
            raise BeginError(f"error begin: {e}", cause=e) from e
        logger.debug("tx_begin")
        return Tx(conn, trans, mapper=self._mapper, compiler=self._compiler)

    @contextmanager
    def transaction(self) -> Iterator[Tx]:
        """Yield a ``Tx``; commit on success, roll back and re-raise on error."""
        with self.begin() as tx:
            yield tx

    def close(self) -> None:
        """Release the connection pool."""
        try:
            self._engine.dispose()
        except Exception as e:
            raise CloseError(f"error close: {e}", cause=e) from e
        logger.info("db_closed")

    def __enter__(self) -> DB:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def create_pooled_engine(
    url: str | URL,
    *,
    max_idle_conns: int = 2,
    max_open_conns: int = 0,
    connect_args: dict[str, Any] | None = None,
    echo: bool = False,
    **kwargs: Any,
) -> Engine:
    """Create a SQLAlchemy engine with idle/open connection limits.

    Parameters
    ----------
    max_idle_conns:
        Connections kept open while idle (``pool_size``). ``<= 0`` keeps
        none (``NullPool``).
    max_open_conns:
        Upper bound on simultaneously open connections. ``<= 0`` means
        unlimited (``max_overflow=-1``).
    connect_args:
        Extra arguments for the DBAPI ``connect()`` call.

    SQLite URLs ignore the pool limits; SQLAlchemy picks a suitable pool.
    """
    url = make_url(url)
    if connect_args:
        kwargs["connect_args"] = connect_args

    if url.get_backend_name() == "sqlite":
        return create_engine(url, echo=echo, **kwargs)

    if max_idle_conns <= 0:
        kwargs["poolclass"] = NullPool
    elif max_open_conns > 0:
        pool_size = min(max_idle_conns, max_open_conns)
        kwargs["pool_size"] = pool_size
        kwargs["max_overflow"] = max_open_conns - pool_size
    else:
        kwargs["pool_size"] = max_idle_conns
        kwargs["max_overflow"] = -1

    return create_engine(url, echo=echo, **kwargs)


def open_db(
    url: str | URL,
    *,
    max_idle_conns: int = 2,
    max_open_conns: int = 0,
    mapper_func: Callable[[str], str] | None = None,
    connect_args: dict[str, Any] | None = None,
    echo: bool = False,
) -> DB:
    """Create a pooled engine for ``url``, ping it and return a ``DB``."""
    try:
        engine = create_pooled_engine(
            url,
            max_idle_conns=max_idle_conns,
            max_open_conns=max_open_conns,
            connect_args=connect_args,
            echo=echo,
        )
    except Exception as e:
        raise DatabaseConnectionError(f"error open: {e}", cause=e) from e

    db = DB(engine, mapper=FieldMapper(mapper_func))
    try:
        db.ping()
    except DatabaseConnectionError:
        engine.dispose()
        raise

    logger.info("db_opened", url=engine.url.render_as_string(hide_password=True))
    return db


__all__ = [
    "DB",
    "create_pooled_engine",
    "open_db",
]
