"""Transaction handle."""

from __future__ import annotations

from typing import Any

from sqlalchemy.engine import Connection, RootTransaction

from .compiler import StatementCompiler
from .driver import SQLAlchemyDriver
from .errors import CommitError, RollbackError
from .logging import get_logger
from .mapper import FieldMapper
from .queryer import QueryAdapter, QueryerDelegate

logger = get_logger(__name__)


class Tx(QueryerDelegate):
    """
    Open transaction exposing the same query surface as :class:`~easql.DB`.

    A ``Tx`` is bound to one checked-out connection and is NOT safe for
    concurrent use; callers sharing one across threads must serialize access
    themselves. ``commit()`` and ``rollback()`` are terminal and return the
    connection to the pool; calling anything afterwards is reported by the
    driver, not tracked here.

    Usage:
        with db.begin() as tx:
            tx.update(update(users).values(name="leo").where(users.c.id == 1))
        # committed, or rolled back if the block raised
    """

    def __init__(
        self,
        connection: Connection,
        transaction: RootTransaction,
        *,
        mapper: FieldMapper | None = None,
        compiler: StatementCompiler | None = None,
    ):
        self._conn = connection
        self._trans = transaction
        compiler = compiler or StatementCompiler(connection.dialect)
        self._queryer = QueryAdapter(SQLAlchemyDriver(connection, mapper), compiler)

    @property
    def raw(self) -> Connection:
        return self._conn

    def commit(self) -> None:
        try:
            self._trans.commit()
        except Exception as e:
            raise CommitError(f"error commit: {e}", cause=e) from e
        finally:
            self._conn.close()
        logger.debug("tx_commit")

    def rollback(self) -> None:
        try:
            self._trans.rollback()
        except Exception as e:
            raise RollbackError(f"error rollback: {e}", cause=e) from e
        finally:
            self._conn.close()
        logger.debug("tx_rollback")

    def __enter__(self) -> Tx:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is None:
            self.commit()
            return
        # The block's exception propagates; a failed rollback is only logged.
        try:
            self.rollback()
        except RollbackError as e:
            logger.error("tx_rollback_failed", error=str(e), during=exc_type.__name__)


__all__ = [
    "Tx",
]
