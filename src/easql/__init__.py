"""easql -- one query surface over a connection pool or a transaction.

Statements are built with SQLAlchemy Core (or anything with ``to_sql()``),
rendered to ``(sql, args)`` and forwarded to a row-mapping driver; results
are decoded into scalars, dicts, dataclasses or pydantic models.

    >>> from sqlalchemy import column, select, table
    >>> db = easql.open_mysql(easql.Config(host="localhost", name="app", user="app"))
    >>> users = table("users", column("id"), column("name"))
    >>> db.get(int, select(users.c.id).where(users.c.id == 1))
    1
    >>> with db.transaction() as tx:
    ...     tx.update(users.update().values(name="leo").where(users.c.id == 1))

Modules
-------
errors      Error taxonomy (CompileError, QueryError, ExecError, ...)
protocols   SqlBuilder / RowDriver / Queryer protocols
compiler    StatementCompiler: expression -> (sql, args)
mapper      FieldMapper: rows -> destination values
driver      SQLAlchemyDriver over an Engine or a Connection
queryer     QueryAdapter + QueryerDelegate
db / tx     DB and Tx handles
mysql       open_mysql(config)
settings    EasqlSettings (EASQL_* environment variables)
logging     structlog configuration
"""

from .compiler import StatementCompiler
from .db import DB, create_pooled_engine, open_db
from .driver import SQLAlchemyDriver
from .errors import (
    BeginError,
    CloseError,
    CommitError,
    CompileError,
    DatabaseConnectionError,
    EasqlError,
    ErrorCategory,
    ErrorContext,
    ExecError,
    MappingError,
    NoRowsError,
    QueryError,
    RollbackError,
    TransactionError,
)
from .mapper import FieldMapper
from .mysql import open_mysql
from .protocols import Queryer, RowDriver, SqlBuilder, Statement
from .queryer import QueryAdapter, QueryerDelegate
from .tx import Tx
from .types import Config, ExecResult

__version__ = "0.3.0"

__all__ = [
    # Handles
    "DB",
    "Tx",
    "open_db",
    "open_mysql",
    "create_pooled_engine",
    # Types
    "Config",
    "ExecResult",
    # Protocols
    "Queryer",
    "RowDriver",
    "SqlBuilder",
    "Statement",
    # Building blocks
    "QueryAdapter",
    "QueryerDelegate",
    "StatementCompiler",
    "SQLAlchemyDriver",
    "FieldMapper",
    # Errors
    "ErrorCategory",
    "ErrorContext",
    "EasqlError",
    "CompileError",
    "QueryError",
    "NoRowsError",
    "ExecError",
    "MappingError",
    "DatabaseConnectionError",
    "CloseError",
    "TransactionError",
    "BeginError",
    "CommitError",
    "RollbackError",
]
