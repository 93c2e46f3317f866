"""
Structured error types for easql.

Every failure raised by easql is an :class:`EasqlError` subclass carrying a
category, a small context record and the underlying cause. Layers wrap the
error they receive with a short static tag (``"error get"``, ``"error exec"``)
and re-raise; nothing is retried or suppressed on the way up.

Manifesto:
    - **Typed taxonomy:** One class per failing step (compile, query, exec,
      mapping, connection, transaction lifecycle)
    - **Tagged messages:** ``"error get: no rows in result set"`` reads as a
      path from the call site down to the root cause
    - **Inspectable chain:** ``cause`` and ``__cause__`` always point at the
      original exception

Architecture:
    ::

        EasqlError  (category, context, cause)
        ├── CompileError              COMPILE
        ├── QueryError                QUERY
        │   └── NoRowsError
        ├── ExecError                 QUERY
        ├── MappingError              MAPPING
        ├── DatabaseConnectionError   CONNECTION
        ├── CloseError                CONNECTION
        └── TransactionError          TRANSACTION
            ├── BeginError
            ├── CommitError
            └── RollbackError

Examples:
    >>> err = NoRowsError("no rows in result set").wrap("error get")
    >>> str(err)
    'error get: no rows in result set'
    >>> isinstance(err, QueryError)
    True
    >>> str(err.root_cause)
    'no rows in result set'

Guardrails:
    ❌ DON'T: ``raise QueryError(str(e))`` and drop the original
    ✅ DO: ``raise QueryError(f"error get: {e}", cause=e) from e``

Tags:
    error-handling, exception-hierarchy, error-context, easql

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories for classification and log routing."""

    COMPILE = "COMPILE"           # Expression -> SQL translation
    QUERY = "QUERY"               # Statement execution
    MAPPING = "MAPPING"           # Row decoding into a destination
    CONNECTION = "CONNECTION"     # Pool open / ping / close
    TRANSACTION = "TRANSACTION"   # Begin / commit / rollback
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        operation: Adapter verb that failed (``get``, ``select``, ``insert``...)
        sql: Rendered SQL text, when compilation got that far
        metadata: Additional key-value pairs
    """

    operation: str | None = None
    sql: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ("operation", "sql"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class EasqlError(Exception):
    """
    Base exception for all easql errors.

    Subclasses set ``default_category``; the constructor signature is shared
    by the whole hierarchy so :meth:`wrap` can rebuild any subclass.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def wrap(self, tag: str) -> EasqlError:
        """Return a same-class copy tagged with ``tag`` whose cause is ``self``."""
        return type(self)(
            f"{tag}: {self.message}",
            category=self.category,
            context=replace(self.context, metadata=dict(self.context.metadata)),
            cause=self,
        )

    def with_context(self, **kwargs: Any) -> EasqlError:
        """
        Add context to this error (fluent API).

        Usage:
            raise CompileError("bad").with_context(operation="get")
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    @property
    def root_cause(self) -> BaseException:
        """Walk the ``cause`` chain down to the innermost exception."""
        current: BaseException = self
        while isinstance(current, EasqlError) and current.cause is not None:
            current = current.cause
        return current

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# QUERY ADAPTER ERRORS
# =============================================================================


class CompileError(EasqlError):
    """Expression could not be rendered to SQL text and arguments."""

    default_category = ErrorCategory.COMPILE


class QueryError(EasqlError):
    """Row fetch failed in the driver."""

    default_category = ErrorCategory.QUERY


class NoRowsError(QueryError):
    """Single-row fetch found no rows."""

    pass


class ExecError(EasqlError):
    """Insert / update / delete failed in the driver."""

    default_category = ErrorCategory.QUERY


class MappingError(EasqlError):
    """Result row could not be decoded into the destination."""

    default_category = ErrorCategory.MAPPING


# =============================================================================
# HANDLE LIFECYCLE ERRORS
# =============================================================================


class DatabaseConnectionError(EasqlError):
    """Connection string, pool creation or liveness check failed."""

    default_category = ErrorCategory.CONNECTION


class CloseError(EasqlError):
    """Releasing the connection pool failed."""

    default_category = ErrorCategory.CONNECTION


class TransactionError(EasqlError):
    """Transaction lifecycle error."""

    default_category = ErrorCategory.TRANSACTION


class BeginError(TransactionError):
    pass


class CommitError(TransactionError):
    pass


class RollbackError(TransactionError):
    pass


__all__ = [
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
