"""Tests for easql.errors module."""

import pytest

from easql.errors import (
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


class TestErrorContext:
    def test_empty_context(self):
        ctx = ErrorContext()
        assert ctx.operation is None
        assert ctx.to_dict() == {}

    def test_to_dict_skips_none_and_merges_metadata(self):
        ctx = ErrorContext(operation="get", metadata={"table": "users"})
        assert ctx.to_dict() == {"operation": "get", "table": "users"}


class TestCategories:
    @pytest.mark.parametrize(
        "cls,category",
        [
            (CompileError, ErrorCategory.COMPILE),
            (QueryError, ErrorCategory.QUERY),
            (NoRowsError, ErrorCategory.QUERY),
            (ExecError, ErrorCategory.QUERY),
            (MappingError, ErrorCategory.MAPPING),
            (DatabaseConnectionError, ErrorCategory.CONNECTION),
            (CloseError, ErrorCategory.CONNECTION),
            (BeginError, ErrorCategory.TRANSACTION),
            (CommitError, ErrorCategory.TRANSACTION),
            (RollbackError, ErrorCategory.TRANSACTION),
        ],
    )
    def test_default_category(self, cls, category):
        assert cls("boom").category == category

    def test_hierarchy(self):
        assert issubclass(NoRowsError, QueryError)
        assert issubclass(BeginError, TransactionError)
        assert issubclass(CommitError, TransactionError)
        assert issubclass(RollbackError, TransactionError)
        for cls in (CompileError, ExecError, MappingError, CloseError):
            assert issubclass(cls, EasqlError)

    def test_connection_error_does_not_shadow_builtin(self):
        assert not issubclass(DatabaseConnectionError, ConnectionError)


class TestCauseChain:
    def test_cause_sets_dunder_cause(self):
        original = ValueError("bad column")
        err = QueryError("error get: bad column", cause=original)
        assert err.cause is original
        assert err.__cause__ is original

    def test_wrap_keeps_class_and_tags_message(self):
        inner = NoRowsError("no rows in result set")
        outer = inner.wrap("error get")
        assert type(outer) is NoRowsError
        assert str(outer) == "error get: no rows in result set"
        assert outer.cause is inner

    def test_wrap_copies_context(self):
        inner = MappingError("bad").with_context(operation="get", column="id")
        outer = inner.wrap("error get").with_context(sql="SELECT 1")
        assert outer.context.sql == "SELECT 1"
        assert outer.context.metadata == {"column": "id"}
        assert inner.context.sql is None

    def test_root_cause_walks_chain(self):
        original = RuntimeError("server gone")
        err = QueryError("driver", cause=original).wrap("error get").wrap("outer")
        assert err.root_cause is original

    def test_root_cause_of_unchained_error_is_itself(self):
        err = CompileError("bad")
        assert err.root_cause is err


class TestSerialization:
    def test_to_dict(self):
        err = ExecError("error exec: locked", cause=RuntimeError("locked"))
        err.with_context(operation="insert")
        d = err.to_dict()
        assert d["error_type"] == "ExecError"
        assert d["message"] == "error exec: locked"
        assert d["category"] == "QUERY"
        assert d["context"] == {"operation": "insert"}
        assert d["cause"] == "locked"

    def test_repr(self):
        assert repr(CompileError("bad")) == "CompileError('bad', category=COMPILE)"
