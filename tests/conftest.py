"""
Shared pytest fixtures for easql tests.

This module provides:
- A ``users`` table definition shared by every test module
- File-backed SQLite engines (one per test) and ``DB`` handles over them
- A mock engine whose connection / transaction calls record into one parent
  mock, so call order can be asserted the way sqlmock expectations are
"""

from __future__ import annotations

from dataclasses import dataclass
from unittest.mock import MagicMock

import pytest
import structlog
from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import Engine

from easql import DB, StatementCompiler

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(50)),
)


@dataclass
class User:
    id: int
    name: str


# =============================================================================
# SQLite-backed handles
# =============================================================================


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite engine with the ``users`` table created."""
    eng = create_engine(f"sqlite:///{tmp_path / 'easql.db'}")
    metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    return DB(engine)


@pytest.fixture
def seeded_db(db, engine):
    """``db`` with users 1..3 inserted."""
    with engine.begin() as conn:
        conn.execute(
            users.insert(),
            [
                {"id": 1, "name": "ann"},
                {"id": 2, "name": "bob"},
                {"id": 3, "name": "cid"},
            ],
        )
    return db


# =============================================================================
# Mocked collaborators
# =============================================================================


@pytest.fixture
def mysql_compiler():
    return StatementCompiler(mysql.dialect())


@pytest.fixture
def recorder():
    """Parent mock: ``recorder.conn`` / ``recorder.trans`` calls land in ``recorder.mock_calls``."""
    parent = MagicMock()
    parent.conn.begin.return_value = parent.trans
    result = parent.conn.exec_driver_sql.return_value
    result.rowcount = 1
    result.lastrowid = None
    return parent


@pytest.fixture
def mock_engine(recorder):
    eng = MagicMock(spec=Engine)
    eng.dialect = mysql.dialect()
    eng.connect.return_value = recorder.conn
    return eng


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark every test not already marked ``integration`` as a unit test."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


def recorded(parent: MagicMock, *names: str) -> list[str]:
    """Names of the calls on ``parent`` that are in ``names``, in call order."""
    return [c[0] for c in parent.mock_calls if c[0] in names]


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
