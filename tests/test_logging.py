"""
Tests for ``easql.logging``.

Tests verify:
- JSON output carries ECS-style field names
- DEBUG logs are suppressed at INFO level
- Console output is used when JSON is off
"""

from __future__ import annotations

import json

from easql.logging import configure_logging, get_logger
from easql.settings import EasqlSettings


def _lines(capsys):
    return [line for line in capsys.readouterr().out.splitlines() if line.strip()]


class TestJSONOutput:
    def test_fields(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("easql.db").info("db_opened", url="mysql+mysqlconnector://svc:***@db/app")

        (line,) = _lines(capsys)
        record = json.loads(line)
        assert record["event"] == "db_opened"
        assert record["log.logger"] == "easql.db"
        assert "logger_name" not in record
        assert record["log.level"] == "info"
        assert record["service.name"] == "easql"
        assert "@timestamp" in record
        assert "timestamp" not in record

    def test_service_name(self, capsys):
        configure_logging(level="INFO", json_format=True, service="billing")
        get_logger("easql.db").info("db_closed")
        assert json.loads(_lines(capsys)[0])["service.name"] == "billing"

    def test_without_timestamp(self, capsys):
        configure_logging(level="INFO", json_format=True, add_timestamp=False)
        get_logger().info("db_closed")
        assert "@timestamp" not in json.loads(_lines(capsys)[0])


class TestLevels:
    def test_debug_suppressed_at_info(self, capsys):
        configure_logging(level="INFO", json_format=True)
        log = get_logger("easql.queryer")
        log.debug("sql_compiled", op="get", args=1)
        log.warning("db_ping_failed", error="refused")

        lines = _lines(capsys)
        assert len(lines) == 1
        assert json.loads(lines[0])["event"] == "db_ping_failed"

    def test_debug_emitted_at_debug(self, capsys):
        configure_logging(level="debug", json_format=True)
        get_logger("easql.queryer").debug("sql_compiled", op="get", args=1)
        record = json.loads(_lines(capsys)[0])
        assert record["op"] == "get"
        assert record["args"] == 1


class TestConsoleOutput:
    def test_console_renderer(self, capsys):
        configure_logging(level="INFO", json_format=False)
        get_logger("easql.db").info("db_closed")
        out = capsys.readouterr().out
        assert "db_closed" in out
        assert "service.name" in out


class TestSettingsIntegration:
    def test_settings_configure_logging(self, monkeypatch, capsys):
        monkeypatch.setenv("EASQL_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("EASQL_LOG_JSON", "true")
        EasqlSettings(_env_file=None).configure_logging()

        log = get_logger("easql.db")
        log.info("db_opened")
        log.error("db_ping_failed")

        lines = _lines(capsys)
        assert len(lines) == 1
        assert json.loads(lines[0])["log.level"] == "error"


class TestGetLogger:
    def test_package_imports_and_module_loggers_log(self, capsys):
        import easql
        from easql import db, queryer, tx

        assert easql.DB is db.DB
        for module in (db, queryer, tx):
            module.logger.info("module_logger_ready")
        assert capsys.readouterr().out.count("module_logger_ready") == 3

    def test_named_logger_before_configuration(self, capsys):
        get_logger("x").info("hello", answer=42)
        out = capsys.readouterr().out
        assert "hello" in out
        assert "logger_name" in out

    def test_unnamed_logger(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger().info("anonymous")
        record = json.loads(_lines(capsys)[0])
        assert record["event"] == "anonymous"
        assert "log.logger" not in record


class TestSqlClipping:
    def test_long_sql_clipped(self, capsys):
        configure_logging(level="DEBUG", json_format=True, max_sql_chars=20)
        sql = "SELECT id FROM users WHERE id IN (" + ", ".join(["?"] * 50) + ")"
        get_logger("easql.queryer").debug("sql_compiled", op="select", sql=sql, args=50)

        record = json.loads(_lines(capsys)[0])
        assert record["sql"] == f"{sql[:20]}... ({len(sql)} chars)"

    def test_short_sql_untouched(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        get_logger("easql.queryer").debug("sql_compiled", sql="SELECT 1")
        assert json.loads(_lines(capsys)[0])["sql"] == "SELECT 1"
