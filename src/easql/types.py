"""Connection configuration and execution result types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from sqlalchemy.engine import URL

MYSQL_DRIVER = "mysql+mysqlconnector"


@dataclass
class Config:
    """
    Configuration for a MySQL connection pool.

    ``max_idle_conns`` / ``max_open_conns`` follow ``database/sql`` semantics:
    a non-positive ``max_open_conns`` means unlimited, a non-positive
    ``max_idle_conns`` means no idle connections are kept.
    """

    host: str = "localhost"
    port: int = 3306
    name: str = ""
    user: str = ""
    password: str = field(default="", repr=False)
    charset: str = "utf8mb4"
    # Session time zone, e.g. "+00:00" or "Asia/Tokyo"
    location: str | None = None
    max_idle_conns: int = 2
    max_open_conns: int = 0
    # Record field name -> column name
    mapper_func: Callable[[str], str] | None = None

    def to_url(self) -> URL:
        """Build the SQLAlchemy URL for this configuration."""
        return URL.create(
            MYSQL_DRIVER,
            username=self.user or None,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.name or None,
            query={"charset": self.charset} if self.charset else {},
        )


@dataclass(frozen=True)
class ExecResult:
    """Summary of an insert / update / delete."""

    rows_affected: int
    # Driver-dependent; None when the driver does not report one
    last_insert_id: int | None = None


__all__ = [
    "Config",
    "ExecResult",
    "MYSQL_DRIVER",
]
