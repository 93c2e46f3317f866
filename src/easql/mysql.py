"""MySQL connection handle factory.

Uses ``mysql.connector`` from the ``mysql-connector-python`` package through
SQLAlchemy's ``mysql+mysqlconnector`` dialect. MySQL uses the **format**
(``%s``) placeholder style, which is positional, so compiled statements map
straight onto the driver's argument list.
"""

from __future__ import annotations

from .db import DB, open_db
from .errors import DatabaseConnectionError
from .types import Config


def open_mysql(config: Config) -> DB:
    """Open a pooled, pinged MySQL handle from ``config``.

    Raises:
        DatabaseConnectionError: URL construction, pool creation or the
            liveness check failed.
    """
    try:
        url = config.to_url()
    except Exception as e:
        raise DatabaseConnectionError(f"error open: {e}", cause=e) from e

    connect_args = {"time_zone": config.location} if config.location else None
    return open_db(
        url,
        max_idle_conns=config.max_idle_conns,
        max_open_conns=config.max_open_conns,
        mapper_func=config.mapper_func,
        connect_args=connect_args,
    )


__all__ = [
    "open_mysql",
]
