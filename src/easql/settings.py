"""Environment-driven settings.

``EasqlSettings`` reads ``EASQL_*`` environment variables (and ``.env``) and
produces the in-process :class:`~easql.types.Config` that ``open_mysql``
takes. Applications that build ``Config`` directly never need this module.

Examples:
    >>> import os
    >>> os.environ["EASQL_HOST"] = "db.internal"
    >>> EasqlSettings().to_config().host
    'db.internal'
"""

from __future__ import annotations

from collections.abc import Callable

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import configure_logging
from .types import Config


class EasqlSettings(BaseSettings):
    """Connection and logging settings.

    Fields
    ──────
    host, port, name, user, password : MySQL endpoint and credentials
    charset, location                : Connection charset and session time zone
    max_idle_conns, max_open_conns   : Pool limits
    log_level, log_json              : Passed to ``configure_logging``
    """

    model_config = SettingsConfigDict(
        env_prefix="EASQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Connection ───────────────────────────────────────────────
    host: str = "localhost"
    port: int = Field(default=3306, ge=1, le=65535)
    name: str = ""
    user: str = ""
    password: SecretStr = SecretStr("")
    charset: str = "utf8mb4"
    location: str | None = None

    # ── Pool ─────────────────────────────────────────────────────
    max_idle_conns: int = 2
    max_open_conns: int = 0

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    def configure_logging(self) -> None:
        configure_logging(level=self.log_level, json_format=self.log_json)

    def to_config(self, mapper_func: Callable[[str], str] | None = None) -> Config:
        return Config(
            host=self.host,
            port=self.port,
            name=self.name,
            user=self.user,
            password=self.password.get_secret_value(),
            charset=self.charset,
            location=self.location,
            max_idle_conns=self.max_idle_conns,
            max_open_conns=self.max_open_conns,
            mapper_func=mapper_func,
        )


__all__ = [
    "EasqlSettings",
]
