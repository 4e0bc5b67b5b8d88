from __future__ import annotations

import os

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from bookseed.errors import ConfigurationError


REQUIRED_ENV_VARS = ("MYSQL_PASSWORD", "MYSQL_DB")
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class MysqlSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MYSQL_", extra="forbid")

    host: str = "localhost"
    port: int = 3306
    username: str = "root"
    password: str
    db: str

    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().lower()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}")
        return level

    def url(self) -> URL:
        return URL.create(
            "mysql+pymysql",
            username=self.username,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.db,
        )


def load_settings() -> MysqlSettings:
    """
    Read connection settings from the environment.

    Only absence counts as missing: MYSQL_PASSWORD="" is a valid (empty) password.
    """
    missing = tuple(name for name in REQUIRED_ENV_VARS if os.environ.get(name) is None)
    if missing:
        raise ConfigurationError(missing=missing)
    try:
        return MysqlSettings()
    except ValidationError as exc:
        details = ", ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors())
        raise ConfigurationError(detail=details) from exc
