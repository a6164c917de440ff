"""Service configuration: YAML loading and connections to the backing stores."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import quote

import redis
import sqlalchemy
import yaml

ERR_INTERNAL = "1000"
ERR_WRONG_INFO = "1001"


class Language(enum.IntEnum):
    """Programming languages a submission may be written in."""

    C = 0
    CPP = 1
    JAVA = 2
    PYTHON3 = 3


@dataclass(frozen=True)
class RDBConfig:
    """Connection settings for the relational database."""

    host: str = ""
    port: int = 0
    username: str = ""
    password: str = ""
    db_name: str = ""

    def url(self) -> str:
        """Return the SQLAlchemy URL of the MySQL database."""
        user = quote(self.username, safe="")
        secret = quote(self.password, safe="")
        return (
            f"mysql+pymysql://{user}:{secret}@{self.host}:{self.port}/"
            f"{self.db_name}?charset=utf8"
        )


@dataclass(frozen=True)
class RedisConfig:
    """Connection settings for Redis."""

    host: str = ""
    port: int = 0
    password: str = ""
    db: int = 0


@dataclass(frozen=True)
class MQConfig:
    """Connection settings for the AMQP broker."""

    host: str = ""
    port: int = 0
    username: str = ""
    password: str = ""
    queue_name: str = ""

    def url(self) -> str:
        """Return the AMQP URL of the broker."""
        user = quote(self.username, safe="")
        secret = quote(self.password, safe="")
        return f"amqp://{user}:{secret}@{self.host}:{self.port}/"


@dataclass(frozen=True)
class ServerConfig:
    """Settings of the HTTP server."""

    port: int = 0


@dataclass(frozen=True)
class Configure:
    """The whole configuration file."""

    rdb: RDBConfig | None = None
    redis: RedisConfig | None = None
    mq: MQConfig | None = None
    server: ServerConfig | None = None

    def server_address(self) -> str:
        """Return the listen address in the form ':port'."""
        if self.server is None:
            raise ValueError("config file failed - Server")
        return f":{self.server.port}"


_SECTIONS: dict[str, tuple[str, type, dict[str, str]]] = {
    "rdb": (
        "RDB",
        RDBConfig,
        {"host": "Host", "port": "Port", "username": "Username",
         "password": "Password", "db_name": "DBName"},
    ),
    "redis": (
        "Redis",
        RedisConfig,
        {"host": "Host", "port": "Port", "password": "Password", "db": "DB"},
    ),
    "mq": (
        "MQ",
        MQConfig,
        {"host": "Host", "port": "Port", "username": "Username",
         "password": "Password", "queue_name": "QueueName"},
    ),
    "server": ("Server", ServerConfig, {"port": "Port"}),
}


def _build(cls: type, section: Any, keys: dict[str, str]) -> Any:
    if section is None:
        return None
    if not isinstance(section, dict):
        raise ValueError(f"config section for {cls.__name__} must be a mapping")
    return cls(**{attr: section[key] for attr, key in keys.items() if section.get(key) is not None})


def load_config(path: str | Path) -> Configure:
    """Read and parse the YAML configuration file at *path*."""
    raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("config file must hold a mapping")
    return Configure(
        **{
            attr: _build(cls, raw.get(name), keys)
            for attr, (name, cls, keys) in _SECTIONS.items()
        }
    )


def connect_database(config: RDBConfig | None) -> sqlalchemy.engine.Engine:
    """Create the SQLAlchemy engine for the problem database."""
    if config is None:
        raise ValueError("config file failed - RDB")
    return sqlalchemy.create_engine(config.url(), pool_pre_ping=True)


def connect_redis(config: RedisConfig | None) -> redis.Redis:
    """Create the Redis client holding credentials and submission results."""
    if config is None:
        raise ValueError("config file failed - Redis")
    return redis.Redis(
        host=config.host,
        port=config.port,
        password=config.password or None,
        db=config.db,
        decode_responses=True,
    )