"""Application settings read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

STORAGE_DIRECTORY = "./storage/app/"


@dataclass(frozen=True)
class MysqlOption:
    uri: str = ""
    pool: int = 0
    slow_threshold: int = 0


@dataclass(frozen=True)
class PostgreSqlOption:
    uri: str = ""
    pool: int = 1000
    slow_threshold: int = 200


@dataclass(frozen=True)
class RabbitMQOption:
    uri: str = ""
    exchange: str = "events"
    queue_type: str = "topic"
    queue_prefix: str = "Ngorder API"
    queue_retry_count: int = 3


@dataclass(frozen=True)
class MongodbOption:
    uri: str = ""
    database_name: str = ""


@dataclass(frozen=True)
class RedisOption:
    host: str = ""
    password: str = ""
    read_timeout_ms: int = 0
    write_timeout_ms: int = 0


@dataclass(frozen=True)
class Config:
    app_name: str = ""
    app_version: str = ""
    app_env: str = "development"
    api_host: str = ""
    api_rpc_port: str = ""
    api_port: str = "8760"
    api_doc_port: int = 8761
    shutdown_timeout: int = 30
    allowed_credential_origins: tuple[str, ...] = ()
    middleware_address: str = ""
    jwt_expire_days_count: int = 0
    mysql: MysqlOption = field(default_factory=MysqlOption)
    rabbitmq: RabbitMQOption = field(default_factory=RabbitMQOption)
    mongodb: MongodbOption = field(default_factory=MongodbOption)
    redis: RedisOption = field(default_factory=RedisOption)
    postgresql: PostgreSqlOption = field(default_factory=PostgreSqlOption)


def _integer(low: int, high: int) -> Callable[[str, str], int]:
    def parse(name: str, raw: str) -> int:
        try:
            value = int(raw, 10)
        except ValueError:
            raise ValueError(f"invalid value {raw!r} for {name}: not an integer") from None
        if not low <= value <= high:
            raise ValueError(f"invalid value {raw!r} for {name}: out of range")
        return value

    return parse


def _text_list(name: str, raw: str) -> tuple[str, ...]:
    return tuple(raw.split(";"))


_INT = _integer(-(2**63), 2**63 - 1)
_INT16 = _integer(-(2**15), 2**15 - 1)
_UINT = _integer(0, 2**64 - 1)
_UINT16 = _integer(0, 2**16 - 1)


class _Reader:
    def __init__(self, environ: Mapping[str, str]) -> None:
        self._environ = environ

    def get(
        self,
        name: str,
        parse: Callable[[str, str], Any] | None = None,
        default: str = "",
        required: bool = False,
        zero: Any = "",
    ) -> Any:
        """Read one variable; without a parser the raw text is returned."""
        raw = self._environ.get(name, "") or default
        if raw == "":
            if required:
                raise ValueError(f'the environment variable "{name}" is missing')
            return zero
        return raw if parse is None else parse(name, raw)


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build the configuration from the environment; raise ValueError on missing or bad values."""
    env = _Reader(os.environ if environ is None else environ)
    return Config(
        app_name=env.get("APP_NAME"),
        app_version=env.get("APP_VERSION"),
        app_env=env.get("APP_ENV", default="development"),
        api_host=env.get("API_HOST"),
        api_rpc_port=env.get("API_RPC_PORT"),
        api_port=env.get("API_PORT", default="8760"),
        api_doc_port=env.get("API_DOC_PORT", _UINT16, default="8761", zero=0),
        shutdown_timeout=env.get("API_SHUTDOWN_TIMEOUT_SECONDS", _UINT, default="30", zero=0),
        allowed_credential_origins=env.get("ALLOWED_CREDENTIAL_ORIGINS", _text_list, zero=()),
        middleware_address=env.get("MIDDLEWARE_ADDR"),
        jwt_expire_days_count=env.get("JWT_EXPIRE_DAYS_COUNT", _INT, zero=0),
        mysql=MysqlOption(
            uri=env.get("MYSQL_URI"),
            pool=env.get("MYSQL_POOL", _INT, required=True),
            slow_threshold=env.get("MYSQL_SLOW_LOG_THRESHOLD", _INT, required=True),
        ),
        rabbitmq=RabbitMQOption(
            uri=env.get("RABBITMQ_URI", required=True),
            exchange=env.get("RABBITMQ_EXCHANGE", default="events"),
            queue_type=env.get("RABBITMQ_QUEUE_TYPE", default="topic"),
            queue_prefix=env.get("RABBITMQ_QUEUE_PREFIX", default="Ngorder API"),
            queue_retry_count=env.get("RABBITMQ_RETRY_COUNT", _INT, default="3", zero=0),
        ),
        mongodb=MongodbOption(
            uri=env.get("MONGODB_URI", required=True),
            database_name=env.get("MONGODB_DATABASE_NAME", required=True),
        ),
        redis=RedisOption(
            host=env.get("REDIS_HOST", required=True),
            password=env.get("REDIS_PASSWORD"),
            read_timeout_ms=env.get("REDIS_READ_TIMEOUT", _INT16, required=True),
            write_timeout_ms=env.get("REDIS_WRITE_TIMEOUT", _INT16, required=True),
        ),
        postgresql=PostgreSqlOption(
            uri=env.get("POSTGRE_URI"),
            pool=env.get("POSTGRE_POOL", _INT, default="1000", zero=0),
            slow_threshold=env.get("POSTGRE_SLOW_LOG_THRESHOLD", _INT, default="200", zero=0),
        ),
    )