from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from mysql.connector import pooling

from ..common.logging_utils import get_logger
from ..core.constants import DEFAULT_POOL_SIZE
from .schema import apply_schema

logger = get_logger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = DEFAULT_POOL_SIZE

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "127.0.0.1")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "library_system")),
            pool_size=int(db_config.get("pool_size", DEFAULT_POOL_SIZE)),
        )


class DatabaseConnection:
    """Process-wide pooled connection factory.

    The pool and the schema are both initialized lazily on the first
    ``connect()``. A lock guards the first call so concurrent requests do not
    create the schema or the pool twice. A failed schema attempt is not
    memoized; the next call tries again. Teardown happens at process exit.
    """

    _instance: Optional["DatabaseConnection"] = None
    _instance_lock = threading.Lock()

    def __init__(self, config: DBConfig):
        self._config = config
        self._lock = threading.Lock()
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._schema_ready = False

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = DatabaseConnection(config)
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        with cls._instance_lock:
            cls._instance = None

    @property
    def config(self) -> DBConfig:
        return self._config

    @property
    def schema_ready(self) -> bool:
        return self._schema_ready

    def ensure_schema(self) -> None:
        if self._schema_ready:
            return
        with self._lock:
            if self._schema_ready:
                return
            apply_schema(self._config)
            self._schema_ready = True
            logger.info(
                "MySQL schema ready on %s@%s:%s/%s",
                self._config.user,
                self._config.host,
                self._config.port,
                self._config.database,
            )

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        if self._pool is not None:
            return self._pool
        with self._lock:
            if self._pool is None:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name="library_kiosk",
                    pool_size=int(self._config.pool_size),
                    host=self._config.host,
                    port=int(self._config.port),
                    user=self._config.user,
                    password=self._config.password,
                    database=self._config.database,
                    charset="utf8mb4",
                    collation="utf8mb4_unicode_ci",
                    time_zone="+00:00",
                )
            return self._pool

    def connect(self) -> pooling.PooledMySQLConnection:
        self.ensure_schema()
        return self._get_pool().get_connection()
