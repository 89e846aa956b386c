from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
        )

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )
