from __future__ import annotations

import typing as t

import pydantic as p

from .base import BaseSettings


class StorageSettings(BaseSettings):
    persistent: PersistentSettings


class PersistentSettings(BaseSettings):
    database: DatabaseSettings
    echo: bool = False


class DatabaseSettings(BaseSettings):
    """
    Connection parameters for the relational store. `database` is a file path
    when `driver` is SQLite.
    """

    driver: t.Literal["postgresql+psycopg", "sqlite+pysqlite"] = "postgresql+psycopg"
    host: p.IPvAnyAddress | str | None = None
    port: int | None = None
    database: str

    @property
    def is_postgresql(self) -> bool:
        return self.driver.startswith("postgresql")
