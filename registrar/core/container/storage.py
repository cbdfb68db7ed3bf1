from __future__ import annotations

import typing as t
from pathlib import Path

import alembic.config
import sqlalchemy
import sqlalchemy.event
import sqlalchemy.orm
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton
from sqlalchemy.engine.url import URL as DSN

import registrar.lib.json as json
from registrar.lib.sql import DebugQuery, DebugSession

from ..config.secrets import DatabaseSecrets
from ..config.storage import DatabaseSettings, StorageSettings
from ..di import NotReady
from ..provider import LoggingProvider


def create_dsn(config: DatabaseSettings, secrets: DatabaseSecrets) -> DSN:
    return DSN.create(
        config.driver,
        database=config.database,
        username=secrets.username.get_secret_value() if secrets.username else None,
        password=secrets.password.get_secret_value() if secrets.password else None,
        port=config.port,
        host=str(config.host) if config.host else None,
    )


def provide_alembic_conf(
    migration_path: Path, config: DatabaseSettings, secrets: DatabaseSecrets, root: Path | NotReady
) -> alembic.config.Config:
    if isinstance(root, NotReady):
        raise RuntimeError("root path is unavailable")

    escaped_str = create_dsn(config, secrets).render_as_string(hide_password=False).replace("%", "%%")

    ac = alembic.config.Config()
    ac.set_main_option("script_location", str(root / migration_path))
    ac.set_section_option("alembic", "sqlalchemy.url", escaped_str)
    ac.set_section_option("alembic", "file_template", "%%(year)d-%%(month).2d-%%(day).2d-%%(slug)s-%%(rev)s")
    return ac


def provide_engine(
    database: DatabaseSettings, echo: bool, secrets: DatabaseSecrets, logging: LoggingProvider
) -> t.Generator[sqlalchemy.Engine]:
    logger = logging.get_logger()

    engine = sqlalchemy.create_engine(
        create_dsn(database, secrets), echo=echo, json_serializer=json.dumps, json_deserializer=json.loads
    )
    if database.is_postgresql:
        sqlalchemy.event.listen(engine, "connect", set_utc_timezone)
    else:
        sqlalchemy.event.listen(engine, "connect", enable_sqlite_foreign_keys)
    logger.info(
        "initialized SQLAlchemy engine",
        extra={
            "driver": database.driver,
            "database": database.database,
            "host": database.host,
            "port": database.port,
        },
    )
    yield engine
    engine.dispose()
    logger.debug("disposed SQLAlchemy engine", extra={"database": database.database})


def provide_session(debug: bool, engine: sqlalchemy.Engine) -> sqlalchemy.orm.Session:
    """Create a new session. Caller is responsible for closing it."""
    if debug:
        maker = sqlalchemy.orm.sessionmaker(engine, class_=DebugSession, expire_on_commit=False, autoflush=False)
        return maker(query_cls=DebugQuery, autobegin=False)
    else:
        maker = sqlalchemy.orm.sessionmaker(engine, expire_on_commit=False, autoflush=False)
        return maker(autobegin=False)


class PersistentContainer(DeclarativeContainer):
    config = Configuration()
    secrets = Configuration()
    debug: Provider[bool] = Object()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    alembic_config: Provider[alembic.config.Config] = Singleton(
        provide_alembic_conf,
        migration_path=Path("migrations/"),
        config=config.database.as_(DatabaseSettings),
        secrets=secrets.database.as_(DatabaseSecrets),
        root=root,
    )
    engine: Provider[sqlalchemy.Engine] = Resource(
        provide_engine,
        database=config.database.as_(DatabaseSettings),
        echo=config.echo.as_(bool),
        secrets=secrets.database.as_(DatabaseSecrets),
        logging=logging,
    )
    session: Provider[sqlalchemy.orm.Session] = Factory(provide_session, debug=debug, engine=engine)


class StorageContainer(DeclarativeContainer):
    config: Provider[StorageSettings] = Configuration(strict=True)
    secrets = Configuration(strict=True)
    debug: Provider[bool] = Object()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    persistent: Provider[PersistentContainer] = Container(
        PersistentContainer, config=config.persistent, secrets=secrets, debug=debug, logging=logging, root=root
    )


def set_utc_timezone(dbapi_conn: t.Any, _: t.Any) -> None:
    """
    PostgreSQL returns TIMESTAMP WITH TIME ZONE values in the connection's
    timezone; pin it to UTC so datetimes compare equal across environments.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("SET TIMEZONE TO 'UTC'")
    cursor.close()


def enable_sqlite_foreign_keys(dbapi_conn: t.Any, _: t.Any) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
