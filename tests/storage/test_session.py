"""Tests for the container-provided session in debug mode."""

from __future__ import annotations

import sqlalchemy as sqla

from registrar.core import RegistrarContainer
from registrar.lib.sql import DebugSession
from registrar.model import StudentID
from registrar.storage.table import calculation_results


class TestDebugSession(object):
    def test_debug_container_provides_debug_session(self, container: RegistrarContainer, engine: sqla.Engine) -> None:
        session = container.storage().persistent().session()
        try:
            assert isinstance(session, DebugSession)
            assert session.get_bind() is engine
        finally:
            session.close()

    def test_format_query_inlines_parameters(self, container: RegistrarContainer, engine: sqla.Engine) -> None:
        student_id = StudentID()
        stmt = sqla.select(calculation_results.__table__).where(calculation_results.student_id == student_id)

        session = container.storage().persistent().session()
        try:
            sql = session.format_query(stmt)
        finally:
            session.close()

        assert student_id.key in sql
        assert "calculation_results" in sql


class TestEngine(object):
    def test_booted_container_builds_configured_engine(self, container: RegistrarContainer) -> None:
        """The engine comes from the persistent database settings, with overrides applied."""
        engine = container.storage().persistent().engine()
        database = container.config.storage.persistent.database.database()

        assert engine.dialect.name == "sqlite"
        assert engine.url.database == str(database)
        assert database.endswith("registrar.db")
        assert engine.echo is False

    def test_sqlite_connections_enforce_foreign_keys(self, engine: sqla.Engine) -> None:
        with engine.connect() as conn:
            assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
