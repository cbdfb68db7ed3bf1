"""Pytest fixtures for registrar tests.

The container is booted once per session in the Test environment, against a
SQLite database in a temporary directory. Each test that asks for
`db_session` gets a freshly created schema, dropped again afterwards.

Usage:
    def test_something(db_session: Session, test_factory):
        test = test_factory(weight=2.0)
"""

from __future__ import annotations

import datetime
import os
import typing as t
from pathlib import Path

import pydantic as p
import pytest
import sqlalchemy as sqla
from sqlalchemy.orm import Session

import registrar
from registrar.core import LoggingProvider, RegistrarContainer, TimestampProvider
from registrar.core.config.transcript import AuditSettings, TranscriptSettings
from registrar.model import Block, BlockID, DeploymentEnvironment, GradedTestResult, StudentID, Subject, SubjectID, \
    Test, TestID, TestResultID, TestResultStatus
from registrar.storage.table import blocks, metadata, student_test_results, subjects, tests
from registrar.transcript.audit import TranscriptAuditLog
from registrar.transcript.pipeline import TranscriptPipeline

FIXED_NOW = datetime.datetime(2026, 6, 30, 12, 0, tzinfo=datetime.UTC)

M = t.TypeVar("M", Block, Subject, Test)


def rule(
    operator: str = "GTE",
    threshold: float = 50,
    expected_outcome: str = "PASS",
    logical_operator: str | None = None,
    **extra: t.Any,
) -> dict[str, t.Any]:
    """A criterion document as it is stored in a definition's criteria column."""
    criterion: dict[str, t.Any] = {
        "operator": operator,
        "threshold": threshold,
        "expected_outcome": expected_outcome,
        **extra,
    }
    if logical_operator is not None:
        criterion["logical_operator"] = logical_operator
    return criterion


def _build(model: type[M], row: t.Mapping[str, t.Any]) -> M:
    try:
        return model(**row)
    except p.ValidationError:
        # some tests store malformed criteria on purpose
        return model.model_construct(**row)


@pytest.fixture(scope="session")
def container(tmp_path_factory: pytest.TempPathFactory) -> t.Generator[RegistrarContainer]:
    """Boot the DI container for the test session."""
    ct = RegistrarContainer()
    root = Path(os.path.dirname(registrar.__file__)).parent
    data = tmp_path_factory.mktemp("registrar")

    RegistrarContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{root}/config"),
        override=(
            f"storage.persistent.database.database={data / 'registrar.db'}",
            f"transcript.audit.directory={data / 'audit'}",
        ),
    )

    yield ct

    ct.shutdown_resources()


@pytest.fixture
def engine(container: RegistrarContainer) -> t.Generator[sqla.Engine]:
    engine = container.storage().persistent().engine()
    metadata.create_all(engine)
    yield engine
    metadata.drop_all(engine)


@pytest.fixture
def db_session(engine: sqla.Engine) -> t.Generator[Session]:
    """A session with the same transaction discipline as production: callers use session.begin()."""
    session = Session(engine, autobegin=False, expire_on_commit=False)
    yield session
    session.close()


@pytest.fixture
def session_factory(engine: sqla.Engine) -> t.Callable[[], Session]:
    return lambda: Session(engine, autobegin=False, expire_on_commit=False)


@pytest.fixture
def utcnow() -> TimestampProvider:
    return lambda: FIXED_NOW


@pytest.fixture
def criterion() -> t.Callable[..., dict[str, t.Any]]:
    """Builds stored criterion documents; see `rule`."""
    return rule


@pytest.fixture
def logging_provider(container: RegistrarContainer) -> LoggingProvider:
    return container.logging()


@pytest.fixture
def transcript_settings() -> TranscriptSettings:
    return TranscriptSettings(audit=AuditSettings())


@pytest.fixture
def audit_log(tmp_path: Path, logging_provider: LoggingProvider) -> TranscriptAuditLog:
    return TranscriptAuditLog(tmp_path / "audit", logging=logging_provider)


@pytest.fixture
def pipeline(
    transcript_settings: TranscriptSettings,
    audit_log: TranscriptAuditLog,
    utcnow: TimestampProvider,
    logging_provider: LoggingProvider,
) -> TranscriptPipeline:
    return TranscriptPipeline(
        settings=transcript_settings, audit=audit_log, utcnow=utcnow, logging=logging_provider
    )


@pytest.fixture
def student_id() -> StudentID:
    return StudentID()


@pytest.fixture
def block_factory(db_session: Session) -> t.Callable[..., Block]:
    """Factory fixture for creating blocks. Criteria default to BLOCK_AVERAGE GTE 50 → PASS."""

    def create_block(name: str = "Core Block", criteria: list[dict[str, t.Any]] | None = None) -> Block:
        block_id = BlockID()
        if criteria is None:
            criteria = [rule(rule_type="BLOCK_AVERAGE")]

        with db_session.begin():
            db_session.add(blocks(block_id=block_id, name=name, criteria=criteria))
            db_session.flush()

            stmt = sqla.select(blocks.__table__).where(blocks.block_id == block_id)
            row = db_session.execute(stmt).mappings().one()
            return _build(Block, row)

    return create_block


@pytest.fixture
def subject_factory(db_session: Session, block_factory: t.Callable[..., Block]) -> t.Callable[..., Subject]:
    """Factory fixture for creating subjects. Criteria default to AVERAGE GTE 50 → PASS."""

    def create_subject(
        block_id: BlockID | None = None,
        name: str = "Mathematics",
        coefficient: float = 1.0,
        criteria: list[dict[str, t.Any]] | None = None,
    ) -> Subject:
        if block_id is None:
            block_id = block_factory().block_id
        if criteria is None:
            criteria = [rule(rule_type="AVERAGE")]
        subject_id = SubjectID()

        with db_session.begin():
            db_session.add(
                subjects(subject_id=subject_id, block_id=block_id, name=name, coefficient=coefficient, criteria=criteria)
            )
            db_session.flush()

            stmt = sqla.select(subjects.__table__).where(subjects.subject_id == subject_id)
            row = db_session.execute(stmt).mappings().one()
            return _build(Subject, row)

    return create_subject


@pytest.fixture
def test_factory(db_session: Session, subject_factory: t.Callable[..., Subject]) -> t.Callable[..., Test]:
    """Factory fixture for creating tests. Criteria default to MARK GTE 50 → PASS."""

    def create_test(
        subject_id: SubjectID | None = None,
        name: str = "Midterm",
        weight: float = 1.0,
        criteria: list[dict[str, t.Any]] | None = None,
    ) -> Test:
        if subject_id is None:
            subject_id = subject_factory().subject_id
        if criteria is None:
            criteria = [rule()]
        test_id = TestID()

        with db_session.begin():
            db_session.add(tests(test_id=test_id, subject_id=subject_id, name=name, weight=weight, criteria=criteria))
            db_session.flush()

            stmt = sqla.select(tests.__table__).where(tests.test_id == test_id)
            row = db_session.execute(stmt).mappings().one()
            return _build(Test, row)

    return create_test


@pytest.fixture
def test_result_factory(db_session: Session) -> t.Callable[..., GradedTestResult]:
    """Factory fixture for creating graded results; validated and GRADED unless told otherwise."""

    def create_test_result(
        student_id: StudentID,
        test_id: TestID,
        average_mark: float | None = None,
        marks: t.Sequence[float] = (),
        status: TestResultStatus = TestResultStatus.Graded,
        validated_at: datetime.datetime | None = FIXED_NOW,
    ) -> GradedTestResult:
        result_id = TestResultID()

        with db_session.begin():
            db_session.add(
                student_test_results(
                    result_id=result_id,
                    student_id=student_id,
                    test_id=test_id,
                    status=status.value,
                    average_mark=average_mark,
                    marks=[{"notation_text": None, "mark": m} for m in marks],
                    validated_at=validated_at,
                )
            )
            db_session.flush()

            stmt = sqla.select(student_test_results.__table__).where(student_test_results.result_id == result_id)
            row = db_session.execute(stmt).mappings().one()
            return GradedTestResult(**row)

    return create_test_result
