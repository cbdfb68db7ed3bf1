import datetime
import typing as t

from sqlalchemy import ForeignKey, func, Index, MetaData, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass
from sqlalchemy.types import DateTime, JSON

from registrar.model import BlockID, CalculationID, StudentID, SubjectID, TestID, TestResultID, UserID

from .type import ShortUUIDKeyType

metadata = MetaData()

JSONDocument = JSON().with_variant(JSONB(), "postgresql")

# rows in this state are invisible to upserts and default queries
LIVE_CALCULATION = text("status != 'DELETED'")


class base(MappedAsDataclass, DeclarativeBase):
    metadata = metadata
    type_annotation_map = {
        StudentID: ShortUUIDKeyType(StudentID),
        UserID: ShortUUIDKeyType(UserID),
        TestID: ShortUUIDKeyType(TestID),
        SubjectID: ShortUUIDKeyType(SubjectID),
        BlockID: ShortUUIDKeyType(BlockID),
        TestResultID: ShortUUIDKeyType(TestResultID),
        CalculationID: ShortUUIDKeyType(CalculationID),
        datetime.datetime: DateTime(timezone=True),
    }


# Definition catalog


class blocks(base):
    __tablename__ = "blocks"

    block_id: Mapped[BlockID] = mapped_column(primary_key=True)
    name: Mapped[str]
    criteria: Mapped[list[dict[str, t.Any]]] = mapped_column(JSONDocument, default_factory=list)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


class subjects(base):
    __tablename__ = "subjects"

    subject_id: Mapped[SubjectID] = mapped_column(primary_key=True)
    block_id: Mapped[BlockID] = mapped_column(ForeignKey("blocks.block_id"))
    name: Mapped[str]
    coefficient: Mapped[float] = mapped_column(default=1.0)
    criteria: Mapped[list[dict[str, t.Any]]] = mapped_column(JSONDocument, default_factory=list)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


class tests(base):
    __tablename__ = "tests"

    test_id: Mapped[TestID] = mapped_column(primary_key=True)
    subject_id: Mapped[SubjectID] = mapped_column(ForeignKey("subjects.subject_id"))
    name: Mapped[str]
    weight: Mapped[float] = mapped_column(default=1.0)
    criteria: Mapped[list[dict[str, t.Any]]] = mapped_column(JSONDocument, default_factory=list)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


# Grading


class student_test_results(base):
    __tablename__ = "student_test_results"
    __table_args__ = (Index("ix_student_test_results_student_id", "student_id"),)

    result_id: Mapped[TestResultID] = mapped_column(primary_key=True)
    student_id: Mapped[StudentID]
    test_id: Mapped[TestID] = mapped_column(ForeignKey("tests.test_id"))
    status: Mapped[str]
    average_mark: Mapped[float | None] = mapped_column(default=None)
    marks: Mapped[list[dict[str, t.Any]]] = mapped_column(JSONDocument, default_factory=list)
    validated_at: Mapped[datetime.datetime | None] = mapped_column(default=None)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


# Calculation results


class calculation_results(base):
    __tablename__ = "calculation_results"
    __table_args__ = (
        Index(
            "uq_calculation_results_live_student_id",
            "student_id",
            unique=True,
            postgresql_where=LIVE_CALCULATION,
            sqlite_where=LIVE_CALCULATION,
        ),
    )

    calculation_id: Mapped[CalculationID] = mapped_column(primary_key=True)
    student_id: Mapped[StudentID]
    overall_result: Mapped[str]
    results: Mapped[list[dict[str, t.Any]]] = mapped_column(JSONDocument)
    status: Mapped[str]
    created_at: Mapped[datetime.datetime]
    created_by: Mapped[UserID | None] = mapped_column(default=None)
    updated_at: Mapped[datetime.datetime | None] = mapped_column(default=None)
    updated_by: Mapped[UserID | None] = mapped_column(default=None)
    deleted_at: Mapped[datetime.datetime | None] = mapped_column(default=None)
    deleted_by: Mapped[UserID | None] = mapped_column(default=None)
