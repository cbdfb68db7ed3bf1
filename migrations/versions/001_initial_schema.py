"""Initial schema for transcript calculation

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

"""

import typing as t

from alembic import op
from sqlalchemy import func as f
from sqlalchemy import text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.schema import Column, ForeignKey
from sqlalchemy.types import DateTime, Float, JSON, String

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | t.Sequence[str] | None = None
depends_on: str | t.Sequence[str] | None = None

JSONDocument = JSON().with_variant(JSONB(), "postgresql")


def upgrade() -> None:
    # Definition catalog
    op.create_table(
        "blocks",
        Column("block_id", String(22), primary_key=True),
        Column("name", String, nullable=False),
        Column("criteria", JSONDocument, nullable=False),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
    )
    op.create_table(
        "subjects",
        Column("subject_id", String(22), primary_key=True),
        Column("block_id", String(22), ForeignKey("blocks.block_id"), nullable=False),
        Column("name", String, nullable=False),
        Column("coefficient", Float, nullable=False),
        Column("criteria", JSONDocument, nullable=False),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
    )
    op.create_table(
        "tests",
        Column("test_id", String(22), primary_key=True),
        Column("subject_id", String(22), ForeignKey("subjects.subject_id"), nullable=False),
        Column("name", String, nullable=False),
        Column("weight", Float, nullable=False),
        Column("criteria", JSONDocument, nullable=False),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
    )

    # Grading
    op.create_table(
        "student_test_results",
        Column("result_id", String(22), primary_key=True),
        Column("student_id", String(22), nullable=False),
        Column("test_id", String(22), ForeignKey("tests.test_id"), nullable=False),
        Column("status", String, nullable=False),
        Column("average_mark", Float, nullable=True),
        Column("marks", JSONDocument, nullable=False),
        Column("validated_at", DateTime(timezone=True), nullable=True),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
    )
    op.create_index("ix_student_test_results_student_id", "student_test_results", ["student_id"])

    # Calculation results
    op.create_table(
        "calculation_results",
        Column("calculation_id", String(22), primary_key=True),
        Column("student_id", String(22), nullable=False),
        Column("overall_result", String, nullable=False),
        Column("results", JSONDocument, nullable=False),
        Column("status", String, nullable=False),
        Column("created_at", DateTime(timezone=True), nullable=False),
        Column("created_by", String(22), nullable=True),
        Column("updated_at", DateTime(timezone=True), nullable=True),
        Column("updated_by", String(22), nullable=True),
        Column("deleted_at", DateTime(timezone=True), nullable=True),
        Column("deleted_by", String(22), nullable=True),
    )
    # at most one non-deleted result per student; target of the upsert
    op.create_index(
        "uq_calculation_results_live_student_id",
        "calculation_results",
        ["student_id"],
        unique=True,
        postgresql_where=text("status != 'DELETED'"),
        sqlite_where=text("status != 'DELETED'"),
    )


def downgrade() -> None:
    op.drop_index("uq_calculation_results_live_student_id", table_name="calculation_results")
    op.drop_table("calculation_results")
    op.drop_index("ix_student_test_results_student_id", table_name="student_test_results")
    op.drop_table("student_test_results")
    op.drop_table("tests")
    op.drop_table("subjects")
    op.drop_table("blocks")
