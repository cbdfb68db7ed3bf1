from __future__ import annotations

import sqlalchemy as sqla

from registrar.core import di
from registrar.model import GradedTestResult, StudentID, TestResultID, TestResultStatus

from . import Session
from .table import student_test_results


def get(
    result_id: TestResultID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> GradedTestResult | None:
    stmt = sqla.select(student_test_results.__table__).where(student_test_results.result_id == result_id)
    row = session.execute(stmt).mappings().one_or_none()
    return GradedTestResult(**row) if row else None


def find_graded(
    student_id: StudentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[GradedTestResult, ...]:
    """
    The student's test results that count towards a transcript: not deleted
    and validated by staff. Ordered by test so repeated runs see the same
    sequence.
    """
    stmt = (
        sqla
        .select(student_test_results.__table__)
        .where(
            student_test_results.student_id == student_id,
            student_test_results.status != TestResultStatus.Deleted.value,
            student_test_results.validated_at.is_not(None),
        )
        .order_by(student_test_results.test_id, student_test_results.result_id)
    )
    rows = session.execute(stmt).mappings().all()
    return tuple(GradedTestResult(**row) for row in rows)
