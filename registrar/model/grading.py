from __future__ import annotations

import datetime

from .base import BaseModel, WithCtime
from .enum import TestResultStatus
from .id import StudentID, TestID, TestResultID


class Mark(BaseModel):
    notation_text: str | None = None
    mark: float


class GradedTestResult(WithCtime):
    """
    A student's graded sitting of a test. Produced by the grading workflow,
    read-only here. Either `average_mark` is already known or it is derived
    from `marks`.
    """

    result_id: TestResultID
    student_id: StudentID
    test_id: TestID
    average_mark: float | None = None
    marks: list[Mark] = []
    status: TestResultStatus
    validated_at: datetime.datetime | None = None
