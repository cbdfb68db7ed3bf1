from __future__ import annotations

import datetime

from .base import BaseModel
from .enum import CalculationStatus, Outcome
from .id import BlockID, CalculationID, StudentID, SubjectID, TestID, UserID


class TestEvaluation(BaseModel):
    test_id: TestID
    subject_id: SubjectID
    average_mark: float
    weight: float
    weighted_mark: float
    result: Outcome


class SubjectEvaluation(BaseModel):
    subject_id: SubjectID
    block_id: BlockID
    coefficient: float
    average_mark: float
    total_mark: float
    result: Outcome
    test_results: list[TestEvaluation]


class BlockEvaluation(BaseModel):
    block_id: BlockID
    total_mark: float
    result: Outcome
    subject_results: list[SubjectEvaluation]


class CalculationPayload(BaseModel):
    """The full snapshot written by one run; replaces any live record for the student."""

    student_id: StudentID
    overall_result: Outcome
    results: list[BlockEvaluation]
    status: CalculationStatus = CalculationStatus.Published
    created_at: datetime.datetime
    created_by: UserID | None = None
    updated_at: datetime.datetime | None = None
    updated_by: UserID | None = None


class CalculationResult(CalculationPayload):
    calculation_id: CalculationID
    deleted_at: datetime.datetime | None = None
    deleted_by: UserID | None = None
