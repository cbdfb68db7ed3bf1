from __future__ import annotations

import datetime
import typing as t

from registrar.model import BlockEvaluation, CalculationPayload, CalculationStatus, Outcome, StudentID, UserID


def overall_outcome(blocks: t.Sequence[BlockEvaluation]) -> Outcome:
    """PASS iff every block passed."""
    return Outcome.of(all(b.result is Outcome.Pass for b in blocks))


def compose_payload(
    student_id: StudentID,
    blocks: t.Sequence[BlockEvaluation],
    *,
    now: datetime.datetime,
    requested_by: UserID | None = None,
) -> CalculationPayload:
    return CalculationPayload(
        student_id=student_id,
        overall_result=overall_outcome(blocks),
        results=list(blocks),
        status=CalculationStatus.Published,
        created_at=now,
        created_by=requested_by,
        updated_at=now,
        updated_by=requested_by,
    )
