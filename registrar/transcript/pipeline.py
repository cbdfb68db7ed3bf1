"""Transcript calculation for one student, from graded results to the stored verdict."""

from __future__ import annotations

from sqlalchemy.orm import Session

import registrar.storage.calculation as calculation_storage
import registrar.storage.catalog as catalog_storage
import registrar.storage.test_result as test_result_storage
from registrar.core.config.transcript import TranscriptSettings
from registrar.core.error import NotFoundError
from registrar.core.provider import TRACE, LoggingProvider, TimestampProvider
from registrar.model import CalculationResult, StudentID, UserID

from .audit import TranscriptAuditLog
from .block import aggregate_blocks
from .compose import compose_payload
from .subject import aggregate_subjects
from .test import evaluate_tests


class TranscriptPipeline(object):
    """Runs the calculation stages in order; each consumes the complete output of the one before.

    The pipeline:
    1. Loads the student's validated, non-deleted graded results
    2. Loads the test, subject and block definitions they reach
    3. Evaluates each test against its criteria
    4. Aggregates tests into subjects and subjects into blocks
    5. Composes the overall verdict and upserts it
    6. Records the stored result in the audit log, after commit
    """

    def __init__(
        self,
        *,
        settings: TranscriptSettings,
        audit: TranscriptAuditLog,
        utcnow: TimestampProvider,
        logging: LoggingProvider,
    ) -> None:
        self.settings = settings
        self.audit = audit
        self.utcnow = utcnow
        self.logger = logging.get_logger()

    def run(self, student_id: StudentID, *, session: Session, requested_by: UserID | None = None) -> CalculationResult:
        with session.begin():
            result = self.calculate(student_id, session=session, requested_by=requested_by)

        self.audit.record(result)
        self.logger.info(
            "transcript calculated",
            extra={
                "student_id": student_id,
                "calculation_id": result.calculation_id,
                "overall_result": result.overall_result,
                "blocks": len(result.results),
            },
        )
        return result

    def calculate(
        self, student_id: StudentID, *, session: Session, requested_by: UserID | None = None
    ) -> CalculationResult:
        """All stages up to and including the upsert; the caller owns the transaction."""
        graded = test_result_storage.find_graded(student_id, session=session)
        if not graded:
            raise NotFoundError("no graded test results for student", student_id=student_id)

        tests = catalog_storage.get_tests({g.test_id for g in graded}, session=session)
        subjects = catalog_storage.get_subjects({t.subject_id for t in tests.values()}, session=session)
        blocks = catalog_storage.get_blocks({s.block_id for s in subjects.values()}, session=session)
        self.logger.debug(
            "loaded transcript inputs",
            extra={
                "student_id": student_id,
                "graded": len(graded),
                "tests": len(tests),
                "subjects": len(subjects),
                "blocks": len(blocks),
            },
        )

        test_evaluations = evaluate_tests(graded, tests)
        subject_evaluations = aggregate_subjects(
            test_evaluations,
            subjects,
            missing_test_score=self.settings.missing_test_score,
            empty_subject_average=self.settings.empty_subject_average,
        )
        for se in subject_evaluations:
            self.logger.log(
                TRACE,
                "evaluated subject",
                extra={"subject_id": se.subject_id, "average_mark": se.average_mark, "result": se.result},
            )
        block_evaluations = aggregate_blocks(subject_evaluations, blocks)

        payload = compose_payload(student_id, block_evaluations, now=self.utcnow(), requested_by=requested_by)
        return calculation_storage.upsert(payload, session=session)
