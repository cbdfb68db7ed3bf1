"""Tests for registrar.transcript.compose module."""

from __future__ import annotations

import datetime

from registrar.model import BlockEvaluation, BlockID, CalculationStatus, Outcome, StudentID, UserID
from registrar.transcript.compose import compose_payload, overall_outcome

NOW = datetime.datetime(2026, 6, 30, tzinfo=datetime.UTC)


def make_block_evaluation(result: Outcome) -> BlockEvaluation:
    return BlockEvaluation(block_id=BlockID(), total_mark=50, result=result, subject_results=[])


class TestOverallOutcome(object):
    def test_all_pass(self) -> None:
        blocks = [make_block_evaluation(Outcome.Pass), make_block_evaluation(Outcome.Pass)]
        assert overall_outcome(blocks) is Outcome.Pass

    def test_any_fail(self) -> None:
        blocks = [make_block_evaluation(Outcome.Pass), make_block_evaluation(Outcome.Fail)]
        assert overall_outcome(blocks) is Outcome.Fail


class TestComposePayload(object):
    def test_payload(self) -> None:
        student_id, user_id = StudentID(), UserID()
        blocks = [make_block_evaluation(Outcome.Fail)]

        payload = compose_payload(student_id, blocks, now=NOW, requested_by=user_id)

        assert payload.student_id == student_id
        assert payload.overall_result is Outcome.Fail
        assert payload.results == blocks
        assert payload.status is CalculationStatus.Published
        assert payload.created_at == NOW
        assert payload.created_by == user_id
        assert payload.updated_at == NOW

    def test_anonymous_request(self) -> None:
        payload = compose_payload(StudentID(), [make_block_evaluation(Outcome.Pass)], now=NOW)
        assert payload.created_by is None
        assert payload.overall_result is Outcome.Pass
