"""Tests for registrar.transcript.test module."""

from __future__ import annotations

import datetime
import typing as t

import pytest

from registrar.core.error import DataIntegrityError, InvalidOperatorError
from registrar.model import GradedTestResult, Outcome, StudentID, SubjectID, Test, TestID, TestResultID, \
    TestResultStatus
from registrar.transcript.test import average_mark, evaluate_test, evaluate_tests

NOW = datetime.datetime(2026, 6, 30, tzinfo=datetime.UTC)


def make_test(weight: float = 1.0, criteria: list[dict[str, t.Any]] | None = None) -> Test:
    if criteria is None:
        criteria = [{"operator": "GTE", "threshold": 50, "expected_outcome": "PASS"}]
    return Test(
        test_id=TestID(),
        subject_id=SubjectID(),
        name="Midterm",
        weight=weight,
        criteria=criteria,
        create_time=NOW,
    )


def make_graded(test: Test, average: float | None = None, marks: t.Sequence[float] = ()) -> GradedTestResult:
    return GradedTestResult(
        result_id=TestResultID(),
        student_id=StudentID(),
        test_id=test.test_id,
        average_mark=average,
        marks=[{"mark": m} for m in marks],
        status=TestResultStatus.Graded,
        validated_at=NOW,
        create_time=NOW,
    )


class TestAverageMark(object):
    """Tests for average_mark()."""

    def test_supplied_average_wins(self) -> None:
        """A precomputed average is used even if marks are present."""
        graded = make_graded(make_test(), average=72.5, marks=[10, 20])
        assert average_mark(graded) == 72.5

    def test_mean_of_marks(self) -> None:
        graded = make_graded(make_test(), marks=[10, 11, 11])
        assert average_mark(graded) == 10.67

    def test_neither_average_nor_marks(self) -> None:
        graded = make_graded(make_test())
        with pytest.raises(DataIntegrityError) as exc_info:
            average_mark(graded)

        assert exc_info.value.metadata["result_id"] == graded.result_id


class TestEvaluateTest(object):
    """Tests for evaluate_test()."""

    def test_pass(self) -> None:
        test = make_test(weight=2.0)
        evaluation = evaluate_test(test, make_graded(test, average=60))

        assert evaluation.test_id == test.test_id
        assert evaluation.subject_id == test.subject_id
        assert evaluation.average_mark == 60
        assert evaluation.weighted_mark == 120
        assert evaluation.result is Outcome.Pass

    def test_fail(self) -> None:
        test = make_test()
        evaluation = evaluate_test(test, make_graded(test, average=40))
        assert evaluation.result is Outcome.Fail

    def test_weighted_mark_is_rounded(self) -> None:
        """weighted_mark = round(average × weight, 2)."""
        test = make_test(weight=0.333)
        evaluation = evaluate_test(test, make_graded(test, average=12.5))
        assert evaluation.weighted_mark == 4.16

    def test_zero_weight(self) -> None:
        test = make_test(weight=0)
        evaluation = evaluate_test(test, make_graded(test, average=80))
        assert evaluation.weighted_mark == 0

    def test_no_criteria(self) -> None:
        test = make_test(criteria=[])
        with pytest.raises(DataIntegrityError) as exc_info:
            evaluate_test(test, make_graded(test, average=60))

        assert exc_info.value.metadata == {"test_id": test.test_id}

    def test_no_graded_result(self) -> None:
        with pytest.raises(DataIntegrityError):
            evaluate_test(make_test(), None)

    def test_invalid_operator(self) -> None:
        test = make_test()
        broken = test.model_copy(
            update={"criteria": [c.model_copy(update={"operator": "XX"}) for c in test.criteria]}
        )
        with pytest.raises(InvalidOperatorError) as exc_info:
            evaluate_test(broken, make_graded(test, average=60))

        assert exc_info.value.metadata["operator"] == "XX"


class TestEvaluateTests(object):
    """Tests for evaluate_tests()."""

    def test_keeps_input_order(self) -> None:
        first, second = make_test(), make_test()
        graded = [make_graded(second, average=55), make_graded(first, average=45)]

        evaluations = evaluate_tests(graded, {first.test_id: first, second.test_id: second})

        assert [e.test_id for e in evaluations] == [second.test_id, first.test_id]
        assert [e.result for e in evaluations] == [Outcome.Pass, Outcome.Fail]

    def test_unknown_test(self) -> None:
        graded = make_graded(make_test(), average=60)
        with pytest.raises(DataIntegrityError) as exc_info:
            evaluate_tests([graded], {})

        assert exc_info.value.metadata["test_id"] == graded.test_id
