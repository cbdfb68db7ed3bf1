from __future__ import annotations

import typing as t

from registrar.core.error import DataIntegrityError
from registrar.model import GradedTestResult, Outcome, Test, TestCriterion, TestEvaluation, TestID

from .mark import mean, round_mark
from .rule import evaluate_criteria


def average_mark(graded: GradedTestResult) -> float:
    """The graded average if the grading workflow supplied one, otherwise the mean of the raw marks."""
    if graded.average_mark is not None:
        return graded.average_mark
    avg = mean([m.mark for m in graded.marks])
    if avg is None:
        raise DataIntegrityError(
            "graded result has neither an average nor marks", result_id=graded.result_id, test_id=graded.test_id
        )
    return round_mark(avg)


def evaluate_test(test: Test, graded: GradedTestResult | None) -> TestEvaluation:
    if not test.criteria:
        raise DataIntegrityError("test has no criteria", test_id=test.test_id)
    if graded is None:
        raise DataIntegrityError("no graded result for test", test_id=test.test_id)

    avg = average_mark(graded)

    def resolve(criterion: TestCriterion) -> float:
        return avg

    passed = evaluate_criteria(test.criteria, resolve, test_id=test.test_id)
    return TestEvaluation(
        test_id=test.test_id,
        subject_id=test.subject_id,
        average_mark=avg,
        weight=test.weight,
        weighted_mark=round_mark(avg * test.weight),
        result=Outcome.of(passed),
    )


def evaluate_tests(graded_results: t.Sequence[GradedTestResult], tests: t.Mapping[TestID, Test]) -> list[TestEvaluation]:
    """Evaluate every graded result against its test definition, in the order given."""
    evaluations: list[TestEvaluation] = []
    for graded in graded_results:
        test = tests.get(graded.test_id)
        if test is None:
            raise DataIntegrityError(
                "graded result references an unknown test", result_id=graded.result_id, test_id=graded.test_id
            )
        evaluations.append(evaluate_test(test, graded))
    return evaluations
