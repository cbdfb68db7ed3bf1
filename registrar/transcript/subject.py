from __future__ import annotations

import typing as t

from registrar.core.config.transcript import MissingValuePolicy
from registrar.core.error import DataIntegrityError, DataMissingError, InvalidCriteriaError, InvalidRuleTypeError
from registrar.model import Outcome, Subject, SubjectAverageCriterion, SubjectCriterion, SubjectEvaluation, \
    SubjectID, TestEvaluation, TestScoreCriterion

from .mark import mean, round_mark
from .rule import evaluate_criteria


def group_by_subject(evaluations: t.Iterable[TestEvaluation]) -> dict[SubjectID, list[TestEvaluation]]:
    groups: dict[SubjectID, list[TestEvaluation]] = {}
    for evaluation in evaluations:
        groups.setdefault(evaluation.subject_id, []).append(evaluation)
    return groups


def subject_average(
    subject: Subject, members: t.Sequence[TestEvaluation], *, empty_subject_average: MissingValuePolicy = "zero"
) -> float:
    avg = mean([e.average_mark for e in members])
    if avg is not None:
        return round_mark(avg)
    if empty_subject_average == "error":
        raise DataMissingError("subject has no evaluated tests", subject_id=subject.subject_id)
    return 0.0


def evaluate_subject(
    subject: Subject,
    members: t.Sequence[TestEvaluation],
    *,
    missing_test_score: MissingValuePolicy = "zero",
    empty_subject_average: MissingValuePolicy = "zero",
) -> SubjectEvaluation:
    if not subject.criteria:
        raise InvalidCriteriaError("subject has no criteria", subject_id=subject.subject_id)

    avg = subject_average(subject, members, empty_subject_average=empty_subject_average)
    scores = {e.test_id: e.average_mark for e in members}

    def resolve(criterion: SubjectCriterion) -> float:
        match criterion:
            case SubjectAverageCriterion():
                return avg
            case TestScoreCriterion(test_id=test_id):
                if test_id in scores:
                    return scores[test_id]
                if missing_test_score == "error":
                    raise DataMissingError(
                        "criterion references a test with no evaluation",
                        subject_id=subject.subject_id,
                        test_id=test_id,
                    )
                return 0.0
            case _:
                raise InvalidRuleTypeError(
                    rule_type=getattr(criterion, "rule_type", None), subject_id=subject.subject_id
                )

    passed = evaluate_criteria(subject.criteria, resolve, subject_id=subject.subject_id)
    return SubjectEvaluation(
        subject_id=subject.subject_id,
        block_id=subject.block_id,
        coefficient=subject.coefficient,
        average_mark=avg,
        total_mark=round_mark(subject.coefficient * sum(e.weighted_mark for e in members)),
        result=Outcome.of(passed),
        test_results=list(members),
    )


def aggregate_subjects(
    evaluations: t.Sequence[TestEvaluation],
    subjects: t.Mapping[SubjectID, Subject],
    *,
    missing_test_score: MissingValuePolicy = "zero",
    empty_subject_average: MissingValuePolicy = "zero",
) -> list[SubjectEvaluation]:
    """One evaluation per subject that has evaluated tests, in order of first appearance."""
    results: list[SubjectEvaluation] = []
    for subject_id, members in group_by_subject(evaluations).items():
        subject = subjects.get(subject_id)
        if subject is None:
            raise DataIntegrityError("test references an unknown subject", subject_id=subject_id)
        results.append(
            evaluate_subject(
                subject,
                members,
                missing_test_score=missing_test_score,
                empty_subject_average=empty_subject_average,
            )
        )
    return results
