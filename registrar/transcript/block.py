from __future__ import annotations

import typing as t

from registrar.core.error import DataIntegrityError, InvalidCriteriaError, InvalidRuleTypeError
from registrar.model import Block, BlockAverageCriterion, BlockCriterion, BlockEvaluation, BlockID, Outcome, \
    SubjectEvaluation, SubjectPassStatusCriterion, TestPassStatusCriterion

from .mark import round_mark
from .rule import evaluate_criteria


def group_by_block(evaluations: t.Iterable[SubjectEvaluation]) -> dict[BlockID, list[SubjectEvaluation]]:
    groups: dict[BlockID, list[SubjectEvaluation]] = {}
    for evaluation in evaluations:
        groups.setdefault(evaluation.block_id, []).append(evaluation)
    return groups


def block_mark(members: t.Sequence[SubjectEvaluation]) -> float:
    """Σ total_mark / Σ coefficient, or 0 when the coefficients sum to nothing."""
    coefficients = sum(s.coefficient for s in members)
    if coefficients <= 0:
        return 0.0
    return round_mark(sum(s.total_mark for s in members) / coefficients)


def evaluate_block(block: Block, members: t.Sequence[SubjectEvaluation]) -> BlockEvaluation:
    if not block.criteria:
        raise InvalidCriteriaError("block has no criteria", block_id=block.block_id)

    mark = block_mark(members)
    subjects = {s.subject_id: s for s in members}

    def resolve(criterion: BlockCriterion) -> float | None:
        match criterion:
            case BlockAverageCriterion():
                return mark
            case SubjectPassStatusCriterion(subject_id=subject_id):
                subject = subjects.get(subject_id)
                return subject.total_mark if subject is not None else None
            case TestPassStatusCriterion(test_id=test_id):
                for subject in members:
                    for test in subject.test_results:
                        if test.test_id == test_id:
                            return test.average_mark
                return None
            case _:
                raise InvalidRuleTypeError(rule_type=getattr(criterion, "rule_type", None), block_id=block.block_id)

    passed = evaluate_criteria(block.criteria, resolve, block_id=block.block_id)
    return BlockEvaluation(
        block_id=block.block_id,
        total_mark=mark,
        result=Outcome.of(passed),
        subject_results=list(members),
    )


def aggregate_blocks(
    evaluations: t.Sequence[SubjectEvaluation], blocks: t.Mapping[BlockID, Block]
) -> list[BlockEvaluation]:
    """One evaluation per block that has evaluated subjects, in order of first appearance."""
    results: list[BlockEvaluation] = []
    for block_id, members in group_by_block(evaluations).items():
        block = blocks.get(block_id)
        if block is None:
            raise DataIntegrityError("subject references an unknown block", block_id=block_id)
        results.append(evaluate_block(block, members))
    return results
