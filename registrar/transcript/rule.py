"""Single-rule evaluation and left-to-right folding of AND/OR chains."""

from __future__ import annotations

import operator as op
import typing as t

from registrar.core.error import InvalidCriteriaError, InvalidLogicChainError, InvalidLogicError, \
    InvalidOperatorError
from registrar.model import AnyCriterion, LogicalOperator, Operator, Outcome

Comparators: t.Final[dict[Operator, t.Callable[[float, float], bool]]] = {
    Operator.EQ: op.eq,
    Operator.GT: op.gt,
    Operator.GTE: op.ge,
    Operator.LT: op.lt,
    Operator.LTE: op.le,
}


class ChainLink(t.NamedTuple):
    result: bool
    logical_operator: LogicalOperator | str | None = None


def evaluate_rule(
    actual: float, operator: Operator | str, threshold: float, expected_outcome: Outcome | str
) -> bool:
    """True when comparing `actual` against `threshold` yields `expected_outcome`."""
    try:
        comparator = Comparators[Operator(operator)]
    except (ValueError, KeyError):
        raise InvalidOperatorError(operator=getattr(operator, "value", operator)) from None

    return Outcome.of(comparator(actual, threshold)) is Outcome(expected_outcome)


def fold_logic_chain(links: t.Sequence[ChainLink | tuple[bool, LogicalOperator | str | None]]) -> bool:
    """
    Reduce rule results left to right. The first link seeds the accumulator
    and its connector is ignored; every later link must say how it joins.
    """
    if not links:
        raise InvalidCriteriaError("criteria chain is empty")

    first, *rest = links
    acc = first[0]
    for index, (result, logical_operator) in enumerate(rest, start=1):
        if logical_operator is None:
            raise InvalidLogicChainError(index=index)
        try:
            connector = LogicalOperator(logical_operator)
        except ValueError:
            raise InvalidLogicError(index=index, logical_operator=logical_operator) from None

        match connector:
            case LogicalOperator.And:
                acc = acc and result
            case LogicalOperator.Or:
                acc = acc or result
    return acc


def evaluate_criteria(
    criteria: t.Sequence[AnyCriterion], resolve: t.Callable[[t.Any], float | None], **context: t.Any
) -> bool:
    """
    Evaluate each criterion against the value `resolve` finds for it and fold
    the results. A criterion whose value cannot be resolved does not hold.
    """
    if not criteria:
        raise InvalidCriteriaError("criteria list is empty", **context)

    links: list[ChainLink] = []
    for criterion in criteria:
        actual = resolve(criterion)
        if actual is None:
            holds = False
        else:
            holds = evaluate_rule(actual, criterion.operator, criterion.threshold, criterion.expected_outcome)
        links.append(ChainLink(holds, criterion.logical_operator))

    try:
        return fold_logic_chain(links)
    except (InvalidLogicChainError, InvalidLogicError) as e:
        e.metadata.update(context)
        raise
