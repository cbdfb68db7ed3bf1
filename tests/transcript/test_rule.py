"""Tests for registrar.transcript.rule module."""

from __future__ import annotations

import pytest

from registrar.core.error import InvalidCriteriaError, InvalidLogicChainError, InvalidLogicError, \
    InvalidOperatorError
from registrar.model import LogicalOperator, Operator, Outcome, TestCriterion
from registrar.transcript.rule import ChainLink, evaluate_criteria, evaluate_rule, fold_logic_chain


class TestEvaluateRule(object):
    """Tests for evaluate_rule()."""

    @pytest.mark.parametrize(
        "actual,operator,threshold,expected",
        [
            (10, Operator.EQ, 10, True),
            (10.5, Operator.EQ, 10, False),
            (11, Operator.GT, 10, True),
            (10, Operator.GT, 10, False),
            (10, Operator.GTE, 10, True),
            (9, Operator.LT, 10, True),
            (10, Operator.LT, 10, False),
            (10, Operator.LTE, 10, True),
        ],
    )
    def test_comparison(self, actual: float, operator: Operator, threshold: float, expected: bool) -> None:
        """Each operator compares the actual value against the threshold."""
        assert evaluate_rule(actual, operator, threshold, Outcome.Pass) is expected

    def test_expected_fail_inverts(self) -> None:
        """A rule expecting FAIL holds when the comparison fails."""
        assert evaluate_rule(40, Operator.GTE, 50, Outcome.Fail) is True
        assert evaluate_rule(60, Operator.GTE, 50, Outcome.Fail) is False

    def test_accepts_raw_strings(self) -> None:
        """Operators and outcomes may be given by value."""
        assert evaluate_rule(60, "GTE", 50, "PASS") is True

    def test_unknown_operator(self) -> None:
        """An unsupported operator raises INVALID_OPERATOR naming it."""
        with pytest.raises(InvalidOperatorError) as exc_info:
            evaluate_rule(60, "XX", 50, Outcome.Pass)

        assert exc_info.value.code == "INVALID_OPERATOR"
        assert exc_info.value.metadata == {"operator": "XX"}


class TestFoldLogicChain(object):
    """Tests for fold_logic_chain()."""

    @pytest.mark.parametrize("result", [True, False])
    def test_single_link(self, result: bool) -> None:
        """A one-element chain yields its own result, whatever its connector."""
        assert fold_logic_chain([ChainLink(result)]) is result
        assert fold_logic_chain([ChainLink(result, LogicalOperator.Or)]) is result

    def test_and(self) -> None:
        assert fold_logic_chain([ChainLink(True), ChainLink(True, "AND")]) is True
        assert fold_logic_chain([ChainLink(True), ChainLink(False, "AND")]) is False

    def test_or(self) -> None:
        assert fold_logic_chain([ChainLink(False), ChainLink(True, "OR")]) is True
        assert fold_logic_chain([ChainLink(False), ChainLink(False, "OR")]) is False

    def test_left_to_right_without_precedence(self) -> None:
        """(True OR False) AND False folds to False; AND does not bind tighter."""
        links = [ChainLink(True), ChainLink(False, "OR"), ChainLink(False, "AND")]
        assert fold_logic_chain(links) is False

    def test_missing_connector(self) -> None:
        """A later link without a connector raises INVALID_LOGIC_CHAIN with its index."""
        with pytest.raises(InvalidLogicChainError) as exc_info:
            fold_logic_chain([ChainLink(True), ChainLink(True, "AND"), ChainLink(True)])

        assert exc_info.value.code == "INVALID_LOGIC_CHAIN"
        assert exc_info.value.metadata["index"] == 2

    def test_unknown_connector(self) -> None:
        with pytest.raises(InvalidLogicError) as exc_info:
            fold_logic_chain([ChainLink(True), ChainLink(True, "XOR")])

        assert exc_info.value.metadata == {"index": 1, "logical_operator": "XOR"}

    def test_empty_chain(self) -> None:
        with pytest.raises(InvalidCriteriaError):
            fold_logic_chain([])


class TestEvaluateCriteria(object):
    """Tests for evaluate_criteria()."""

    def test_resolves_each_criterion(self) -> None:
        """Every criterion is checked against the value resolved for it."""
        criteria = [
            TestCriterion(operator=Operator.GTE, threshold=50, expected_outcome=Outcome.Pass),
            TestCriterion(
                operator=Operator.LT, threshold=90, expected_outcome=Outcome.Pass, logical_operator=LogicalOperator.And
            ),
        ]
        assert evaluate_criteria(criteria, lambda c: 60) is True
        assert evaluate_criteria(criteria, lambda c: 95) is False

    def test_unresolved_value_does_not_hold(self) -> None:
        criteria = [TestCriterion(operator=Operator.GTE, threshold=0, expected_outcome=Outcome.Pass)]
        assert evaluate_criteria(criteria, lambda c: None) is False

    def test_context_added_to_chain_errors(self) -> None:
        """Chain errors carry the caller's context alongside the index."""
        criteria = [
            TestCriterion(operator=Operator.GTE, threshold=50, expected_outcome=Outcome.Pass),
            TestCriterion(operator=Operator.GTE, threshold=50, expected_outcome=Outcome.Pass),
        ]
        with pytest.raises(InvalidLogicChainError) as exc_info:
            evaluate_criteria(criteria, lambda c: 60, test_id="t1")

        assert exc_info.value.metadata == {"index": 1, "test_id": "t1"}

    def test_empty_criteria(self) -> None:
        with pytest.raises(InvalidCriteriaError) as exc_info:
            evaluate_criteria([], lambda c: 60, subject_id="s1")

        assert exc_info.value.metadata == {"subject_id": "s1"}
