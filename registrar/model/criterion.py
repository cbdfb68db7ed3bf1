from __future__ import annotations

import typing as t

import pydantic as p

from .base import BaseModel
from .enum import LogicalOperator, Operator, Outcome
from .id import SubjectID, TestID


class BaseCriterion(BaseModel):
    """
    One comparison of a computed mark against `threshold`. The rule holds
    when the comparison's outcome equals `expected_outcome`. Every criterion
    after the first in a list must carry a `logical_operator` joining it to
    the result accumulated so far.
    """

    model_config = p.ConfigDict(frozen=True)

    operator: Operator
    threshold: float
    expected_outcome: Outcome
    logical_operator: LogicalOperator | None = None


class TestCriterion(BaseCriterion):
    rule_type: t.Literal["MARK"] = "MARK"


# subject level


class SubjectAverageCriterion(BaseCriterion):
    rule_type: t.Literal["AVERAGE"]


class TestScoreCriterion(BaseCriterion):
    rule_type: t.Literal["TEST_SCORE"]
    test_id: TestID


SubjectCriterion = t.Annotated[SubjectAverageCriterion | TestScoreCriterion, p.Field(discriminator="rule_type")]


# block level


class BlockAverageCriterion(BaseCriterion):
    rule_type: t.Literal["BLOCK_AVERAGE"]


class SubjectPassStatusCriterion(BaseCriterion):
    rule_type: t.Literal["SUBJECT_PASS_STATUS"]
    subject_id: SubjectID


class TestPassStatusCriterion(BaseCriterion):
    rule_type: t.Literal["TEST_PASS_STATUS"]
    test_id: TestID


BlockCriterion = t.Annotated[
    BlockAverageCriterion | SubjectPassStatusCriterion | TestPassStatusCriterion, p.Field(discriminator="rule_type")
]

AnyCriterion = TestCriterion | SubjectAverageCriterion | TestScoreCriterion | BlockAverageCriterion | \
    SubjectPassStatusCriterion | TestPassStatusCriterion
