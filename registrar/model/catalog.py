from __future__ import annotations

import pydantic as p

from .base import WithCtime
from .criterion import BlockCriterion, SubjectCriterion, TestCriterion
from .id import BlockID, SubjectID, TestID


class Block(WithCtime):
    block_id: BlockID
    name: str
    criteria: list[BlockCriterion] = []


class Subject(WithCtime):
    subject_id: SubjectID
    block_id: BlockID
    name: str
    coefficient: float = p.Field(ge=0)
    criteria: list[SubjectCriterion] = []


class Test(WithCtime):
    test_id: TestID
    subject_id: SubjectID
    name: str
    weight: float = p.Field(ge=0)
    criteria: list[TestCriterion] = []
