__all__ = [
    # Base
    "BaseModel",
    "WithCtime",
    # Enums
    "CalculationStatus",
    "DeploymentEnvironment",
    "LogicalOperator",
    "Operator",
    "Outcome",
    "TestResultStatus",
    # ID Types
    "BlockID",
    "CalculationID",
    "JobID",
    "ShortUUIDKey",
    "StudentID",
    "SubjectID",
    "TestID",
    "TestResultID",
    "UserID",
    # Criteria
    "AnyCriterion",
    "BaseCriterion",
    "BlockAverageCriterion",
    "BlockCriterion",
    "SubjectAverageCriterion",
    "SubjectCriterion",
    "SubjectPassStatusCriterion",
    "TestCriterion",
    "TestPassStatusCriterion",
    "TestScoreCriterion",
    # Catalog
    "Block",
    "Subject",
    "Test",
    # Grading
    "GradedTestResult",
    "Mark",
    # Calculation
    "BlockEvaluation",
    "CalculationPayload",
    "CalculationResult",
    "SubjectEvaluation",
    "TestEvaluation",
]

from .base import BaseModel, WithCtime
from .calculation import BlockEvaluation, CalculationPayload, CalculationResult, SubjectEvaluation, TestEvaluation
from .catalog import Block, Subject, Test
from .criterion import AnyCriterion, BaseCriterion, BlockAverageCriterion, BlockCriterion, SubjectAverageCriterion, \
    SubjectCriterion, SubjectPassStatusCriterion, TestCriterion, TestPassStatusCriterion, TestScoreCriterion
from .enum import CalculationStatus, DeploymentEnvironment, LogicalOperator, Operator, Outcome, TestResultStatus
from .grading import GradedTestResult, Mark
from .id import BlockID, CalculationID, JobID, ShortUUIDKey, StudentID, SubjectID, TestID, TestResultID, UserID
