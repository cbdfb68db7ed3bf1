import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Development = "development"
    Staging = "staging"
    Test = "test"
    Local = "local"


class Outcome(enum.Enum):
    Pass = "PASS"
    Fail = "FAIL"

    @classmethod
    def of(cls, passed: bool) -> "Outcome":
        return cls.Pass if passed else cls.Fail


class Operator(enum.Enum):
    EQ = "EQ"
    GT = "GT"
    GTE = "GTE"
    LT = "LT"
    LTE = "LTE"


class LogicalOperator(enum.Enum):
    And = "AND"
    Or = "OR"


class CalculationStatus(enum.Enum):
    Published = "PUBLISHED"
    Archived = "ARCHIVED"
    Deleted = "DELETED"


class TestResultStatus(enum.Enum):
    Graded = "GRADED"
    PendingReview = "PENDING_REVIEW"
    NeedsCorrection = "NEEDS_CORRECTION"
    Deleted = "DELETED"
