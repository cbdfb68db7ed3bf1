"""Typed failures raised by the calculation engine and its storage layer."""

from __future__ import annotations

import typing as t


class AppError(Exception):
    """
    Base class for failures that carry a machine-readable `code` and
    contextual `metadata` (ids, field names, offending values).
    """

    code: t.ClassVar[str] = "INTERNAL"
    default_message: t.ClassVar[str] = "internal error"

    message: str
    metadata: dict[str, t.Any]

    def __init__(self, message: str | None = None, **metadata: t.Any):
        self.message = message or self.default_message
        self.metadata = metadata
        super().__init__(self.message)

    def as_dict(self) -> dict[str, t.Any]:
        return {
            "code": self.code,
            "message": self.message,
            "metadata": dict(self.metadata),
        }

    def __str__(self) -> str:
        if not self.metadata:
            return f"[{self.code}] {self.message}"
        detail = ", ".join(f"{k}={v!r}" for k, v in self.metadata.items())
        return f"[{self.code}] {self.message} ({detail})"


class InternalError(AppError):
    code = "INTERNAL"


class BadRequestError(AppError):
    code = "BAD_REQUEST"
    default_message = "bad request"


class NotFoundError(AppError):
    code = "NOT_FOUND"
    default_message = "not found"


class DataIntegrityError(AppError):
    code = "DATA_INTEGRITY_ERROR"
    default_message = "inconsistent upstream data"


class DataMissingError(AppError):
    code = "DATA_MISSING"
    default_message = "required data is missing"


class InvalidLogicChainError(AppError):
    code = "INVALID_LOGIC_CHAIN"
    default_message = "missing logical operator in criteria chain"


class InvalidLogicError(AppError):
    code = "INVALID_LOGIC"
    default_message = "unsupported logical operator"


class InvalidCriteriaError(AppError):
    code = "INVALID_CRITERIA"
    default_message = "invalid criteria"


class InvalidOperatorError(BadRequestError):
    code = "INVALID_OPERATOR"
    default_message = "unsupported comparison operator"


class InvalidRuleTypeError(BadRequestError):
    code = "INVALID_RULE_TYPE"
    default_message = "unrecognized rule type"
