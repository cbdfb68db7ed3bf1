from __future__ import annotations

import typing as t
from pathlib import Path

import pydantic as p

from .base import BaseSettings

MissingValuePolicy = t.Literal["zero", "error"]


class AuditSettings(BaseSettings):
    enabled: bool = True
    # defaults to <XDG state home>/registrar/transcript_result
    directory: Path | None = None


class TranscriptSettings(BaseSettings):
    max_workers: int = p.Field(default=4, ge=1)
    # a TEST_SCORE criterion whose test was not evaluated for the student
    missing_test_score: MissingValuePolicy = "zero"
    # a subject with no evaluated member tests
    empty_subject_average: MissingValuePolicy = "zero"
    audit: AuditSettings
