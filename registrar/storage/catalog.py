from __future__ import annotations

import typing as t

import pydantic as p
import sqlalchemy as sqla

from registrar.core import di
from registrar.core.error import AppError, DataIntegrityError, InvalidCriteriaError, InvalidLogicError, \
    InvalidOperatorError, InvalidRuleTypeError
from registrar.model import Block, BlockID, Subject, SubjectID, Test, TestID

from . import Session
from .table import blocks, subjects, tests

M = t.TypeVar("M", Block, Subject, Test)


def _build(model: type[M], row: t.Mapping[str, t.Any], key: str) -> M:
    """
    Validate a definition row. Criteria are stored as JSON documents, so a
    malformed rule surfaces here and is reported with the matching error code.
    """
    try:
        return model(**row)
    except p.ValidationError as e:
        raise translate_criteria_error(e, **{key: row[key]}) from e


def translate_criteria_error(e: p.ValidationError, **metadata: t.Any) -> AppError:
    for err in e.errors():
        loc = err["loc"]
        if not loc or loc[0] != "criteria":
            continue
        field = loc[-1]
        if err["type"] == "missing":
            return InvalidCriteriaError(
                "criterion is missing a field", field=".".join(str(part) for part in loc), index=loc[1], **metadata
            )
        if err["type"] == "union_tag_invalid" or (field == "rule_type" and err["type"] == "literal_error"):
            tag = err.get("ctx", {}).get("tag", err.get("input"))
            return InvalidRuleTypeError(rule_type=tag, index=loc[1], **metadata)
        if err["type"] == "union_tag_not_found":
            return InvalidRuleTypeError("criterion has no rule type", rule_type=None, index=loc[1], **metadata)
        if field == "operator":
            return InvalidOperatorError(operator=err["input"], index=loc[1], **metadata)
        if field == "logical_operator":
            return InvalidLogicError(logical_operator=err["input"], index=loc[1], **metadata)
        return InvalidCriteriaError(field=".".join(str(part) for part in loc), reason=err["msg"], **metadata)
    return DataIntegrityError("invalid definition", reason=str(e), **metadata)


def get_tests(
    test_ids: t.Iterable[TestID],
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> dict[TestID, Test]:
    ids = set(test_ids)
    if not ids:
        return {}
    stmt = sqla.select(tests.__table__).where(tests.test_id.in_(ids)).order_by(tests.test_id)
    rows = session.execute(stmt).mappings().all()
    return {row["test_id"]: _build(Test, row, "test_id") for row in rows}


def get_subjects(
    subject_ids: t.Iterable[SubjectID],
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> dict[SubjectID, Subject]:
    ids = set(subject_ids)
    if not ids:
        return {}
    stmt = sqla.select(subjects.__table__).where(subjects.subject_id.in_(ids)).order_by(subjects.subject_id)
    rows = session.execute(stmt).mappings().all()
    return {row["subject_id"]: _build(Subject, row, "subject_id") for row in rows}


def get_blocks(
    block_ids: t.Iterable[BlockID],
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> dict[BlockID, Block]:
    ids = set(block_ids)
    if not ids:
        return {}
    stmt = sqla.select(blocks.__table__).where(blocks.block_id.in_(ids)).order_by(blocks.block_id)
    rows = session.execute(stmt).mappings().all()
    return {row["block_id"]: _build(Block, row, "block_id") for row in rows}
