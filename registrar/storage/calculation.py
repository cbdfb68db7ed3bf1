from __future__ import annotations

import datetime
import typing as t

import sqlalchemy as sqla
from sqlalchemy.dialects import postgresql, sqlite

from registrar.core import di
from registrar.core.error import BadRequestError, NotFoundError
from registrar.model import CalculationID, CalculationPayload, CalculationResult, CalculationStatus, StudentID, \
    UserID

from . import Session
from .table import calculation_results, LIVE_CALCULATION


@t.overload
def get(
    calculation_id: CalculationID,
    *,
    session: Session = ...,
) -> CalculationResult | None: ...


@t.overload
def get(
    calculation_id: None = None,
    *,
    student_id: StudentID,
    session: Session = ...,
) -> CalculationResult | None: ...


def get(
    calculation_id: CalculationID | None = None,
    *,
    student_id: StudentID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> CalculationResult | None:
    """Get a calculation result by ID, or the live (non-deleted) result of a student.

    Exactly one lookup key must be provided.
    """
    if calculation_id is not None:
        stmt = sqla.select(calculation_results.__table__).where(
            calculation_results.calculation_id == calculation_id
        )
    elif student_id is not None:
        stmt = sqla.select(calculation_results.__table__).where(
            calculation_results.student_id == student_id, LIVE_CALCULATION
        )
    else:
        raise ValueError("exactly one of calculation_id or student_id must be provided")

    row = session.execute(stmt).mappings().one_or_none()
    return CalculationResult(**row) if row else None


def find(
    *,
    student_id: StudentID | None = None,
    status: CalculationStatus | str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[CalculationResult, ...]:
    """Filter calculation results, newest first. Deleted results are only returned when asked for by status."""
    stmt = sqla.select(calculation_results.__table__).order_by(calculation_results.created_at.desc())
    if student_id is not None:
        stmt = stmt.where(calculation_results.student_id == student_id)
    if status is not None:
        try:
            status = CalculationStatus(status)
        except ValueError:
            raise BadRequestError("invalid calculation status", status=status) from None
        stmt = stmt.where(calculation_results.status == status.value)
    else:
        stmt = stmt.where(LIVE_CALCULATION)

    rows = session.execute(stmt).mappings().all()
    return tuple(CalculationResult(**row) for row in rows)


def upsert(
    payload: CalculationPayload,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> CalculationResult:
    """
    Write `payload` as the student's live calculation result. An existing
    live result is overwritten in full and keeps its calculation_id; deleted
    results are never touched.
    """
    values: dict[str, t.Any] = {
        "student_id": payload.student_id,
        "overall_result": payload.overall_result.value,
        "results": [b.model_dump(mode="json") for b in payload.results],
        "status": payload.status.value,
        "created_at": payload.created_at,
        "created_by": payload.created_by,
        "updated_at": payload.updated_at,
        "updated_by": payload.updated_by,
        "deleted_at": None,
        "deleted_by": None,
    }

    table = calculation_results.__table__
    insert = _dialect_insert(session)
    stmt = insert(table).values(calculation_id=CalculationID(), **values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c.student_id],
        index_where=LIVE_CALCULATION,
        set_={k: getattr(stmt.excluded, k) for k in values if k != "student_id"},
    ).returning(table.c.calculation_id)

    calculation_id = session.execute(stmt).scalar_one_or_none()
    if calculation_id is None:
        raise NotFoundError("calculation result upsert had no effect", student_id=payload.student_id)

    result = get(calculation_id, session=session)
    assert result is not None
    return result


def delete(
    student_id: StudentID,
    *,
    deleted_by: UserID | None = None,
    deleted_at: datetime.datetime,
    session: Session = di.Provide["storage.persistent.session"],
) -> CalculationResult:
    """Soft-delete the student's live calculation result."""
    stmt = (
        sqla
        .update(calculation_results.__table__)
        .where(calculation_results.__table__.c.student_id == student_id, LIVE_CALCULATION)
        .values(
            status=CalculationStatus.Deleted.value,
            deleted_at=deleted_at,
            deleted_by=deleted_by,
            updated_at=deleted_at,
            updated_by=deleted_by,
        )
        .returning(calculation_results.__table__.c.calculation_id)
    )
    calculation_id = session.execute(stmt).scalar_one_or_none()
    if calculation_id is None:
        raise NotFoundError("no calculation result for student", student_id=student_id)

    result = get(calculation_id, session=session)
    assert result is not None
    return result


def _dialect_insert(session: Session) -> t.Callable[..., t.Any]:
    match session.get_bind().dialect.name:
        case "postgresql":
            return postgresql.insert
        case "sqlite":
            return sqlite.insert
        case name:
            raise NotImplementedError(f"upsert is not supported on {name}")
