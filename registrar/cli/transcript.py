"""CLI commands for running and inspecting transcript calculations."""

from __future__ import annotations

import asyncio
import sys

from sqlalchemy.orm import Session

import registrar.lib.cli as click
import registrar.lib.json as json
from registrar.core import di, TimestampProvider
from registrar.model import CalculationResult, CalculationStatus, StudentID, UserID
from registrar.storage import calculation as calculation_storage
from registrar.transcript.runner import JobOutcome, run_transcript


@click.group("transcript")
def transcript():
    """Calculate and manage student transcripts."""
    ...


@transcript.command("run")
@click.argument("student_id", type=click.KeyParamType(StudentID))
@click.option("--wait/--no-wait", default=True, help="Wait for the calculation to finish")
@click.option("--by", "requested_by", type=click.KeyParamType(UserID), default=None, help="User requesting the run")
def transcript_run(student_id: StudentID, wait: bool, requested_by: UserID | None) -> int:
    """Calculate the transcript of STUDENT_ID."""
    job = asyncio.run(run_transcript(student_id, requested_by=requested_by))
    click.echo(f"spawned job {job.job_id} for {job.student_id}", err=True)
    if not wait:
        return 0

    outcome = job.result()
    echo_outcome(outcome)
    return 0 if outcome.success else 1


@transcript.command("show")
@click.argument("student_id", type=click.KeyParamType(StudentID))
@click.option(
    "--status",
    type=click.EnumType(CalculationStatus),
    default=None,
    help="Show results in this status, including deleted ones",
)
@di.inject
def transcript_show(
    student_id: StudentID,
    status: CalculationStatus | None,
    session: Session = di.Provide["storage.persistent.session"],
) -> int:
    """Print the stored calculation results of STUDENT_ID."""
    with session, session.begin():
        results = calculation_storage.find(student_id=student_id, status=status, session=session)

    if not results:
        click.echo(f"no calculation results for {student_id}", err=True)
        return 1
    for result in results:
        echo_result(result)
    return 0


@transcript.command("delete")
@click.argument("student_id", type=click.KeyParamType(StudentID))
@click.option("--by", "deleted_by", type=click.KeyParamType(UserID), default=None, help="User deleting the result")
@di.inject
def transcript_delete(
    student_id: StudentID,
    deleted_by: UserID | None,
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> int:
    """Soft-delete the live calculation result of STUDENT_ID."""
    with session, session.begin():
        result = calculation_storage.delete(student_id, deleted_by=deleted_by, deleted_at=utcnow(), session=session)
    click.echo(f"deleted {result.calculation_id}", err=True)
    return 0


def echo_outcome(outcome: JobOutcome) -> None:
    if outcome.success:
        click.echo(click.style(outcome.message or "done", fg="green"))
    else:
        assert outcome.error is not None
        click.echo(click.style(outcome.error.code, fg="red"), nl=False, file=sys.stderr)
        click.echo(f" {outcome.error.message}", file=sys.stderr)
        for k, v in outcome.error.metadata.items():
            click.echo(f"  {k}: {v}", file=sys.stderr)


def echo_result(result: CalculationResult) -> None:
    click.echo(json.dumps(result, indent=2))
