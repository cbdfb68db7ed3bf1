from __future__ import annotations

import asyncio
import concurrent.futures
import enum
import threading
import typing as t

from sqlalchemy.orm import Session

from registrar.core import di
from registrar.core.error import AppError, BadRequestError, InternalError
from registrar.core.provider import LoggingProvider
from registrar.model import BaseModel, JobID, StudentID, UserID

from .pipeline import TranscriptPipeline


class JobState(enum.Enum):
    Spawned = "SPAWNED"
    Running = "RUNNING"
    Completed = "COMPLETED"
    Failed = "FAILED"


class JobError(BaseModel):
    code: str
    message: str
    metadata: dict[str, t.Any] = {}


class JobOutcome(BaseModel):
    """The completion message of a job; `error` is set iff `success` is false."""

    success: bool
    student_id: str
    message: str | None = None
    error: JobError | None = None


JobListener = t.Callable[["TranscriptJob", JobOutcome], None]


class TranscriptJob(object):
    job_id: JobID
    student_id: str
    requested_by: UserID | None

    def __init__(self, student_id: str, requested_by: UserID | None = None):
        self.job_id = JobID()
        self.student_id = student_id
        self.requested_by = requested_by
        self.future: concurrent.futures.Future[JobOutcome] = concurrent.futures.Future()
        self._state = JobState.Spawned
        self._lock = threading.Lock()

    @property
    def state(self) -> JobState:
        with self._lock:
            return self._state

    @state.setter
    def state(self, state: JobState) -> None:
        with self._lock:
            self._state = state

    @property
    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: float | None = None) -> JobOutcome:
        return self.future.result(timeout)

    async def wait(self) -> JobOutcome:
        return await asyncio.wrap_future(self.future)

    def __repr__(self) -> str:
        return f"<TranscriptJob {self.job_id.key} {self.student_id} {self.state.value}>"


class TranscriptJobRunner(object):
    """
    Runs transcript calculations on a pool of worker threads, one job per
    student request. Jobs never raise: every failure becomes a FAILED state
    and an unsuccessful JobOutcome.
    """

    def __init__(
        self,
        pipeline: TranscriptPipeline,
        *,
        session_factory: t.Callable[[], Session],
        max_workers: int,
        logging: LoggingProvider,
    ):
        self.pipeline = pipeline
        self.session_factory = session_factory
        self.logger = logging.get_logger()
        self.executor = concurrent.futures.ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="transcript")
        self.listeners: list[JobListener] = []

    def subscribe(self, listener: JobListener) -> t.Callable[[], None]:
        """Deliver every completion message to `listener`; returns a callable that unsubscribes it."""
        self.listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self.listeners:
                self.listeners.remove(listener)

        return unsubscribe

    def spawn(self, student_id: StudentID | str, *, requested_by: UserID | None = None) -> TranscriptJob:
        job = TranscriptJob(str(student_id), requested_by=requested_by)
        self.logger.debug("spawning transcript job", extra={"job_id": job.job_id, "student_id": job.student_id})
        self.executor.submit(self._execute, job)
        return job

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)

    def _execute(self, job: TranscriptJob) -> None:
        """Run `job` and resolve its future, whatever fails along the way."""
        job.state = JobState.Running
        try:
            state, outcome = self._run(job)
            self._complete(job, state, outcome)
        except Exception as e:
            # listeners are skipped here, the future alone reports the crash
            job.state = JobState.Failed
            job.future.set_result(crash_outcome(job, e))

    def _run(self, job: TranscriptJob) -> tuple[JobState, JobOutcome]:
        session: Session | None = None
        try:
            if not StudentID.is_valid(job.student_id):
                raise BadRequestError("invalid student id", student_id=job.student_id)
            session = self.session_factory()
            result = self.pipeline.run(StudentID(job.student_id), session=session, requested_by=job.requested_by)
        except AppError as e:
            self.logger.warning(
                "transcript job failed",
                extra={
                    "job_id": job.job_id,
                    "student_id": job.student_id,
                    "code": e.code,
                    "error_metadata": e.metadata,
                },
            )
            return JobState.Failed, JobOutcome(success=False, student_id=job.student_id, error=e.as_dict())
        except Exception as e:
            self.logger.exception("transcript job crashed", extra={"job_id": job.job_id, "student_id": job.student_id})
            error = InternalError(str(e) or None, exception=e.__class__.__name__)
            return JobState.Failed, JobOutcome(success=False, student_id=job.student_id, error=error.as_dict())
        finally:
            if session is not None:
                session.close()

        self.logger.info(
            "transcript job completed",
            extra={"job_id": job.job_id, "student_id": job.student_id, "overall_result": result.overall_result},
        )
        message = f"transcript calculated: {result.overall_result.value}"
        return JobState.Completed, JobOutcome(success=True, student_id=job.student_id, message=message)

    def _complete(self, job: TranscriptJob, state: JobState, outcome: JobOutcome) -> None:
        job.state = state
        for listener in list(self.listeners):
            try:
                listener(job, outcome)
            except Exception:
                self.logger.exception("transcript job listener failed", extra={"job_id": job.job_id})
        job.future.set_result(outcome)


def crash_outcome(job: TranscriptJob, e: Exception) -> JobOutcome:
    # built from plain values only, as the failure may lie in logging or in the exception itself
    return JobOutcome(
        success=False,
        student_id=job.student_id,
        error=JobError(
            code=InternalError.code,
            message=InternalError.default_message,
            metadata={"exception": e.__class__.__name__},
        ),
    )


@di.inject
async def run_transcript(
    student_id: StudentID | str,
    *,
    requested_by: UserID | None = None,
    runner: TranscriptJobRunner = di.Provide["transcript.runner"],
) -> TranscriptJob:
    """Start a calculation for `student_id` in the background; returns as soon as the job is queued."""
    return runner.spawn(student_id, requested_by=requested_by)
