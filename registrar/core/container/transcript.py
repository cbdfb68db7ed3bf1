from __future__ import annotations

import typing as t
from pathlib import Path

from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Object, Provider, Resource, Singleton
from sqlalchemy.orm import Session

from ..config.transcript import TranscriptSettings
from ..provider import LoggingProvider, TimestampProvider

if t.TYPE_CHECKING:
    from registrar.transcript.audit import TranscriptAuditLog
    from registrar.transcript.pipeline import TranscriptPipeline
    from registrar.transcript.runner import TranscriptJobRunner

# registrar.transcript imports registrar.core, so its classes are imported
# when first provided rather than when this module loads


def provide_audit_log(settings: TranscriptSettings, state_path: Path, logging: LoggingProvider) -> TranscriptAuditLog:
    from registrar.transcript.audit import TranscriptAuditLog

    directory = settings.audit.directory or state_path / "transcript_result"
    return TranscriptAuditLog(directory, enabled=settings.audit.enabled, logging=logging)


def provide_pipeline(
    settings: TranscriptSettings, audit: TranscriptAuditLog, utcnow: TimestampProvider, logging: LoggingProvider
) -> TranscriptPipeline:
    from registrar.transcript.pipeline import TranscriptPipeline

    return TranscriptPipeline(settings=settings, audit=audit, utcnow=utcnow, logging=logging)


def provide_runner(
    pipeline: TranscriptPipeline,
    session_factory: t.Callable[[], Session],
    settings: TranscriptSettings,
    logging: LoggingProvider,
) -> t.Generator[TranscriptJobRunner]:
    from registrar.transcript.runner import TranscriptJobRunner

    runner = TranscriptJobRunner(
        pipeline, session_factory=session_factory, max_workers=settings.max_workers, logging=logging
    )
    yield runner
    runner.shutdown(wait=True)


class TranscriptContainer(DeclarativeContainer):
    config = Configuration()
    logging: Provider[LoggingProvider] = Resource()
    state_path: Provider[Path] = Resource()
    utcnow: Provider[TimestampProvider] = Object()
    session_factory: Provider[t.Callable[[], Session]] = Object()

    settings: Provider[TranscriptSettings] = Singleton(TranscriptSettings, config)
    audit: Provider[TranscriptAuditLog] = Singleton(
        provide_audit_log, settings=settings, state_path=state_path, logging=logging
    )
    pipeline: Provider[TranscriptPipeline] = Singleton(
        provide_pipeline, settings=settings, audit=audit, utcnow=utcnow, logging=logging
    )
    runner: Provider[TranscriptJobRunner] = Resource(
        provide_runner, pipeline=pipeline, session_factory=session_factory, settings=settings, logging=logging
    )
