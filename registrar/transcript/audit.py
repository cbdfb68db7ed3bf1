from __future__ import annotations

from pathlib import Path

import registrar.lib.json as json
from registrar.core.provider import LoggingProvider
from registrar.model import CalculationResult, StudentID


class TranscriptAuditLog(object):
    """
    Keeps the last written calculation of each student as a JSON file. Writes
    are best-effort: a failure is logged and never reaches the caller.
    """

    def __init__(self, directory: Path, *, enabled: bool = True, logging: LoggingProvider):
        self.directory = directory
        self.enabled = enabled
        self.logger = logging.get_logger()

    def path_for(self, student_id: StudentID) -> Path:
        return self.directory / f"transcript_{student_id.key}.json"

    def record(self, result: CalculationResult) -> Path | None:
        if not self.enabled:
            return None

        path = self.path_for(result.student_id)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(result, indent=2, sort_keys=True), encoding="utf8")
        except OSError as e:
            self.logger.warning(
                "could not write transcript audit record",
                extra={
                    "student_id": result.student_id,
                    "path": path,
                    "error": str(e),
                },
            )
            return None

        self.logger.debug("wrote transcript audit record", extra={"student_id": result.student_id, "path": path})
        return path

    def read(self, student_id: StudentID) -> CalculationResult | None:
        path = self.path_for(student_id)
        if not path.exists():
            return None
        return CalculationResult.model_validate_json(path.read_text(encoding="utf8"))
