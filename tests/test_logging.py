"""Tests for registrar.lib.logging and the logging provider."""

from __future__ import annotations

import logging

from registrar.core import LoggingProvider
from registrar.lib.logging import ExtraFormatter
from registrar.model import StudentID


def make_record(msg: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("registrar.test", logging.INFO, __file__, 1, msg, None, None)
    record.__dict__.update(extra)
    return record


class TestExtraFormatter(object):
    def test_plain_message(self) -> None:
        formatter = ExtraFormatter(logging.Formatter, "%(levelname)s %(message)s")
        assert formatter.format(make_record("hello")) == "INFO hello"

    def test_extra_appended_as_json(self) -> None:
        formatter = ExtraFormatter(logging.Formatter, "%(message)s", indent=False)
        student_id = StudentID()

        line = formatter.format(make_record("transcript calculated", student_id=student_id, blocks=2))

        assert line == f'transcript calculated {{"blocks": 2, "student_id": "{student_id}"}}'

    def test_unserializable_extra_uses_repr(self) -> None:
        formatter = ExtraFormatter(logging.Formatter, "%(message)s", indent=False)
        line = formatter.format(make_record("x", thing=object()))
        assert '"thing": "<object object at' in line

    def test_multiline_message_is_hung(self) -> None:
        formatter = ExtraFormatter(logging.Formatter, "%(levelname)s %(message)s")
        assert formatter.format(make_record("first\nsecond")) == "INFO first\n     second"


class TestLoggingProvider(object):
    def test_module_logger(self) -> None:
        assert LoggingProvider.get_logger().name == __name__

    def test_class_logger(self) -> None:
        assert LoggingProvider.get_logger("cls").name == f"{__name__}.TestLoggingProvider"

    def test_named_logger(self) -> None:
        assert LoggingProvider.get_logger(name="registrar.audit").name == "registrar.audit"
