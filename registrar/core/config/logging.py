import pathlib
import typing as t

import pydantic as p

from .base import BaseSettings


class ExtraFormatterSettings(BaseSettings):
    class_: t.Literal["registrar.lib.logging.ExtraFormatter"] = p.Field(alias="()")
    base: str
    format: str | None = None
    datefmt: str | None = None
    log_colors: dict[str, str] = {}
    no_color: bool = False
    indent: bool | None = None


# https://github.com/python/cpython/blob/3.12/Lib/logging/__init__.py#L91-L98
LogLevel = t.Literal["NOTSET", "TRACE", "DEBUG", "INFO", "WARNING", "WARN", "ERROR", "FATAL", "CRITICAL"]


class BaseHandlerSettings(BaseSettings):
    formatter: str
    level: LogLevel


class StreamHandlerSettings(BaseHandlerSettings):
    class_: t.Literal["colorlog.StreamHandler"] = p.Field(alias="class")
    stream: str = "ext://sys.stderr"


class FileHandlerSettings(BaseHandlerSettings):
    class_: t.Literal["logging.FileHandler"] = p.Field(alias="class")
    filename: pathlib.Path
    delay: bool = True

    @p.field_serializer("filename")
    def serialize_filename(self, v: pathlib.Path) -> str:
        return str(v)


class TimedRotatingFileHandlerSettings(BaseHandlerSettings):
    class_: t.Literal["logging.handlers.TimedRotatingFileHandler"] = p.Field(alias="class")
    backupCount: int
    filename: pathlib.Path
    when: str
    delay: bool = True

    @p.field_serializer("filename")
    def serialize_filename(self, v: pathlib.Path) -> str:
        return str(v)


HandlerSettings = t.Annotated[
    StreamHandlerSettings | FileHandlerSettings | TimedRotatingFileHandlerSettings,
    p.Field(discriminator="class_"),
]


class LoggerSettings(BaseSettings):
    level: LogLevel = "NOTSET"
    propagate: bool = True
    handlers: list[str] | None = None


class RootLoggerSettings(BaseSettings):
    handlers: list[str]
    level: LogLevel = "NOTSET"


class LoggingSettings(BaseSettings):
    version: t.Literal[1]
    disable_existing_loggers: bool = True
    formatters: dict[str, ExtraFormatterSettings]
    handlers: dict[str, HandlerSettings]
    root: RootLoggerSettings
    loggers: dict[str, LoggerSettings] = {}
