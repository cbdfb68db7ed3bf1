import datetime
import inspect
import logging
import logging.config
import typing as t

TimestampProvider = t.Callable[..., datetime.datetime]

TRACE: t.Final[int] = 5


class TraceLogLevelLogger(logging.Logger):
    def trace(self, message: str, *args: t.Any, **kwargs: t.Any):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, message, args, **kwargs)


class LoggingProvider(object):
    Function: t.Final[t.Literal["fn"]] = "fn"
    Class: t.Final[t.Literal["cls"]] = "cls"
    Module: t.Final[t.Literal["mod"]] = "mod"

    def __init__(self, config: dict[str, t.Any], debug: bool):
        LoggingProvider.create_trace_loglevel()
        logging.config.dictConfig(config)
        if debug:
            self.capture_warnings(True)

    @staticmethod
    def create_trace_loglevel():
        logging.setLoggerClass(TraceLogLevelLogger)
        logging.addLevelName(TRACE, "TRACE")
        logging.TRACE = TRACE  # pyright: ignore [reportAttributeAccessIssue]

    @classmethod
    def get_logger(
        cls, scope: t.Literal["mod", "cls", "fn"] = "mod", name: str | None = None, n_frames: int = 1
    ) -> TraceLogLevelLogger:
        """
        Name a logger after the caller's module, class or function, unless
        `name` is given outright.
        """
        if name:
            return t.cast(TraceLogLevelLogger, logging.getLogger(name))

        frame = inspect.stack()[n_frames].frame
        mod = frame.f_globals["__name__"]
        match scope:
            case cls.Module:
                name = mod

            case cls.Function:
                fn = inspect.stack()[n_frames].function
                owner = frame.f_locals.get("self")
                name = f"{mod}.{owner.__class__.__name__}.{fn}" if owner is not None else f"{mod}.{fn}"

            case cls.Class:
                if "self" in frame.f_locals:
                    klass = frame.f_locals["self"].__class__
                elif isinstance(frame.f_locals.get("cls"), type):
                    klass = frame.f_locals["cls"]
                else:
                    raise RuntimeError("could not determine class")
                name = f"{klass.__module__}.{klass.__name__}"

        return t.cast(TraceLogLevelLogger, logging.getLogger(name))

    @staticmethod
    def capture_warnings(capture: bool):
        logging.captureWarnings(capture)
