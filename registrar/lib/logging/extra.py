import inspect
import json
import logging
import string
import textwrap
import typing as t

import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

from .json import JSONEncoder
from .style import LogStyle

ReservedKeys = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "asctime",
    "color_message",
    "message",
    "log_color",
    "reset",
}


class ExtraFormatter(logging.Formatter):
    """
    Wraps a base formatter and appends the record's `extra=` fields as JSON,
    highlighted with pygments when the handler writes to a terminal.
    """

    def __init__(
        self,
        base: type[logging.Formatter],
        format: str | None,
        datefmt: str | None = None,
        indent: bool | None = True,
        pyg_style: t.Type[Style] = LogStyle,
        style: t.Literal["%", "{", "$"] = "%",
        validate: bool = True,
        *,
        defaults: t.Any = None,
        **kwargs: t.Any,
    ):
        self.base = base(format, datefmt=datefmt, style=style, validate=validate, defaults=defaults, **kwargs)
        self.pyg_style = pyg_style
        self.handler: logging.Handler | None = None
        self.indent = bool(indent)
        self.encoder = JSONEncoder()

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if "\n" in msg:
            # hang continuation lines under the first line of the message
            formatted = self.base.format(record)
            idx = formatted.find(msg)
            indent = " " * len([c for c in formatted[:idx] if c in string.printable])
            line, *lines = msg.splitlines()
            body = textwrap.indent("\n".join(lines), prefix=indent)
            record.msg = f"{line}\n{body}"
            record.args = None
        message = self.base.format(record)

        extra = {k: v for k, v in record.__dict__.items() if k not in ReservedKeys}
        if not extra:
            return message

        js = json.dumps(extra, sort_keys=True, indent=(4 if self.indent else None), default=self.encoder.default)
        if self.is_tty() and not getattr(self.base, "no_color", False):
            hl = pygments.highlight  # pyright: ignore [reportUnknownMemberType, reportUnknownVariableType]
            js = hl(js, JsonLexer(), Terminal256Formatter[str](style=self.pyg_style), None)
        return message + " " + js.strip()

    def is_tty(self) -> bool:
        if self.handler is None:
            # the handler is not known at construction, find it from the calling frame
            frame = inspect.currentframe()
            caller = frame.f_back.f_back if frame is not None and frame.f_back is not None else None
            candidate = caller.f_locals.get("self") if caller is not None else None
            if not isinstance(candidate, logging.Handler):
                return False
            self.handler = candidate
        stream = getattr(self.handler, "stream", None)
        return bool(stream is not None and hasattr(stream, "isatty") and stream.isatty())

    def __getattr__(self, name: str) -> t.Any:
        if name == "base":
            raise AttributeError(name)
        return getattr(self.base, name)
