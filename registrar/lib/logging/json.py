import typing as t

from registrar.lib.json import JSONEncoder as BaseJSONEncoder
from registrar.lib.json import JSONValue


class JSONEncoder(BaseJSONEncoder):
    """Never fails on a log record: unknown values are written as their repr"""

    def default(self, o: t.Any) -> JSONValue:
        try:
            return super().default(o)
        except TypeError:
            return repr(o)
