"""JSON with the encoders registrar values need: models, timestamps, enums, keys and marks."""

from __future__ import annotations

import datetime
import decimal
import enum
import json as pyjson
import typing as t
import uuid

import pydantic as p

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]

Encoder = t.Callable[[t.Any], JSONValue]

# checked in order, so subclasses must precede their bases
ENCODERS: tuple[tuple[type, Encoder], ...] = (
    (p.BaseModel, lambda o: o.model_dump(mode="json")),
    (datetime.datetime, lambda o: o.isoformat()),
    (datetime.date, lambda o: o.isoformat()),
    (enum.Enum, lambda o: o.value),
    (decimal.Decimal, str),
    (uuid.UUID, str),
    (set, sorted),
    (frozenset, sorted),
)


class JSONEncoder(pyjson.JSONEncoder):
    encoders: t.ClassVar[tuple[tuple[type, Encoder], ...]] = ENCODERS

    def default(self, o: t.Any) -> JSONValue:
        for tp, encode in self.encoders:
            if isinstance(o, tp):
                return encode(o)
        return super().default(o)


def dumps(obj: t.Any, *, indent: int | None = None, sort_keys: bool = False, **kw: t.Any) -> str:
    kw.setdefault("cls", JSONEncoder)
    return pyjson.dumps(obj, indent=indent, sort_keys=sort_keys, **kw)


def loads(s: str | bytes | bytearray, **kw: t.Any) -> t.Any:
    return pyjson.loads(s, **kw)
