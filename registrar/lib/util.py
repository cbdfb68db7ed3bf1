import typing as t
from collections.abc import Mapping

KT = t.TypeVar("KT")
VT = t.TypeVar("VT")
RecursiveMapping = VT | Mapping[KT, "RecursiveMapping[KT, VT]"]


def deep_update(
    d1: dict[KT, RecursiveMapping[KT, VT]], d2: Mapping[KT, RecursiveMapping[KT, VT]]
) -> dict[KT, RecursiveMapping[KT, VT]]:
    """Merge `d2` into a copy of `d1`, descending into mappings present in both."""
    result = d1.copy()
    for k, v in d2.items():
        if isinstance(v, Mapping) and k in result and isinstance(result[k], Mapping):
            result[k] = deep_update(dict(result[k]), v)  # type: ignore
        else:
            result[k] = v
    return result


def deep_merge(*ds: Mapping[KT, RecursiveMapping[KT, VT]]) -> dict[KT, RecursiveMapping[KT, VT]]:
    merged: dict[KT, RecursiveMapping[KT, VT]] = {}
    for d in ds:
        merged = deep_update(merged, d)
    return merged
