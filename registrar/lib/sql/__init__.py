__all__ = [
    "DebugSession",
    "DebugQuery",
]

from .session import DebugQuery, DebugSession
