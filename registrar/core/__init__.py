__all__ = [
    "di",
    "error",
    "LoggingProvider",
    "RegistrarContainer",
    "Secrets",
    "Settings",
    "TimestampProvider",
]


from . import di, error
from .config import Secrets, Settings
from .provider import LoggingProvider, TimestampProvider
from .container import RegistrarContainer  # isort: skip
