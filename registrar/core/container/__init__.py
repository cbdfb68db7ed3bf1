__all__ = [
    "RegistrarContainer",
    "StorageContainer",
    "TranscriptContainer",
]

from .registrar import RegistrarContainer
from .storage import StorageContainer
from .transcript import TranscriptContainer
