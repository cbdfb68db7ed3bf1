__all__ = [
    "AuditSettings",
    "DatabaseSecrets",
    "DatabaseSettings",
    "LoggingSettings",
    "Secrets",
    "Settings",
    "StorageSettings",
    "TranscriptSettings",
]


from .logging import LoggingSettings
from .secrets import DatabaseSecrets, Secrets
from .settings import Settings
from .storage import DatabaseSettings, StorageSettings
from .transcript import AuditSettings, TranscriptSettings
