"""
Logging

Module de logging structuré:
- Une ligne JSON par entrée, écriture atomique
- Timestamp ISO 8601 UTC
- Niveaux standard
- Masquage des secrets
"""

from .interfaces import (
    # Enums
    LogLevel,
    # Dataclasses
    LogEntry,
    LogConfig,
    # Interfaces
    IStructuredLogger,
    ISensitiveMasker,
)
from .sensitive_masker import SensitiveMasker
from .structured_logger import (
    StructuredLogger,
    MissingRequiredFieldError,
    file_handler,
    stream_handler,
)

__all__ = [
    # Enums
    "LogLevel",
    # Dataclasses
    "LogEntry",
    "LogConfig",
    # Interfaces
    "IStructuredLogger",
    "ISensitiveMasker",
    # Implementations
    "SensitiveMasker",
    "StructuredLogger",
    "file_handler",
    "stream_handler",
    # Exceptions
    "MissingRequiredFieldError",
]
