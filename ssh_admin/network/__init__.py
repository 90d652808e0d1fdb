"""
Network

Politique de timeout d'inactivité pour le transport SSH.
"""

from .interfaces import IIdleTimeoutPolicy, TimeUnit
from .idle_timeout import IdleTimeoutPolicy, InvalidTimeoutError, READ_TIMEOUT_FACTOR

__all__ = [
    # Interfaces
    "IIdleTimeoutPolicy",
    # Enums
    "TimeUnit",
    # Implementations
    "IdleTimeoutPolicy",
    "READ_TIMEOUT_FACTOR",
    # Exceptions
    "InvalidTimeoutError",
]
