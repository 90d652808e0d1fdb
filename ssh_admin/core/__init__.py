"""
Core

Configuration du service et décodage des clés publiques SSH.
"""

from .interfaces import (
    AdminSshConfig,
    IConfigLoader,
    IConfigValidator,
    IKeyCodec,
    PublicKey,
    ValidationError,
    ValidationResult,
    ValidationSeverity,
)
from .config_loader import ConfigLoader, ConfigIntegrityError
from .config_validator import ConfigValidator
from .key_codec import KeyCodec, KeyDecodeError

__all__ = [
    # Interfaces
    "IConfigLoader",
    "IConfigValidator",
    "IKeyCodec",
    # Data classes
    "AdminSshConfig",
    "PublicKey",
    "ValidationError",
    "ValidationResult",
    "ValidationSeverity",
    # Implementations
    "ConfigLoader",
    "ConfigValidator",
    "KeyCodec",
    # Exceptions
    "ConfigIntegrityError",
    "KeyDecodeError",
]
