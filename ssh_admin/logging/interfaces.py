"""
Logging - Interfaces

Interfaces pour logging structuré du service SSH d'administration.

Règles:
    - Une entrée = un objet JSON sur une ligne
    - Champs obligatoires: timestamp, level, logger, message
    - Timestamp ISO 8601 UTC avec millisecondes
    - Niveaux: DEBUG, INFO, WARN, ERROR, CRITICAL
    - Secrets (mots de passe, clés privées) JAMAIS en clair
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class LogLevel(Enum):
    """
    Niveaux de log standard.

    Ordre de sévérité: DEBUG < INFO < WARN < ERROR < CRITICAL
    """

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @classmethod
    def get_priority(cls, level: "LogLevel") -> int:
        """Retourne la priorité du niveau (plus haut = plus sévère)."""
        priorities = {
            cls.DEBUG: 0,
            cls.INFO: 1,
            cls.WARN: 2,
            cls.ERROR: 3,
            cls.CRITICAL: 4,
        }
        return priorities.get(level, 0)


@dataclass
class LogEntry:
    """
    Entrée de log structurée.

    Attributes:
        timestamp: ISO 8601 UTC
        level: Niveau de log
        logger_name: Nom du logger (ex: "ssh_admin.access")
        message: Message ou nom d'événement (ex: "ssh_admin.login")
        correlation_id: Identifiant de session SSH si connu
        extra: Champs structurés additionnels
    """

    timestamp: str
    level: LogLevel
    logger_name: str
    message: str
    correlation_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convertit en dictionnaire."""
        result: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "level": self.level.value,
            "logger": self.logger_name,
            "message": self.message,
        }
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        if self.extra:
            result["extra"] = self.extra
        return result

    def to_json(self) -> str:
        """Convertit en JSON sur une ligne."""
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)


@dataclass
class LogConfig:
    """Configuration du logger structuré."""

    min_level: LogLevel = LogLevel.INFO
    include_extra: bool = True
    mask_sensitive: bool = True
    omit_none_values: bool = True
    max_captured_entries: int = 1000


class IStructuredLogger(ABC):
    """Interface logger structuré."""

    @abstractmethod
    def log(
        self,
        level: LogLevel,
        message: str,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> Optional[LogEntry]:
        """
        Log structuré JSON.

        Args:
            level: Niveau de log
            message: Message à logger
            correlation_id: Identifiant de session (optionnel)
            **extra: Données supplémentaires

        Returns:
            LogEntry créé ou None si filtré par niveau
        """
        pass

    @abstractmethod
    def debug(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau DEBUG."""
        pass

    @abstractmethod
    def info(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau INFO."""
        pass

    @abstractmethod
    def warn(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau WARN."""
        pass

    @abstractmethod
    def error(self, message: str, **extra: Any) -> Optional[LogEntry]:
        """Log niveau ERROR."""
        pass

    @abstractmethod
    def get_entries(self) -> List[LogEntry]:
        """Retourne les entrées de log capturées."""
        pass


class ISensitiveMasker(ABC):
    """Interface masquage données sensibles."""

    SENSITIVE_PATTERNS: List[str] = [
        "password",
        "passwd",
        "passphrase",
        "secret",
        "private_key",
        "credential",
        "token",
    ]

    MASK_VALUE: str = "***MASKED***"

    @abstractmethod
    def mask(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Masque données sensibles dans un dictionnaire.

        Returns:
            Copie avec données sensibles masquées
        """
        pass

    @abstractmethod
    def is_sensitive_key(self, key: str) -> bool:
        """Vérifie si clé est sensible."""
        pass
